"""Shared pytest fixtures for promptenhancer tests."""

import json
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import httpx
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from promptenhancer.core.config import get_settings, reload_settings
from promptenhancer.core.resolver import resolve_config
from promptenhancer.core.types import PlacementAction


ENV_VARS = [
    "PE_PROVIDER", "PE_TONE", "PE_DEFAULT_ACTION", "PE_SYSTEM_PROMPT",
    "PE_COPY_TO_CLIPBOARD", "PE_POST_ACTION_PROMPT", "PE_ASK_INPUT_SOURCE",
    "PE_MODEL", "PE_API_BASE", "PE_API_KEY", "PE_TEMPERATURE",
    "PE_USE_TEMPERATURE", "PE_STREAMING", "PE_API_KEY_ENV_VAR",
    "PE_API_HOST", "PE_API_PORT", "PE_LOG_LEVEL", "PE_LOG_FILE", "OPENAI_API_KEY",
]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test without ambient environment settings or a .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reload_settings()
    yield
    get_settings.cache_clear()


# Sample prompts
@pytest.fixture
def login_prompt():
    """A typical rough prompt."""
    return "Make the login form nicer and add validation."


@pytest.fixture
def two_sentence_prompt():
    return "Fix the bug. Then ship it."


@pytest.fixture
def long_prompt():
    """A prompt with no sentence terminator, longer than 140 characters."""
    return (
        "refactor the payment service so that retries are handled in one place "
        "and every provider adapter reports errors the same way without duplicating "
        "the backoff logic in each adapter"
    )


# Configurations
@pytest.fixture
def local_config():
    return resolve_config({})


@pytest.fixture
def remote_config():
    """Remote, non-streaming, with a temperature that will be sent."""
    return resolve_config({
        "provider": "remote",
        "remote": {
            "model": "test-model",
            "api_base": "https://llm.test/v1/",
            "temperature": 0.2,
            "use_temperature": True,
            "streaming": False,
        },
    })


@pytest.fixture
def streaming_config():
    return resolve_config({
        "provider": "remote",
        "remote": {"model": "test-model", "api_base": "https://llm.test/v1", "streaming": True},
    })


# Wire helpers
def chat_completion(content):
    """Non-streaming chat-completion body."""
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def sse_delta(content: str) -> str:
    return f"data: {json.dumps({'choices': [{'delta': {'content': content}}]})}\n\n"


async def _aiter(chunks: Iterable[bytes]):
    for chunk in chunks:
        yield chunk


def sse_response(chunks: List[bytes], status_code: int = 200) -> httpx.Response:
    """Streaming response that delivers ``chunks`` exactly as given."""
    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream"},
        content=_aiter(chunks),
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that replays responses in order and records requests."""

    def __init__(self, responses: List[Callable[[], httpx.Response]]):
        self.requests: List[httpx.Request] = []
        self._responses = list(responses)
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("Unexpected extra request")
        return self._responses.pop(0)()

    @property
    def bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]


class FailingTransport(httpx.MockTransport):
    """Transport that must never be used."""

    def __init__(self):
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"Unexpected network call to {request.url}")


@pytest.fixture
def recording_transport():
    """Factory for RecordingTransport."""
    return RecordingTransport


@pytest.fixture
def failing_transport():
    return FailingTransport()


# Host double
class FakeHost:
    """In-memory Host that scripts user answers and records effects."""

    def __init__(
        self,
        selection: Optional[str] = None,
        typed_input: Optional[str] = None,
        clipboard: Optional[str] = None,
        input_source: Optional[str] = None,
        post_action: Optional[str] = None
    ):
        self.selection = selection
        self.typed_input = typed_input
        self.clipboard = clipboard
        self.input_source = input_source
        self.post_action = post_action
        self.prompted = False
        self.asked_source_with: Optional[str] = None
        self.preview: List[str] = []
        self.applied: List[tuple] = []
        self.copied: List[str] = []
        self.infos: List[str] = []
        self.warnings: List[str] = []

    def get_active_selection(self):
        return self.selection

    def prompt_for_input(self):
        self.prompted = True
        return self.typed_input

    def read_clipboard(self):
        return self.clipboard

    def choose_input_source(self, clipboard_hint):
        self.asked_source_with = clipboard_hint
        return self.input_source

    def choose_post_action(self):
        return self.post_action

    def write_preview(self, delta):
        self.preview.append(delta)

    def apply_result(self, text, action: PlacementAction):
        self.applied.append((text, action))

    def copy_to_clipboard(self, text):
        self.copied.append(text)
        return True

    def show_info(self, message):
        self.infos.append(message)

    def show_warning(self, message):
        self.warnings.append(message)


@pytest.fixture
def fake_host():
    """Factory for FakeHost."""
    return FakeHost
