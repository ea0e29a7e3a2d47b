"""Tests for provider dispatch and local fallback."""

import httpx
import pytest

from conftest import chat_completion, sse_delta, sse_response
from promptenhancer.core.exceptions import MissingCredential, RemoteHttpError
from promptenhancer.core.resolver import resolve_config
from promptenhancer.enhancement import EnhancementDispatcher, LocalEnhancer, enhance, enhance_sync
from promptenhancer.enhancement.dispatcher import MISSING_KEY_WARNING
from promptenhancer.providers import RemoteClient, StreamingRemoteClient


def make_dispatcher(transport, on_warning=None):
    return EnhancementDispatcher(
        remote_client=RemoteClient(transport=transport),
        streaming_client=StreamingRemoteClient(transport=transport),
        on_warning=on_warning,
    )


class FailingRemote(RemoteClient):
    """Remote client that always raises."""

    def __init__(self, error):
        super().__init__()
        self.error = error

    async def enhance(self, text, config, api_key):
        raise self.error


class TestLocalProvider:
    """Local provider never touches the network."""

    @pytest.mark.asyncio
    async def test_local(self, local_config, login_prompt, failing_transport):
        result = await make_dispatcher(failing_transport).enhance(login_prompt, local_config, "sk-unused")

        assert result.text == LocalEnhancer().enhance(login_prompt)
        assert f"**Goal:** {login_prompt}" in result.text
        assert result.provider == "local"
        assert not result.fell_back
        assert result.warnings == []
        assert result.processing_time_ms >= 0

    @pytest.mark.asyncio
    async def test_unknown_provider_is_local(self, login_prompt, failing_transport):
        config = resolve_config({"provider": "mystery"})
        result = await make_dispatcher(failing_transport).enhance(login_prompt, config, "sk")
        assert result.provider == "local"
        assert not result.fell_back


class TestRemoteProvider:
    """Remote provider with and without a credential."""

    @pytest.mark.asyncio
    async def test_missing_key_falls_back(self, remote_config, login_prompt, failing_transport):
        seen = []
        dispatcher = make_dispatcher(failing_transport, on_warning=seen.append)

        result = await dispatcher.enhance(login_prompt, remote_config, None)

        assert result.text == LocalEnhancer().enhance(login_prompt)
        assert result.fell_back
        assert result.warnings == [MISSING_KEY_WARNING]
        assert seen == [MISSING_KEY_WARNING]

    @pytest.mark.asyncio
    async def test_empty_key_falls_back(self, remote_config, login_prompt, failing_transport):
        result = await make_dispatcher(failing_transport).enhance(login_prompt, remote_config, "")
        assert result.fell_back

    @pytest.mark.asyncio
    async def test_non_streaming_success(self, remote_config, recording_transport):
        transport = recording_transport([lambda: httpx.Response(200, json=chat_completion("# Better"))])

        result = await make_dispatcher(transport).enhance("make it better", remote_config, "sk")

        assert result.text == "# Better"
        assert result.provider == "remote"
        assert result.remote
        assert not result.streamed
        assert "stream" not in transport.bodies[0]

    @pytest.mark.asyncio
    async def test_streaming_success(self, streaming_config, recording_transport):
        chunks = [(sse_delta("# Be") + sse_delta("tter") + "data: [DONE]\n\n").encode("utf-8")]
        transport = recording_transport([lambda: sse_response(chunks)])
        received = []

        result = await make_dispatcher(transport).enhance(
            "make it better", streaming_config, "sk", on_delta=received.append
        )

        assert result.text == "# Better"
        assert result.streamed
        assert received == ["# Be", "tter"]

    @pytest.mark.asyncio
    async def test_http_error_falls_back(self, remote_config, recording_transport, login_prompt):
        transport = recording_transport([lambda: httpx.Response(500, text="server on fire")])
        seen = []

        result = await make_dispatcher(transport, on_warning=seen.append).enhance(
            login_prompt, remote_config, "sk"
        )

        assert result.text == LocalEnhancer().enhance(login_prompt)
        assert result.fell_back
        assert not result.remote
        assert result.warnings == ["Enhancement failed: Remote error 500: server on fire"]
        assert seen == result.warnings

    @pytest.mark.asyncio
    async def test_streaming_failure_falls_back(self, streaming_config, recording_transport, login_prompt):
        transport = recording_transport([lambda: sse_response([b"data: [DONE]\n\n"])])

        result = await make_dispatcher(transport).enhance(login_prompt, streaming_config, "sk")

        assert result.fell_back
        assert not result.streamed
        assert result.text == LocalEnhancer().enhance(login_prompt)
        assert result.warnings[0].startswith("Enhancement failed:")

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_back(self, remote_config, login_prompt):
        dispatcher = EnhancementDispatcher(remote_client=FailingRemote(RuntimeError("kaboom")))

        result = await dispatcher.enhance(login_prompt, remote_config, "sk")

        assert result.fell_back
        assert result.warnings == ["Enhancement failed: kaboom"]

    @pytest.mark.asyncio
    async def test_openai_alias(self, recording_transport):
        config = resolve_config({"provider": "openai", "remote": {"streaming": False}})
        transport = recording_transport([lambda: httpx.Response(200, json=chat_completion("ok"))])

        result = await make_dispatcher(transport).enhance("make it better", config, "sk")

        assert result.text == "ok"
        assert result.provider == "openai"


class TestRequireKey:
    """Tests for the credential guard."""

    def test_present(self):
        assert EnhancementDispatcher.require_key("sk") == "sk"

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_missing(self, api_key):
        with pytest.raises(MissingCredential) as exc_info:
            EnhancementDispatcher.require_key(api_key)
        assert exc_info.value.message == MISSING_KEY_WARNING


class TestConvenienceFunctions:
    """Tests for module-level helpers."""

    @pytest.mark.asyncio
    async def test_enhance_with_raw_settings(self, login_prompt):
        result = await enhance(login_prompt, settings={"provider": "local"})
        assert result.text.startswith("# Enhanced Prompt")

    def test_enhance_sync(self, login_prompt):
        result = enhance_sync(login_prompt)
        assert f"**Goal:** {login_prompt}" in result.text

    def test_dispatcher_enhance_sync(self, remote_config, login_prompt):
        dispatcher = EnhancementDispatcher(remote_client=FailingRemote(RemoteHttpError(401, "nope")))
        result = dispatcher.enhance_sync(login_prompt, remote_config, "sk")
        assert result.warnings == ["Enhancement failed: Remote error 401: nope"]
