"""Remote chat-completion clients for OpenAI-compatible APIs."""

from .base import ChatCompletionClient, extract_content, is_temperature_rejection
from .chat_completions import RemoteClient
from .streaming import StreamingRemoteClient, SSEStreamDecoder, DeltaCallback
from .prompts import DEFAULT_SYSTEM_PROMPT, build_messages, messages_payload

__all__ = [
    "ChatCompletionClient",
    "RemoteClient",
    "StreamingRemoteClient",
    "SSEStreamDecoder",
    "DeltaCallback",
    "DEFAULT_SYSTEM_PROMPT",
    "build_messages",
    "messages_payload",
    "extract_content",
    "is_temperature_rejection",
]
