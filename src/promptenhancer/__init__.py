"""
promptenhancer - turn rough prompts into structured, actionable ones

A short, informal prompt goes in; a markdown prompt with Goal, Inputs,
Deliverables, Constraints and Steps sections comes out. The text comes from a
deterministic local template or from an OpenAI-compatible chat-completion
API (optionally streamed), with the template as a guaranteed fallback.

Basic Usage:
    >>> from promptenhancer import enhance
    >>>
    >>> result = await enhance("Make the login form nicer and add validation.")
    >>> print(result.text)
    >>>
    >>> # Remote provider, streaming deltas as they arrive
    >>> result = await enhance(
    ...     "Add retries to the uploader",
    ...     settings={"provider": "remote", "remote": {"model": "gpt-4o-mini"}},
    ...     api_key="sk-...",
    ...     on_delta=lambda delta: print(delta, end=""),
    ... )

For more control, use the individual modules:
    - promptenhancer.core: configuration, resolver, credentials, errors
    - promptenhancer.enhancement: local template, dispatcher, command flow
    - promptenhancer.providers: remote clients and the SSE decoder
    - promptenhancer.api: REST API server
    - promptenhancer.cli: Command-line interface
"""

from .core.types import (
    Message,
    PromptRole,
    PlacementAction,
    ResolvedAction,
    RemoteConfig,
    EnhancementConfig,
    EnhancementResult,
)
from .core.exceptions import (
    PromptEnhancerError,
    ConfigurationError,
    MissingCredential,
    RemoteError,
    RemoteUnavailable,
    RemoteHttpError,
    RemoteEmptyResponse,
)
from .core.resolver import resolve_config, parse_action
from .core.credentials import resolve_api_key
from .enhancement import (
    EnhancementDispatcher,
    LocalEnhancer,
    enhance,
    enhance_sync,
    run_enhance_command,
)
from .providers import RemoteClient, StreamingRemoteClient, SSEStreamDecoder


__version__ = "1.0.0"
__all__ = [
    # Core types
    "Message",
    "PromptRole",
    "PlacementAction",
    "ResolvedAction",
    "RemoteConfig",
    "EnhancementConfig",
    "EnhancementResult",
    # Exceptions
    "PromptEnhancerError",
    "ConfigurationError",
    "MissingCredential",
    "RemoteError",
    "RemoteUnavailable",
    "RemoteHttpError",
    "RemoteEmptyResponse",
    # Configuration
    "resolve_config",
    "parse_action",
    "resolve_api_key",
    # Enhancement
    "EnhancementDispatcher",
    "LocalEnhancer",
    "RemoteClient",
    "StreamingRemoteClient",
    "SSEStreamDecoder",
    "enhance",
    "enhance_sync",
    "run_enhance_command",
]
