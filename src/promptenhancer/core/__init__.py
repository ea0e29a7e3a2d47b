"""Core module - foundational types, configuration, and errors."""

from .types import (
    Message,
    PromptRole,
    Provider,
    Tone,
    PlacementAction,
    ResolvedAction,
    RemoteConfig,
    EnhancementConfig,
    EnhancementResult,
)
from .config import Settings, get_settings, reload_settings, load_raw_settings
from .resolver import resolve_config, parse_action
from .credentials import (
    CredentialStore,
    MemoryCredentialStore,
    EnvironmentCredentialStore,
    resolve_api_key,
)
from .exceptions import (
    PromptEnhancerError,
    ConfigurationError,
    MissingCredential,
    RemoteError,
    RemoteUnavailable,
    RemoteHttpError,
    RemoteEmptyResponse,
)

__all__ = [
    # Types
    "Message",
    "PromptRole",
    "Provider",
    "Tone",
    "PlacementAction",
    "ResolvedAction",
    "RemoteConfig",
    "EnhancementConfig",
    "EnhancementResult",
    # Configuration
    "Settings",
    "get_settings",
    "reload_settings",
    "load_raw_settings",
    "resolve_config",
    "parse_action",
    # Credentials
    "CredentialStore",
    "MemoryCredentialStore",
    "EnvironmentCredentialStore",
    "resolve_api_key",
    # Exceptions
    "PromptEnhancerError",
    "ConfigurationError",
    "MissingCredential",
    "RemoteError",
    "RemoteUnavailable",
    "RemoteHttpError",
    "RemoteEmptyResponse",
]
