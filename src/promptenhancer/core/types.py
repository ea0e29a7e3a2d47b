"""Core type definitions for the prompt enhancement pipeline."""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from enum import Enum


class PromptRole(Enum):
    """Role of a message in a chat-completion request."""
    SYSTEM = "system"
    USER = "user"


class Provider(str, Enum):
    """Known enhancement providers."""
    LOCAL = "local"
    REMOTE = "remote"
    OPENAI = "openai"  # legacy alias of REMOTE


class Tone(str, Enum):
    """Output tone forwarded to the remote provider."""
    CONCISE = "concise"
    BALANCED = "balanced"
    DETAILED = "detailed"


class PlacementAction(str, Enum):
    """Where the enhanced text is delivered."""
    INSERT_BELOW = "insertBelow"
    REPLACE_SELECTION = "replaceSelection"
    OPEN_NEW = "openNew"
    NONE = "none"


REMOTE_PROVIDERS = frozenset({Provider.REMOTE.value, Provider.OPENAI.value})


@dataclass
class Message:
    """Individual message in a chat-completion request."""
    role: PromptRole
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary format for chat-completion APIs."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "Message":
        """Create from dictionary format."""
        return cls(role=PromptRole(data["role"]), content=data["content"])


@dataclass(frozen=True)
class ResolvedAction:
    """Placement action and clipboard flag derived from a raw action setting."""
    action: str
    copy: bool

    @property
    def placement(self) -> PlacementAction:
        """The action as a known placement; unrecognized values map to NONE."""
        try:
            return PlacementAction(self.action)
        except ValueError:
            return PlacementAction.NONE


@dataclass(frozen=True)
class RemoteConfig:
    """Remote chat-completion settings."""
    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    api_base: str = "https://api.openai.com/v1"
    temperature: Optional[float] = None
    use_temperature: bool = False
    streaming: bool = True

    @property
    def effective_temperature(self) -> Optional[float]:
        """Temperature to transmit, or None when it must be omitted."""
        if self.use_temperature and self.temperature is not None:
            return self.temperature
        return None

    @property
    def completions_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/chat/completions"


@dataclass(frozen=True)
class EnhancementConfig:
    """
    Normalized configuration for a single enhancement.

    Produced by ``resolve_config``; never mutated afterwards. Enum-like fields
    are plain strings so unknown values survive resolution unchanged.
    """
    provider: str = Provider.LOCAL.value
    tone: str = Tone.BALANCED.value
    system_prompt: Optional[str] = None
    action: str = PlacementAction.INSERT_BELOW.value
    copy_to_clipboard: bool = False
    post_action_prompt: bool = False
    ask_input_source_when_no_selection: bool = False
    remote: RemoteConfig = field(default_factory=RemoteConfig)

    @property
    def is_remote(self) -> bool:
        return self.provider in REMOTE_PROVIDERS

    @property
    def resolved_action(self) -> ResolvedAction:
        return ResolvedAction(action=self.action, copy=self.copy_to_clipboard)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary with the API key masked."""
        return {
            "provider": self.provider,
            "tone": self.tone,
            "system_prompt": self.system_prompt,
            "action": self.action,
            "copy_to_clipboard": self.copy_to_clipboard,
            "post_action_prompt": self.post_action_prompt,
            "ask_input_source_when_no_selection": self.ask_input_source_when_no_selection,
            "remote": {
                "model": self.remote.model,
                "api_key": "***" if self.remote.api_key else None,
                "api_base": self.remote.api_base,
                "temperature": self.remote.temperature,
                "use_temperature": self.remote.use_temperature,
                "streaming": self.remote.streaming,
            },
        }


@dataclass
class EnhancementResult:
    """Result of one enhancement call."""
    original: str
    text: str
    provider: str
    streamed: bool = False
    fell_back: bool = False
    warnings: List[str] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def remote(self) -> bool:
        """True when the text came from the remote provider."""
        return self.provider in REMOTE_PROVIDERS and not self.fell_back

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "original": self.original,
            "text": self.text,
            "provider": self.provider,
            "streamed": self.streamed,
            "fell_back": self.fell_back,
            "warnings": list(self.warnings),
            "processing_time_ms": self.processing_time_ms,
        }
