"""API request schemas."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator

from ...host import MIN_INPUT_LENGTH


class EnhanceRequest(BaseModel):
    """Request for prompt enhancement."""
    prompt: str = Field(..., description="The rough prompt to enhance (at least 3 characters)")
    provider: Optional[str] = Field(
        None,
        description="Provider: local or remote (default from server settings)"
    )
    tone: Optional[str] = Field(
        None,
        description="Output tone: concise, balanced, detailed"
    )
    system_prompt: Optional[str] = Field(
        None,
        description="Override for the remote system instructions"
    )
    model: Optional[str] = Field(None, description="Remote model identifier")
    api_base: Optional[str] = Field(None, description="Remote API base URL")
    api_key: Optional[str] = Field(
        None,
        description="API key for the remote provider (default: server credential)"
    )
    temperature: Optional[float] = Field(
        None,
        description="Temperature to send; omitted from the remote request when null"
    )
    streaming: Optional[bool] = Field(
        None,
        description="Use the streaming remote client"
    )

    @field_validator("prompt")
    @classmethod
    def prompt_long_enough(cls, value: str) -> str:
        if len(value.strip()) < MIN_INPUT_LENGTH:
            raise ValueError(f"prompt must contain at least {MIN_INPUT_LENGTH} non-blank characters")
        return value

    def to_raw(self) -> Dict[str, Any]:
        """Raw settings overrides for ``resolve_config``."""
        raw: Dict[str, Any] = {}
        remote: Dict[str, Any] = {}
        for key in ("provider", "tone", "system_prompt"):
            value = getattr(self, key)
            if value is not None:
                raw[key] = value
        for key in ("model", "api_base", "streaming"):
            value = getattr(self, key)
            if value is not None:
                remote[key] = value
        if self.temperature is not None:
            remote["temperature"] = self.temperature
            remote["use_temperature"] = True
        if remote:
            raw["remote"] = remote
        return raw
