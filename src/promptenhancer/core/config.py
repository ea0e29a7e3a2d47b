"""Configuration management using Pydantic settings.

Every field is loaded as a raw, optional string. Type coercion and defaults
live in :mod:`promptenhancer.core.resolver`, so a malformed environment value
never fails settings validation.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Union
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)

_SUB_CONFIG = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


class EnhancerSettings(BaseSettings):
    """Top-level enhancement behaviour."""

    provider: Optional[str] = Field(None, alias="PE_PROVIDER")
    tone: Optional[str] = Field(None, alias="PE_TONE")
    default_action: Optional[str] = Field(None, alias="PE_DEFAULT_ACTION")
    system_prompt: Optional[str] = Field(None, alias="PE_SYSTEM_PROMPT")
    copy_to_clipboard: Optional[str] = Field(None, alias="PE_COPY_TO_CLIPBOARD")
    post_action_prompt: Optional[str] = Field(None, alias="PE_POST_ACTION_PROMPT")
    ask_input_source_when_no_selection: Optional[str] = Field(None, alias="PE_ASK_INPUT_SOURCE")

    model_config = _SUB_CONFIG


class RemoteSettings(BaseSettings):
    """Remote chat-completion provider configuration."""

    model: Optional[str] = Field(None, alias="PE_MODEL")
    api_base: Optional[str] = Field(None, alias="PE_API_BASE")
    api_key: Optional[str] = Field(None, alias="PE_API_KEY")
    temperature: Optional[str] = Field(None, alias="PE_TEMPERATURE")
    use_temperature: Optional[str] = Field(None, alias="PE_USE_TEMPERATURE")
    streaming: Optional[str] = Field(None, alias="PE_STREAMING")
    api_key_env_var: str = Field("OPENAI_API_KEY", alias="PE_API_KEY_ENV_VAR")

    model_config = _SUB_CONFIG


class APISettings(BaseSettings):
    """API server configuration."""

    host: Optional[str] = Field(None, alias="PE_API_HOST")
    port: Optional[str] = Field(None, alias="PE_API_PORT")

    model_config = _SUB_CONFIG


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("WARNING", alias="PE_LOG_LEVEL")
    file: Optional[str] = Field(None, alias="PE_LOG_FILE")

    model_config = _SUB_CONFIG


class Settings(BaseSettings):
    """Root configuration aggregating all settings."""

    enhancer: EnhancerSettings = Field(default_factory=EnhancerSettings)
    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore"
    }

    def to_raw(self) -> Dict[str, Any]:
        """Raw mapping for ``resolve_config``; unset values are left out."""
        raw: Dict[str, Any] = {
            key: value
            for key, value in self.enhancer.model_dump().items()
            if value is not None
        }
        remote = {
            key: value
            for key, value in self.remote.model_dump(exclude={"api_key_env_var"}).items()
            if value is not None
        }
        if remote:
            raw["remote"] = remote
        return raw


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()


def merge_raw(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two raw settings mappings; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_raw(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings_file(path: Union[str, Path], strict: bool = False) -> Dict[str, Any]:
    """Load a JSON settings file.

    Returns an empty mapping when the file is missing or unreadable, or
    raises ConfigurationError instead when ``strict`` is set.
    """
    config_file = Path(path)

    def reject(message: str, cause: Optional[Exception] = None) -> Dict[str, Any]:
        if strict:
            raise ConfigurationError(message, config_key=str(config_file), cause=cause)
        logger.warning(message)
        return {}

    if not config_file.exists():
        return reject(f"Settings file not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        return reject(f"Failed to load settings from {config_file}: {e}", e)

    if not isinstance(data, dict):
        return reject(f"Ignoring settings file {config_file}: top level is not an object")

    logger.info(f"Loaded settings from {config_file}")
    return data


def load_raw_settings(
    config_file: Optional[Union[str, Path]] = None,
    settings: Optional[Settings] = None,
    strict: bool = False
) -> Dict[str, Any]:
    """
    Collect raw settings from a JSON file and the environment.

    Environment values override file values.

    Args:
        config_file: Optional JSON settings file
        settings: Settings instance (defaults to the cached one)
        strict: Raise ConfigurationError for a bad settings file

    Returns:
        Raw mapping ready for ``resolve_config``
    """
    settings = settings or get_settings()
    raw = load_settings_file(config_file, strict) if config_file else {}
    return merge_raw(raw, settings.to_raw())
