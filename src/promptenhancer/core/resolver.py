"""Turn raw, loosely-typed settings into an ``EnhancementConfig``.

This is the only place that deals with missing or wrongly-typed settings.
Nothing here raises: every bad value falls back to its default, and unknown
enum values are passed through unchanged for the consumer to interpret.
"""

import logging
import math
from typing import Any, Mapping, Optional

from .types import (
    EnhancementConfig,
    PlacementAction,
    Provider,
    RemoteConfig,
    ResolvedAction,
    Tone,
)


logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = Provider.LOCAL.value
DEFAULT_TONE = Tone.BALANCED.value
DEFAULT_ACTION = PlacementAction.INSERT_BELOW.value
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8000

COPY_SUFFIX = "andcopy"
COPY_ONLY = "copyonly"

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}

# snake_case name -> camelCase spelling used by editor settings files
_ALIASES = {
    "default_action": "defaultAction",
    "system_prompt": "systemPrompt",
    "copy_to_clipboard": "copyToClipboard",
    "post_action_prompt": "postActionPrompt",
    "ask_input_source_when_no_selection": "askInputSourceWhenNoSelection",
    "api_key": "apiKey",
    "api_base": "apiBase",
    "use_temperature": "useTemperature",
}

_REMOTE_SECTIONS = ("openai", "remote")


def parse_action(raw_action: Any, copy_setting: Any = None) -> ResolvedAction:
    """
    Split a raw action setting into a placement action and a copy flag.

    ``"insertBelowAndCopy"`` -> (``"insertBelow"``, True);
    ``"copyOnly"`` -> (``"none"``, True); anything else is used verbatim and
    the copy flag comes from ``copy_setting``.
    """
    if not isinstance(raw_action, str) or not raw_action:
        raw_action = DEFAULT_ACTION

    lowered = raw_action.lower()
    if lowered == COPY_ONLY:
        return ResolvedAction(action=PlacementAction.NONE.value, copy=True)
    if lowered.endswith(COPY_SUFFIX):
        return ResolvedAction(action=raw_action[:-len(COPY_SUFFIX)], copy=True)

    return ResolvedAction(action=raw_action, copy=as_bool(copy_setting, False))


def as_bool(value: Any, default: bool) -> bool:
    """Coerce a bool or a boolean-looking string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    if value is not None:
        logger.debug(f"Ignoring non-boolean setting value {value!r}")
    return default


def as_float(value: Any) -> Optional[float]:
    """Coerce a number or numeric string; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            logger.debug(f"Ignoring non-numeric setting value {value!r}")
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_text(value: Any, default: Optional[str]) -> Optional[str]:
    """Non-empty strings pass through; anything else yields the default."""
    if isinstance(value, str) and value.strip():
        return value
    return default


def as_port(value: Any, default: int = DEFAULT_API_PORT) -> int:
    """Coerce a TCP port number; out-of-range or non-integer values yield the default."""
    number = as_float(value)
    if number is None or not number.is_integer() or not 0 < number < 65536:
        if value is not None:
            logger.warning(f"Ignoring invalid port {value!r}; using {default}")
        return default
    return int(number)


def _lookup(raw: Mapping[str, Any], key: str) -> Any:
    if key in raw:
        return raw[key]
    alias = _ALIASES.get(key)
    if alias and alias in raw:
        return raw[alias]
    return None


def _remote_section(raw: Mapping[str, Any]) -> dict:
    """Gather the remote sub-record from nested sections and dotted keys."""
    section: dict = {}
    for name in _REMOTE_SECTIONS:
        nested = raw.get(name)
        if isinstance(nested, Mapping):
            section.update(nested)
    for name in _REMOTE_SECTIONS:
        prefix = f"{name}."
        for key, value in raw.items():
            if isinstance(key, str) and key.startswith(prefix):
                section[key[len(prefix):]] = value
    return section


def resolve_config(raw: Optional[Mapping[str, Any]] = None) -> EnhancementConfig:
    """
    Build a fully-populated configuration from raw settings.

    Args:
        raw: Mapping of setting values; may be None, partial, or malformed

    Returns:
        EnhancementConfig with every field set
    """
    if not isinstance(raw, Mapping):
        raw = {}

    remote_raw = _remote_section(raw)
    action = parse_action(
        _lookup(raw, "default_action"),
        _lookup(raw, "copy_to_clipboard"),
    )

    remote = RemoteConfig(
        model=as_text(_lookup(remote_raw, "model"), DEFAULT_MODEL),
        api_key=as_text(_lookup(remote_raw, "api_key"), None),
        api_base=as_text(_lookup(remote_raw, "api_base"), DEFAULT_API_BASE),
        temperature=as_float(_lookup(remote_raw, "temperature")),
        use_temperature=as_bool(_lookup(remote_raw, "use_temperature"), False),
        streaming=as_bool(_lookup(remote_raw, "streaming"), True),
    )

    config = EnhancementConfig(
        provider=as_text(_lookup(raw, "provider"), DEFAULT_PROVIDER),
        tone=as_text(_lookup(raw, "tone"), DEFAULT_TONE),
        system_prompt=as_text(_lookup(raw, "system_prompt"), None),
        action=action.action,
        copy_to_clipboard=action.copy,
        post_action_prompt=as_bool(_lookup(raw, "post_action_prompt"), False),
        ask_input_source_when_no_selection=as_bool(
            _lookup(raw, "ask_input_source_when_no_selection"), False
        ),
        remote=remote,
    )
    logger.debug(
        f"Resolved config: provider={config.provider} tone={config.tone} "
        f"action={config.action} copy={config.copy_to_clipboard} "
        f"model={remote.model} streaming={remote.streaming}"
    )
    return config
