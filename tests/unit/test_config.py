"""Tests for settings loading and config resolution."""

import json
import logging

import pytest
from promptenhancer.core.config import (
    Settings,
    load_raw_settings,
    load_settings_file,
    merge_raw,
    reload_settings,
)
from promptenhancer.core.resolver import (
    as_bool,
    as_float,
    as_port,
    parse_action,
    resolve_config,
)
from promptenhancer.core.types import EnhancementConfig, ResolvedAction
from promptenhancer.core.exceptions import ConfigurationError


class TestParseAction:
    """Tests for the action/copy split."""

    @pytest.mark.parametrize("raw,expected", [
        ("insertBelowAndCopy", ResolvedAction("insertBelow", True)),
        ("replaceSelectionAndCopy", ResolvedAction("replaceSelection", True)),
        ("openNewAndCopy", ResolvedAction("openNew", True)),
        ("copyOnly", ResolvedAction("none", True)),
        ("COPYONLY", ResolvedAction("none", True)),
        ("insertBelow", ResolvedAction("insertBelow", False)),
        ("none", ResolvedAction("none", False)),
    ])
    def test_known_actions(self, raw, expected):
        assert parse_action(raw) == expected

    def test_copy_setting_used_without_suffix(self):
        assert parse_action("openNew", True) == ResolvedAction("openNew", True)
        assert parse_action("openNew", "true") == ResolvedAction("openNew", True)

    def test_suffix_forces_copy(self):
        assert parse_action("insertBelowAndCopy", False).copy is True

    def test_unknown_action_passes_through(self):
        assert parse_action("sideways") == ResolvedAction("sideways", False)

    @pytest.mark.parametrize("raw", [None, "", 42])
    def test_missing_action_defaults(self, raw):
        assert parse_action(raw).action == "insertBelow"


class TestCoercion:
    """Tests for the value coercion helpers."""

    @pytest.mark.parametrize("value,expected", [
        (True, True), ("yes", True), ("1", True), ("ON", True),
        (False, False), ("no", False), ("0", False), ("off", False),
    ])
    def test_as_bool(self, value, expected):
        assert as_bool(value, not expected) is expected

    def test_as_bool_default(self):
        assert as_bool("maybe", True) is True
        assert as_bool(None, False) is False
        assert as_bool(1, False) is False

    @pytest.mark.parametrize("value,expected", [
        (0.5, 0.5), (1, 1.0), ("0.3", 0.3), (" 2 ", 2.0),
        ("warm", None), (None, None), (True, None), (float("nan"), None), ("", None),
    ])
    def test_as_float(self, value, expected):
        assert as_float(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("9123", 9123), (8080, 8080), (" 443 ", 443),
        ("eighty", 8000), ("0", 8000), ("70000", 8000), ("80.5", 8000), (None, 8000),
    ])
    def test_as_port(self, value, expected):
        assert as_port(value) == expected


class TestResolveConfig:
    """Tests for resolve_config."""

    @pytest.mark.parametrize("raw", [None, {}, "not a mapping", ["x"]])
    def test_defaults(self, raw):
        assert resolve_config(raw) == EnhancementConfig()

    def test_full_settings(self):
        config = resolve_config({
            "provider": "remote",
            "tone": "detailed",
            "default_action": "replaceSelectionAndCopy",
            "system_prompt": "Be brief.",
            "post_action_prompt": True,
            "ask_input_source_when_no_selection": "true",
            "remote": {
                "model": "m-1",
                "api_key": "sk-1",
                "api_base": "https://llm.test/v1",
                "temperature": "0.4",
                "use_temperature": True,
                "streaming": False,
            },
        })
        assert config.provider == "remote"
        assert config.tone == "detailed"
        assert config.action == "replaceSelection"
        assert config.copy_to_clipboard is True
        assert config.system_prompt == "Be brief."
        assert config.post_action_prompt is True
        assert config.ask_input_source_when_no_selection is True
        assert config.remote.model == "m-1"
        assert config.remote.api_key == "sk-1"
        assert config.remote.temperature == 0.4
        assert config.remote.effective_temperature == 0.4
        assert config.remote.streaming is False

    def test_editor_style_keys(self):
        config = resolve_config({
            "provider": "openai",
            "defaultAction": "copyOnly",
            "openai.model": "gpt-x",
            "openai.apiKey": "sk-2",
            "openai.useTemperature": "yes",
            "openai.temperature": 1,
        })
        assert config.is_remote
        assert config.action == "none"
        assert config.copy_to_clipboard is True
        assert config.remote.model == "gpt-x"
        assert config.remote.api_key == "sk-2"
        assert config.remote.effective_temperature == 1.0

    def test_remote_section_overrides_openai_section(self):
        config = resolve_config({
            "openai": {"model": "old"},
            "remote": {"model": "new"},
        })
        assert config.remote.model == "new"

    def test_wrong_types_fall_back(self):
        config = resolve_config({
            "provider": 3,
            "tone": "",
            "copy_to_clipboard": "perhaps",
            "remote": {"model": None, "temperature": "hot", "streaming": "sometimes"},
        })
        assert config.provider == "local"
        assert config.tone == "balanced"
        assert config.copy_to_clipboard is False
        assert config.remote.model == "gpt-4o-mini"
        assert config.remote.temperature is None
        assert config.remote.streaming is True

    def test_unknown_values_pass_through(self):
        config = resolve_config({"provider": "mystery", "tone": "pirate"})
        assert config.provider == "mystery"
        assert config.tone == "pirate"
        assert not config.is_remote

    def test_logs_resolution(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="promptenhancer.core.resolver"):
            resolve_config({"provider": "remote"})
        assert "provider=remote" in caplog.text


class TestSettings:
    """Tests for environment and file settings."""

    def test_empty_environment(self):
        assert Settings().to_raw() == {}

    def test_environment_values(self, monkeypatch):
        monkeypatch.setenv("PE_PROVIDER", "remote")
        monkeypatch.setenv("PE_DEFAULT_ACTION", "openNewAndCopy")
        monkeypatch.setenv("PE_MODEL", "env-model")
        monkeypatch.setenv("PE_TEMPERATURE", "0.9")
        monkeypatch.setenv("PE_USE_TEMPERATURE", "true")
        monkeypatch.setenv("PE_STREAMING", "false")

        config = resolve_config(reload_settings().to_raw())

        assert config.provider == "remote"
        assert config.action == "openNew"
        assert config.copy_to_clipboard is True
        assert config.remote.model == "env-model"
        assert config.remote.effective_temperature == 0.9
        assert config.remote.streaming is False

    def test_malformed_environment_value_does_not_fail(self, monkeypatch):
        monkeypatch.setenv("PE_STREAMING", "definitely")
        config = resolve_config(reload_settings().to_raw())
        assert config.remote.streaming is True

    def test_malformed_port_does_not_fail(self, monkeypatch):
        monkeypatch.setenv("PE_API_PORT", "eighty")
        settings = reload_settings()
        assert settings.api.port == "eighty"
        assert as_port(settings.api.port) == 8000

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("PE_TONE=concise\n")
        config = resolve_config(reload_settings().to_raw())
        assert config.tone == "concise"

    def test_api_and_logging_defaults(self):
        settings = Settings()
        assert settings.api.host is None
        assert as_port(settings.api.port) == 8000
        assert settings.logging.level == "WARNING"
        assert settings.remote.api_key_env_var == "OPENAI_API_KEY"


class TestSettingsFile:
    """Tests for JSON settings files."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"provider": "remote", "remote": {"model": "file-model"}}))
        assert load_settings_file(path)["remote"]["model"] == "file-model"

    def test_missing_file(self, tmp_path):
        assert load_settings_file(tmp_path / "nope.json") == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert load_settings_file(path) == {}

    def test_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert load_settings_file(path) == {}

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "tone": "detailed",
            "remote": {"model": "file-model", "api_base": "https://file.test/v1"},
        }))
        monkeypatch.setenv("PE_MODEL", "env-model")

        raw = load_raw_settings(path, reload_settings())
        config = resolve_config(raw)

        assert config.tone == "detailed"
        assert config.remote.model == "env-model"
        assert config.remote.api_base == "https://file.test/v1"

    def test_merge_raw_is_recursive(self):
        merged = merge_raw({"a": 1, "remote": {"x": 1, "y": 2}}, {"remote": {"y": 3}})
        assert merged == {"a": 1, "remote": {"x": 1, "y": 3}}

    @pytest.mark.parametrize("content", [None, "{not json", "[1, 2]"])
    def test_strict_rejects_bad_file(self, tmp_path, content):
        path = tmp_path / "settings.json"
        if content is not None:
            path.write_text(content)

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings_file(path, strict=True)

        assert exc_info.value.config_key == str(path)
