"""Tests for the settings configuration module."""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from scriptdesk.config.settings import (
    ScriptDeskSettings,
    get_settings,
    get_settings_for_cli,
    reset_settings,
    set_settings,
)
from scriptdesk.exceptions import ConfigurationError


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """Remove SCRIPTDESK_ variables and run from an empty directory."""
    import os

    for name in [k for k in os.environ if k.startswith("SCRIPTDESK_")]:
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


class TestDefaults:
    """Test default values."""

    def test_default_values(self, clean_environment):
        settings = ScriptDeskSettings()
        assert settings.suggestion_limit == 10
        assert settings.suggestion_debounce_ms == 150
        assert settings.suggestion_debounce_scene_ms == 50
        assert settings.suggestion_debounce_immediate_ms == 0
        assert settings.persistence_debounce_ms == 800
        assert settings.persistence_debounce_seconds == 0.8
        assert settings.history_limit == 1000
        assert "app_name" not in ScriptDeskSettings.model_fields
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"
        assert settings.log_file is None

    def test_environment_override(self, clean_environment, monkeypatch):
        monkeypatch.setenv("SCRIPTDESK_PERSISTENCE_DEBOUNCE_MS", "1500")
        monkeypatch.setenv("SCRIPTDESK_LOG_LEVEL", "debug")
        settings = ScriptDeskSettings()
        assert settings.persistence_debounce_ms == 1500
        assert settings.log_level == "DEBUG"

    def test_log_format_normalized(self):
        assert ScriptDeskSettings(log_format="JSON").log_format == "json"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"log_level": "LOUD"},
            {"log_format": "xml"},
            {"suggestion_limit": 0},
            {"persistence_debounce_ms": -1},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            ScriptDeskSettings(**kwargs)

    def test_log_file_expanded(self, tmp_path):
        settings = ScriptDeskSettings(log_file=str(tmp_path / "logs" / "x.log"))
        assert settings.log_file == (tmp_path / "logs" / "x.log").resolve()

    def test_log_file_rejects_collections(self):
        with pytest.raises(ValidationError):
            ScriptDeskSettings(log_file=["a"])


class TestFromFile:
    """Test loading configuration files."""

    def test_yaml(self, clean_environment, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"suggestion_limit": 5}))
        assert ScriptDeskSettings.from_file(path).suggestion_limit == 5

    def test_toml(self, clean_environment, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("persistence_debounce_ms = 300\n")
        assert ScriptDeskSettings.from_file(path).persistence_debounce_ms == 300

    def test_json(self, clean_environment, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"log_format": "structured"}))
        assert ScriptDeskSettings.from_file(path).log_format == "structured"

    def test_empty_yaml(self, clean_environment, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ScriptDeskSettings.from_file(path).suggestion_limit == 10

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[x]")
        with pytest.raises(ConfigurationError) as exc_info:
            ScriptDeskSettings.from_file(path)
        assert exc_info.value.hint is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScriptDeskSettings.from_file(tmp_path / "missing.yaml")

    def test_wrong_key_has_hint(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"debounce_ms": 100}))
        with pytest.raises(ConfigurationError) as exc_info:
            ScriptDeskSettings.from_file(path)
        assert "suggestion_debounce_ms" in exc_info.value.hint


class TestMultipleSources:
    """Test precedence across sources."""

    def test_later_files_win(self, clean_environment, tmp_path):
        first = tmp_path / "a.yaml"
        second = tmp_path / "b.yaml"
        first.write_text(yaml.safe_dump({"suggestion_limit": 3, "debug": True}))
        second.write_text(yaml.safe_dump({"suggestion_limit": 7}))
        settings = ScriptDeskSettings.from_multiple_sources([first, second])
        assert settings.suggestion_limit == 7
        assert settings.debug is True

    def test_cli_overrides_files(self, clean_environment, tmp_path):
        path = tmp_path / "a.yaml"
        path.write_text(yaml.safe_dump({"suggestion_limit": 3}))
        settings = ScriptDeskSettings.from_multiple_sources(
            [path], cli_args={"suggestion_limit": 9, "log_level": None}
        )
        assert settings.suggestion_limit == 9
        assert settings.log_level == "WARNING"

    def test_missing_files_skipped(self, clean_environment, tmp_path):
        settings = ScriptDeskSettings.from_multiple_sources([tmp_path / "nope.yaml"])
        assert settings.suggestion_limit == 10


class TestGlobalSettings:
    """Test the global settings accessors."""

    def test_set_and_reset(self, clean_environment):
        custom = ScriptDeskSettings(suggestion_limit=4)
        set_settings(custom)
        assert get_settings() is custom
        reset_settings()
        assert get_settings() is not custom
        assert get_settings() is get_settings()

    def test_picks_up_local_config_file(self, clean_environment, tmp_path):
        (tmp_path / "scriptdesk.yaml").write_text(
            yaml.safe_dump({"suggestion_limit": 2})
        )
        reset_settings()
        assert get_settings().suggestion_limit == 2

    def test_cli_settings_with_overrides(self, clean_environment):
        settings = get_settings_for_cli(cli_overrides={"log_level": "INFO"})
        assert settings.log_level == "INFO"

    def test_cli_settings_missing_config(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_settings_for_cli(config_file=Path(tmp_path / "missing.yaml"))
