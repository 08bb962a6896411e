"""ScriptDesk configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scriptdesk.exceptions import ConfigurationError, check_config_keys


class ScriptDeskSettings(BaseSettings):
    """ScriptDesk configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
       Example: scriptdesk suggest script.fountain character --limit 5

    2. Config file values (YAML, TOML, or JSON)
       Example: scriptdesk --config myconfig.yaml
       Multiple files: Later files override earlier ones

    3. Environment variables (prefixed with SCRIPTDESK_)
       Example: export SCRIPTDESK_PERSISTENCE_DEBOUNCE_MS=1500

    4. .env file (in current directory or specified path)
       Example: SCRIPTDESK_LOG_LEVEL=DEBUG in .env file

    5. Default values (defined in field declarations below)
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRIPTDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(?i)(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(?i)(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # SmartType settings
    suggestion_limit: int = Field(
        default=10,
        description="Maximum number of SmartType suggestions shown at once",
        ge=1,
        le=100,
    )
    suggestion_debounce_ms: int = Field(
        default=150,
        description="Suggestion debounce for scene-heading locations (stage 2)",
        ge=0,
    )
    suggestion_debounce_scene_ms: int = Field(
        default=50,
        description="Suggestion debounce for scene-heading prefix and time stages",
        ge=0,
    )
    suggestion_debounce_immediate_ms: int = Field(
        default=0,
        description="Suggestion debounce for character and transition elements",
        ge=0,
    )

    # History settings
    history_limit: int | None = Field(
        default=1000,
        description="Maximum undo steps kept; None keeps every snapshot",
        ge=1,
    )

    # Persistence settings
    persistence_debounce_ms: int = Field(
        default=800,
        description="Quiet period before the document is handed to persistence",
        ge=0,
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and resolve path.

        Accepts None, str (env vars and ~ are expanded) and Path. Collections
        are rejected.
        """
        if v is None:
            return None
        if isinstance(v, str):
            expanded = os.path.expandvars(v)
            return Path(expanded).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()

        if isinstance(v, (dict, list, set, tuple)):  # noqa: UP038
            raise ValueError(
                f"Path fields cannot accept {type(v).__name__} types. "
                f"Expected str or Path, got: {v!r}"
            )

        try:
            return Path(str(v)).resolve()
        except (TypeError, ValueError, OSError) as e:
            raise ValueError(
                f"Path fields must be string, Path, or convertible to string. "
                f"Got {type(v).__name__}: {v!r}"
            ) from e

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: Any) -> str:
        """Normalize log format to lowercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.lower()
        raise ValueError(f"log_format must be a string, got {type(v).__name__}")

    @property
    def persistence_debounce_seconds(self) -> float:
        """Persistence debounce interval in seconds."""
        return self.persistence_debounce_ms / 1000.0

    @classmethod
    def from_env(cls) -> ScriptDeskSettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> ScriptDeskSettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        check_config_keys(data)

        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> ScriptDeskSettings:
        """Load settings with proper precedence from multiple sources.

        Precedence (highest to lowest):
        1. CLI arguments
        2. Config files (last file wins)
        3. Environment variables
        4. .env file
        5. Default values

        Args:
            config_files: List of config files to load (later files override earlier).
            env_file: Path to .env file (default: .env in current directory).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        if config_files:
            for config_file in config_files:
                try:
                    file_settings = cls.from_file(config_file)
                except FileNotFoundError:
                    from scriptdesk.config.logging import get_logger as _get_logger

                    _get_logger("scriptdesk.config.settings").warning(
                        "Configuration file not found, using defaults",
                        config_file=str(config_file),
                    )
                    continue
                data.update(file_settings.model_dump(exclude_unset=True))

        if env_file:
            settings = cast(
                "ScriptDeskSettings", cast(Any, cls)(_env_file=env_file, **data)
            )
        else:
            settings = cls(**data)

        if cli_args:
            cli_data = {k: v for k, v in cli_args.items() if v is not None}
            if cli_data:
                updated_data = settings.model_dump()
                updated_data.update(cli_data)
                settings = cls(**updated_data)

        return settings


# Global settings instance
_settings: ScriptDeskSettings | None = None


def _get_config_paths() -> list[Path | str]:
    """Get list of existing config files, lowest priority first."""
    potential_paths = [
        Path.home() / ".config" / "scriptdesk" / "config.yaml",
        Path.home() / ".config" / "scriptdesk" / "config.toml",
        Path.cwd() / "scriptdesk.yaml",
        Path.cwd() / "scriptdesk.json",
        Path.cwd() / "scriptdesk.toml",
    ]

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue
    return existing_paths


def get_settings() -> ScriptDeskSettings:
    """Get the global settings instance.

    Returns:
        Global ScriptDeskSettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = ScriptDeskSettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = ScriptDeskSettings.from_env()
    return _settings


def set_settings(settings: ScriptDeskSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset the global settings instance.

    Forces recreation of settings on next call to get_settings(),
    useful for tests that modify environment variables.
    """
    global _settings
    _settings = None


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ScriptDeskSettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load.
        cli_overrides: CLI argument overrides; None values are ignored.

    Returns:
        ScriptDeskSettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return ScriptDeskSettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    if cli_overrides:
        filtered = {k: v for k, v in cli_overrides.items() if v is not None}
        if filtered:
            data = settings.model_dump()
            data.update(filtered)
            settings = ScriptDeskSettings(**data)
    return settings
