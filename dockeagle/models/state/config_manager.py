"""Settings persistence backed by a YAML file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from dockeagle.constants.values import APP_NAME, CONFIG_ENV_VAR
from dockeagle.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Load and save AppSettings."""

    FILE_NAME = "settings.yaml"

    @classmethod
    def default_path(cls) -> Path:
        """Resolve the settings file path.

        ``$DOCKEAGLE_CONFIG`` wins; otherwise the file lives under the XDG
        config home.
        """
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override).expanduser()
        config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        return Path(config_home) / APP_NAME / cls.FILE_NAME

    @classmethod
    def load(cls, path: Path | None = None) -> AppSettings:
        """Load settings, falling back to defaults when no file exists.

        Raises:
            ConfigLoadError: if the file cannot be read, parsed or validated.
        """
        config_path = path or cls.default_path()
        if not config_path.exists():
            logger.debug("No settings file at %s, using defaults", config_path)
            return AppSettings()

        try:
            with open(config_path, encoding="utf-8") as handle:
                raw = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"Failed to read {config_path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigLoadError(f"Settings file {config_path} must contain a mapping")

        try:
            return AppSettings.model_validate(raw)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid settings in {config_path}: {e}") from e

    @classmethod
    def save(cls, settings: AppSettings, path: Path | None = None) -> Path:
        """Write settings as YAML and return the path written."""
        config_path = path or cls.default_path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as handle:
                yaml.safe_dump(
                    settings.model_dump(mode="json"),
                    handle,
                    default_flow_style=False,
                    sort_keys=False,
                )
        except (OSError, yaml.YAMLError) as e:
            raise ConfigSaveError(f"Failed to write {config_path}: {e}") from e
        return config_path


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
]
