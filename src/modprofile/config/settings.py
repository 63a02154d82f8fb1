"""
Application settings and configuration.

This module provides centralized access to application settings with automatic
persistence to disk. Settings are stored as JSON in a platform-specific location:

- Windows: %APPDATA%/LocalLow/modprofile/settings.json
- macOS: ~/Library/Application Support/modprofile/settings.json
- Linux: ~/.config/modprofile/settings.json

The core never reads these settings. Callers consult the confirmation flags
before invoking a deletion and pass the backup directory to the store.

Example:
    from modprofile.config.settings import get_settings, get_settings_manager

    settings = get_settings()
    if settings.confirm_profile_deletion:
        ...

    manager = get_settings_manager()
    manager.update(backup_path=Path("/mnt/backups"))
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional
import logging

from ..infrastructure.paths import (
    get_default_backup_directory,
    get_settings_file_path,
)


SETTINGS_VERSION = "0.0.0"

_PATH_FIELDS = ("log_file_path", "backup_path", "mod_data_path")


@dataclass
class AppSettings:
    """Application-wide settings."""

    # Logging settings
    log_level: int = logging.INFO
    log_to_file: bool = True
    log_file_path: Optional[Path] = None

    # Deletion prompts
    confirm_mod_deletion: bool = True
    confirm_profile_deletion: bool = True

    # Storage
    backup_path: Optional[Path] = None
    mod_data_path: Optional[Path] = None

    def get_backup_directory(self) -> Path:
        """Get the configured backup directory, or the default one."""
        return self.backup_path or get_default_backup_directory()


class SettingsManager:
    """
    Manages loading and saving application settings.
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize the settings manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        if config_file is None:
            config_file = get_settings_file_path()

        self.config_file = config_file
        self._settings = AppSettings()
        self._logger = logging.getLogger(__name__)

    def load(self) -> AppSettings:
        """
        Load settings from configuration file.

        Unreadable files and files written by an unknown settings version are
        logged and ignored; defaults are used instead.

        Returns:
            The loaded settings object.
        """
        if not self.config_file.exists():
            self._logger.info(f"Settings file not found at {self.config_file}, using defaults")
            return self._settings

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._logger.error(f"Failed to parse settings file: {e}. Using defaults.")
            return self._settings
        except OSError as e:
            self._logger.error(f"Failed to load settings: {e}. Using defaults.")
            return self._settings

        if not isinstance(data, dict):
            self._logger.error("Settings file does not contain an object. Using defaults.")
            return self._settings

        # Files without a version predate versioned settings and share the 0.0.0 layout
        version = data.pop('version', SETTINGS_VERSION)
        if version != SETTINGS_VERSION:
            self._logger.error(f"Unsupported settings version {version!r}. Using defaults.")
            return self._settings

        # Convert Path strings back to Path objects
        for key in _PATH_FIELDS:
            if data.get(key):
                data[key] = Path(data[key])

        for key, value in data.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)
            else:
                self._logger.warning(f"Ignoring unknown setting: {key}")

        self._logger.info(f"Settings loaded from {self.config_file}")
        return self._settings

    def save(self, settings: Optional[AppSettings] = None) -> None:
        """
        Save settings to configuration file.

        Args:
            settings: Settings object to save. If None, saves current settings.
        """
        if settings is not None:
            self._settings = settings

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            data = {'version': SETTINGS_VERSION}
            data.update(asdict(self._settings))

            # Convert Path objects to strings with forward slashes for JSON serialization
            for key in _PATH_FIELDS:
                if data.get(key):
                    data[key] = str(Path(data[key])).replace('\\', '/')

            # Atomic write: write to temp file, then rename
            temp_file = self.config_file.with_suffix('.tmp')
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            temp_file.replace(self.config_file)

            self._logger.info(f"Settings saved to {self.config_file}")

        except OSError as e:
            self._logger.error(f"Failed to save settings: {e}")

    def get(self) -> AppSettings:
        """
        Get the current settings.

        Returns:
            The current settings object.
        """
        return self._settings

    def update(self, **kwargs) -> None:
        """
        Update specific settings and auto-save.

        Args:
            **kwargs: Setting names and values to update.
        """
        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)
            else:
                self._logger.warning(f"Ignoring unknown setting: {key}")

        self.save()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values and save."""
        self._settings = AppSettings()
        self.save()


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings_manager() -> SettingsManager:
    """
    Get the global settings manager instance.

    Returns:
        The global SettingsManager.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
        _settings_manager.load()
        _settings_manager.save()
    return _settings_manager


def get_settings() -> AppSettings:
    """
    Get the current application settings.

    Returns:
        The current AppSettings object.
    """
    return get_settings_manager().get()
