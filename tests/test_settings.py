"""
Tests for the SettingsManager persistence behaviour.

These tests verify that settings are saved and loaded correctly and that the
global settings manager uses the persistent data directory when no custom
config_file is provided.
"""
from __future__ import annotations

from pathlib import Path
import json
import logging


def test_save_and_load(tmp_path: Path):
    from src.modprofile.config.settings import SettingsManager

    config_file = tmp_path / "settings.json"

    # Create a manager with a custom file path
    manager = SettingsManager(config_file=config_file)
    manager.load()

    # Update settings (auto-saves)
    manager.update(confirm_mod_deletion=False, backup_path=tmp_path / "backups", log_level=logging.DEBUG)

    # File should be created
    assert config_file.exists()

    # Load again using a new manager instance to verify persistence
    new_manager = SettingsManager(config_file=config_file)
    new_manager.load()
    settings = new_manager.get()

    assert settings.confirm_mod_deletion is False
    assert settings.confirm_profile_deletion is True
    assert settings.backup_path == tmp_path / "backups"
    assert settings.get_backup_directory() == tmp_path / "backups"
    assert settings.log_level == logging.DEBUG

    # Check contents on disk match expectations
    with open(config_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    assert data["version"] == "0.0.0"
    assert data["confirm_mod_deletion"] is False
    assert data["backup_path"] == str(tmp_path / "backups").replace("\\", "/")
    assert data["mod_data_path"] is None


def test_defaults():
    from src.modprofile.config.settings import AppSettings

    settings = AppSettings()
    assert settings.confirm_mod_deletion is True
    assert settings.confirm_profile_deletion is True
    assert settings.backup_path is None
    assert settings.get_backup_directory().name == "modprofile_backups"


def test_unversioned_file_is_accepted(tmp_path: Path):
    from src.modprofile.config.settings import SettingsManager

    config_file = tmp_path / "settings.json"
    config_file.write_text(json.dumps({"confirm_profile_deletion": False}), encoding="utf-8")

    manager = SettingsManager(config_file=config_file)
    assert manager.load().confirm_profile_deletion is False


def test_unknown_version_uses_defaults(tmp_path: Path, caplog):
    from src.modprofile.config.settings import SettingsManager

    config_file = tmp_path / "settings.json"
    config_file.write_text(
        json.dumps({"version": "1.0.0", "confirm_profile_deletion": False}),
        encoding="utf-8",
    )

    manager = SettingsManager(config_file=config_file)
    with caplog.at_level(logging.ERROR):
        settings = manager.load()

    assert settings.confirm_profile_deletion is True
    assert "Unsupported settings version" in caplog.text


def test_corrupt_file_uses_defaults(tmp_path: Path):
    from src.modprofile.config.settings import AppSettings, SettingsManager

    config_file = tmp_path / "settings.json"
    config_file.write_text("{", encoding="utf-8")

    manager = SettingsManager(config_file=config_file)
    assert manager.load() == AppSettings()


def test_unknown_keys_are_ignored(tmp_path: Path, caplog):
    from src.modprofile.config.settings import SettingsManager

    config_file = tmp_path / "settings.json"
    config_file.write_text(json.dumps({"theme": "dark", "log_to_file": False}), encoding="utf-8")

    manager = SettingsManager(config_file=config_file)
    with caplog.at_level(logging.WARNING):
        settings = manager.load()

    assert settings.log_to_file is False
    assert not hasattr(settings, "theme")
    assert "Ignoring unknown setting: theme" in caplog.text


def test_reset_to_defaults(tmp_path: Path):
    from src.modprofile.config.settings import AppSettings, SettingsManager

    manager = SettingsManager(config_file=tmp_path / "settings.json")
    manager.update(confirm_mod_deletion=False)
    manager.reset_to_defaults()

    assert manager.get() == AppSettings()
    assert SettingsManager(config_file=tmp_path / "settings.json").load() == AppSettings()


def test_get_settings_manager_uses_default_path(tmp_path: Path, monkeypatch):
    import src.modprofile.config.settings as settings_mod

    # Monkeypatch the settings file location to the temporary path
    monkeypatch.setattr(
        "src.modprofile.config.settings.get_settings_file_path",
        lambda: tmp_path / "settings.json",
    )

    # Ensure we start with a fresh global manager
    settings_mod._settings_manager = None

    # Call the helper which should create a manager and write to our tmp path
    manager = settings_mod.get_settings_manager()
    assert manager.config_file.parent == tmp_path
    assert manager.config_file.name == "settings.json"
    assert manager.config_file.exists()
    assert settings_mod.get_settings() is manager.get()

    # Cleanup the global manager for subsequent tests
    settings_mod._settings_manager = None
