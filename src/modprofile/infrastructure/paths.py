"""
Path utilities and constants.

This module provides helper functions for locating the application's
persistent files.
"""

import platform
from pathlib import Path


APP_NAME = "modprofile"


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory.

    Returns:
        The path (for chaining).

    Raises:
        IOError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError as e:
        raise IOError(f"Failed to create directory {path}: {e}")


def get_persistent_data_directory() -> Path:
    """
    Get the persistent data directory for the application (cross-platform).

    Returns:
        Path to the persistent data directory.

    Platform-specific locations:
        - Windows: %APPDATA%/LocalLow/modprofile
        - macOS: ~/Library/Application Support/modprofile
        - Linux: ~/.config/modprofile
    """
    system = platform.system()

    if system == "Windows":
        base = Path.home() / "AppData" / "LocalLow"
    elif system == "Darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path.home() / ".config"

    data_dir = base / APP_NAME
    data_dir.mkdir(parents=True, exist_ok=True)

    return data_dir


def get_settings_file_path() -> Path:
    """
    Get the path to the settings file.

    Returns:
        Path to the settings.json file.
    """
    return get_persistent_data_directory() / "settings.json"


def get_mod_data_file_path() -> Path:
    """
    Get the path to the mod data file.

    Returns:
        Path to the mod_data.json file.
    """
    return get_persistent_data_directory() / "mod_data.json"


def get_legacy_profiles_file_path() -> Path:
    """
    Get the path to the profiles file written by releases before mod_data.json.

    Returns:
        Path to the profiles.json file.
    """
    return get_persistent_data_directory() / "profiles.json"


def get_default_backup_directory() -> Path:
    """
    Get the default directory for backups.

    Returns:
        Path to ~/Documents/modprofile_backups (not created).
    """
    return Path.home() / "Documents" / f"{APP_NAME}_backups"


def get_log_file_path() -> Path:
    """
    Get the path to the main log file.

    Returns:
        Path to the log.txt file.
    """
    return get_persistent_data_directory() / "log.txt"


def get_old_log_file_path() -> Path:
    """
    Get the path to the old log file.

    Returns:
        Path to the log.old.txt file.
    """
    return get_persistent_data_directory() / "log.old.txt"
