"""
Repository pattern for accessing mod data.

This module provides the single owning handle over one in-memory ModData:
it loads and migrates the stored data, applies operations one at a time and
writes the result back.
"""

from pathlib import Path
from typing import Any, Callable, Optional

from .errors import NotFound
from .migration import MigrationResult
from .models import ModConfig, ModData, ModProfile
from .priority import get_enabled_mods_with_priority, get_load_order_with_priority, resolve_load_order
from .profiles import require_profile
from .validation import find_violations
from ..config.settings import AppSettings, get_settings
from ..infrastructure.logging_config import get_logger
from ..infrastructure.mod_data_store import ModDataStore


logger = get_logger(__name__)


class ModDataRepository:
    """
    Repository for loading, mutating and saving mod data.

    Operations are plain functions from the folders and profiles modules.
    The repository runs them against the right target, logs desynchronised
    references, and saves after every successful operation.
    """

    def __init__(self, store: Optional[ModDataStore] = None, settings: Optional[AppSettings] = None):
        """
        Initialize the repository.

        Args:
            store: Store used for persistence. If None, one is created for the
                mod data file named in the settings.
            settings: Application settings. If None, the global settings are used.
        """
        self._settings = settings if settings is not None else get_settings()
        self._store = store if store is not None else ModDataStore(self._settings.mod_data_path)
        self._data: Optional[ModData] = None
        self.last_migration: Optional[MigrationResult] = None

    @property
    def data(self) -> ModData:
        """
        The loaded mod data.

        Raises:
            RuntimeError: If load() has not been called.
        """
        if self._data is None:
            raise RuntimeError("Mod data has not been loaded")
        return self._data

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    def load(self) -> MigrationResult:
        """
        Load and migrate the stored mod data.

        Upgraded or repaired data is written back immediately so the
        migration runs once.

        Returns:
            The MigrationResult, including any migration warnings.

        Raises:
            SchemaError: If the stored data cannot be used.
        """
        result = self._store.load()
        self._adopt(result)
        if result.was_upgraded:
            logger.info(f"Mod data upgraded from version {result.source_version}")
        if result.was_upgraded or result.warnings:
            self.save()
        return result

    def reset(self) -> ModData:
        """Replace the mod data with a fresh default and save it."""
        self._data = ModData()
        self.last_migration = None
        self.save()
        return self._data

    def restore_latest_backup(self) -> MigrationResult:
        """
        Replace the mod data with the newest backup and save it.

        Raises:
            FileNotFoundError: If the backup directory holds no backup.
            SchemaError: If the backup cannot be used.
        """
        backup_dir = self._settings.get_backup_directory()
        backup_file = ModDataStore.find_latest_backup(backup_dir)
        if backup_file is None:
            raise FileNotFoundError(f"No backup found in {backup_dir}")

        result = self._store.load_backup(backup_file)
        self._adopt(result)
        self.save()
        return result

    def save(self) -> None:
        """Write the mod data to the store."""
        self._store.save(self.data)

    def backup(self) -> Path:
        """Write a timestamped backup to the configured backup directory."""
        return self._store.backup(self.data, self._settings.get_backup_directory())

    def profile(self, name: Optional[str] = None) -> ModProfile:
        """
        Get a profile by name, or the active profile.

        Raises:
            NotFound: If the named profile does not exist.
        """
        return require_profile(self.data, name or self.data.active_profile)

    def apply(self, operation: Callable[..., Any], *args, profile: Optional[str] = None, **kwargs) -> Any:
        """
        Run a profile operation and save.

        Args:
            operation: Function taking a ModProfile as its first argument.
            *args: Remaining positional arguments for the operation.
            profile: Target profile name. Defaults to the active profile.
            **kwargs: Keyword arguments for the operation.

        Returns:
            Whatever the operation returns.
        """
        target = self.profile(profile)
        return self._run(operation, target, *args, **kwargs)

    def apply_to_data(self, operation: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Run an operation that takes the whole ModData, then save.

        Returns:
            Whatever the operation returns.
        """
        return self._run(operation, self.data, *args, **kwargs)

    def get_enabled_mods_with_priority(self, profile: Optional[str] = None) -> list[tuple[str, int]]:
        """List enabled mods of a profile with their effective priority."""
        return get_enabled_mods_with_priority(self.profile(profile))

    def load_order(self, profile: Optional[str] = None) -> list[ModConfig]:
        """Get enabled mods of a profile in load order."""
        return resolve_load_order(self.profile(profile))

    def load_order_with_priority(self, profile: Optional[str] = None) -> list[tuple[ModConfig, Optional[str], int]]:
        """Get enabled mods of a profile in load order with folder and effective priority."""
        return get_load_order_with_priority(self.profile(profile))

    def _run(self, operation: Callable[..., Any], target: Any, *args, **kwargs) -> Any:
        try:
            result = operation(target, *args, **kwargs)
        except NotFound as e:
            # Callers only reference names they got from this repository
            logger.error(f"{operation.__name__}: unknown {e.kind} '{e.name}'")
            raise
        self.save()
        return result

    def _adopt(self, result: MigrationResult) -> None:
        for violation in find_violations(result.data):
            logger.warning(f"Loaded mod data is inconsistent: {violation}")
        self._data = result.data
        self.last_migration = result
