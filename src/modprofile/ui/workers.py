"""
Qt controller serialising operations on the mod data.

UI code never mutates the model directly. It calls the controller, which
applies one operation at a time through the repository and announces the
outcome with signals once the operation has completed.
"""

from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, Signal

from ..core import folders, profiles
from ..core.errors import DuplicateName, InvalidName, LastProfileError, NotFound, SchemaError
from ..core.repository import ModDataRepository
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


class ProfileController(QObject):
    """
    Single owning handle over a ModDataRepository for Qt applications.
    """

    # Emitted after every successful operation and after loading
    data_changed = Signal()

    # Emitted with a user-facing message when an operation is rejected
    operation_failed = Signal(str)

    # Emitted with the error message when stored data cannot be used
    load_failed = Signal(str)

    # Emitted with the warning messages produced by migration
    migration_warnings = Signal(list)

    def __init__(self, repository: ModDataRepository, parent=None):
        """
        Initialize the controller.

        Args:
            repository: Repository owning the mod data.
            parent: Parent QObject.
        """
        super().__init__(parent)
        self._repository = repository

    @property
    def repository(self) -> ModDataRepository:
        return self._repository

    def load(self) -> bool:
        """
        Load the stored mod data.

        Returns:
            True if the data was loaded. On failure load_failed is emitted and
            the caller offers to start fresh or restore a backup.
        """
        try:
            result = self._repository.load()
        except SchemaError as e:
            logger.error(f"Incompatible save data: {e}")
            self.load_failed.emit(str(e))
            return False

        if result.warnings:
            self.migration_warnings.emit([str(warning) for warning in result.warnings])
        self.data_changed.emit()
        return True

    def start_fresh(self) -> None:
        """Discard the stored data and start with defaults."""
        self._repository.reset()
        self.data_changed.emit()

    def restore_latest_backup(self) -> bool:
        """
        Replace the data with the newest backup.

        Returns:
            True if a backup was restored.
        """
        try:
            self._repository.restore_latest_backup()
        except (FileNotFoundError, SchemaError) as e:
            self.load_failed.emit(str(e))
            return False
        self.data_changed.emit()
        return True

    def run(self, operation: Callable[..., Any], *args, profile: Optional[str] = None) -> bool:
        """
        Apply a profile operation.

        Returns:
            True if the operation succeeded.
        """
        return self._guard(self._repository.apply, operation, *args, profile=profile)

    def run_on_data(self, operation: Callable[..., Any], *args) -> bool:
        """
        Apply an operation on the whole mod data.

        Returns:
            True if the operation succeeded.
        """
        return self._guard(self._repository.apply_to_data, operation, *args)

    def create_folder(self, name: str) -> bool:
        return self.run(folders.create_folder, name)

    def rename_folder(self, old_name: str, new_name: str) -> bool:
        return self.run(folders.rename_folder, old_name, new_name)

    def delete_folder(self, name: str) -> bool:
        return self.run(folders.delete_folder, name)

    def move_to_folder(self, mod_id: str, folder: str) -> bool:
        return self.run(folders.move_to_folder, mod_id, folder)

    def move_to_root(self, mod_id: str) -> bool:
        return self.run(folders.move_to_root, mod_id)

    def set_priority_override(self, folder: str, value: Optional[int]) -> bool:
        return self.run(folders.set_priority_override, folder, value)

    def switch_profile(self, name: str) -> bool:
        return self.run_on_data(profiles.set_active_profile, name)

    def remove_profile(self, name: str) -> bool:
        return self.run_on_data(profiles.remove_profile, name)

    def _guard(self, apply: Callable[..., Any], *args, **kwargs) -> bool:
        try:
            apply(*args, **kwargs)
        except (DuplicateName, InvalidName, LastProfileError, NotFound) as e:
            self.operation_failed.emit(str(e))
            return False
        self.data_changed.emit()
        return True
