"""
View models for presenting mod data in the UI.

View models bridge the gap between domain models and UI components,
providing data in formats suitable for display.
"""

from typing import Any, Optional

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ..core.models import GroupEntry, ModData, ModProfile
from ..core.priority import effective_priority, get_load_order_with_priority
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


class ProfileViewModel:
    """
    View model for the mod data.

    Provides high-level access to profile information for UI display.
    """

    def __init__(self, data: ModData):
        """
        Initialize the view model with mod data.

        Args:
            data: The mod data to present.
        """
        self.data = data

    def get_profile_names(self) -> list[str]:
        """Get profile names, active profile first."""
        names = self.data.get_profile_names()
        names.remove(self.data.active_profile)
        return [self.data.active_profile] + names

    def get_folder_names(self, profile: Optional[str] = None) -> list[str]:
        """Get folder names of a profile in display order."""
        target = self._profile(profile)
        return [entry.group_name for entry in target.mods if isinstance(entry, GroupEntry)]

    def get_display_priority(self, mod_id: str, profile: Optional[str] = None) -> Optional[tuple[int, bool]]:
        """
        Get the priority to show for a mod.

        Returns:
            Tuple of (effective priority, whether a folder sets it), or None
            if the mod is not in the profile.
        """
        target = self._profile(profile)
        location = target.find_mod(mod_id)
        if location is None:
            return None
        if location.folder is None:
            return target.mods[location.index].mod.priority, False

        group = target.groups[location.folder]
        mod = group.mods[location.index]
        return effective_priority(mod, group), group.priority_override is not None

    def _profile(self, name: Optional[str]) -> ModProfile:
        return self.data.profiles[name or self.data.active_profile]


class LoadOrderTableModel(QAbstractTableModel):
    """
    Table model listing the enabled mods of a profile.

    Columns: Priority, Mod, Folder
    """

    def __init__(self, profile: ModProfile, parent=None):
        """
        Initialize the table model.

        Args:
            profile: Profile to display.
            parent: Parent QObject.
        """
        super().__init__(parent)
        self._columns = ["Priority", "Mod", "Folder"]
        self._rows = self._build_rows(profile)

    @staticmethod
    def _build_rows(profile: ModProfile) -> list[tuple[int, str, str]]:
        return [
            (priority, mod.mod_id, folder or "")
            for mod, folder, priority in get_load_order_with_priority(profile)
        ]

    def rowCount(self, parent=QModelIndex()) -> int:
        """Return the number of rows."""
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        """Return the number of columns."""
        return len(self._columns)

    def data(self, index: QModelIndex, role=Qt.ItemDataRole.DisplayRole) -> Any:
        """Return data for the given index and role."""
        if not index.isValid():
            return None

        if role == Qt.ItemDataRole.DisplayRole:
            return self._rows[index.row()][index.column()]

        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role=Qt.ItemDataRole.DisplayRole) -> Any:
        """Return header data."""
        if role == Qt.ItemDataRole.DisplayRole:
            if orientation == Qt.Orientation.Horizontal:
                return self._columns[section]
            else:
                return str(section + 1)
        return None

    def update_profile(self, profile: ModProfile):
        """
        Rebuild the rows from a profile and refresh the view.

        Args:
            profile: Profile to display.
        """
        self.beginResetModel()
        self._rows = self._build_rows(profile)
        self.endResetModel()
