"""
Core domain models for mod profile configuration.

This module contains pure data models representing profiles, folders and
mod settings. These models are GUI-agnostic and should not import any UI
frameworks.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union


CURRENT_VERSION = "0.2.0"
"""Schema version tag carried by every migrated ModData."""

DEFAULT_PROFILE = "default"


@dataclass
class ModConfig:
    """Settings for a single mod within a profile."""

    mod_id: str
    """Mod identifier (the URL stored under the mod's ``spec``)."""

    enabled: bool = True
    """Whether the mod is loaded at all."""

    required: bool = False
    """Whether the mod must be installed by every client."""

    priority: int = 0
    """Load priority. Lower values load first; ties keep list order."""

    extra: dict = field(default_factory=dict)
    """Mod-specific fields not interpreted by this package, kept for round-trips."""


@dataclass
class ModGroup:
    """A named folder of mods inside one profile."""

    mods: list[ModConfig] = field(default_factory=list)
    """Mods in this folder, in load order."""

    priority_override: Optional[int] = None
    """When set, every mod in the folder uses this priority instead of its own."""

    def index_of(self, mod_id: str) -> Optional[int]:
        """Return the position of a mod in this folder, or None."""
        for index, mod in enumerate(self.mods):
            if mod.mod_id == mod_id:
                return index
        return None


@dataclass
class IndividualEntry:
    """Root-level list item holding a single mod."""

    mod: ModConfig


@dataclass
class GroupEntry:
    """Root-level list item referencing a folder by name."""

    group_name: str
    enabled: bool = True


ModOrGroup = Union[IndividualEntry, GroupEntry]


@dataclass
class ModLocation:
    """Where a mod lives inside a profile."""

    folder: Optional[str]
    """Folder name, or None for the root list."""

    index: int
    """Index in the root list or in the folder's mod list."""


@dataclass
class ModProfile:
    """An independent, ordered collection of mods and folders."""

    mods: list[ModOrGroup] = field(default_factory=list)
    """Root-level display and load order."""

    groups: dict[str, ModGroup] = field(default_factory=dict)
    """Folders owned by this profile, keyed by folder name."""

    def get_group(self, name: str) -> Optional[ModGroup]:
        """
        Retrieve a folder by name.

        Args:
            name: The folder name.

        Returns:
            The ModGroup if found, None otherwise.
        """
        return self.groups.get(name)

    def group_entry_index(self, name: str) -> Optional[int]:
        """Return the root-list index of the reference to a folder, or None."""
        for index, entry in enumerate(self.mods):
            if isinstance(entry, GroupEntry) and entry.group_name == name:
                return index
        return None

    def iter_mods(self) -> Iterator[tuple[ModConfig, Optional[str]]]:
        """
        Iterate over every mod in the profile in display order.

        Folder contents are yielded where the folder's reference sits in the
        root list. Folders without a reference are yielded last.

        Yields:
            Tuples of (mod, folder name or None).
        """
        visited = set()
        for entry in self.mods:
            if isinstance(entry, IndividualEntry):
                yield entry.mod, None
            else:
                group = self.groups.get(entry.group_name)
                if group is None or entry.group_name in visited:
                    continue
                visited.add(entry.group_name)
                for mod in group.mods:
                    yield mod, entry.group_name

        for name, group in self.groups.items():
            if name not in visited:
                for mod in group.mods:
                    yield mod, name

    def find_mod(self, mod_id: str) -> Optional[ModLocation]:
        """
        Locate a mod by identifier.

        Args:
            mod_id: The mod identifier to search for.

        Returns:
            The ModLocation of the first occurrence, or None if absent.
        """
        for index, entry in enumerate(self.mods):
            if isinstance(entry, IndividualEntry) and entry.mod.mod_id == mod_id:
                return ModLocation(folder=None, index=index)

        for name, group in self.groups.items():
            index = group.index_of(mod_id)
            if index is not None:
                return ModLocation(folder=name, index=index)

        return None

    def get_mod(self, mod_id: str) -> Optional[ModConfig]:
        """Retrieve a mod by identifier, wherever it lives in the profile."""
        location = self.find_mod(mod_id)
        if location is None:
            return None
        if location.folder is None:
            return self.mods[location.index].mod
        return self.groups[location.folder].mods[location.index]

    def mod_ids(self) -> list[str]:
        """Get the identifiers of all mods in display order."""
        return [mod.mod_id for mod, _ in self.iter_mods()]


def _default_profiles() -> dict[str, ModProfile]:
    return {DEFAULT_PROFILE: ModProfile()}


@dataclass
class ModData:
    """The complete, current-version mod configuration of a user."""

    active_profile: str = DEFAULT_PROFILE
    """Name of the profile currently in use."""

    profiles: dict[str, ModProfile] = field(default_factory=_default_profiles)
    """All profiles, keyed by name."""

    version: str = CURRENT_VERSION
    """Schema version tag. Only meaningful to the migration engine."""

    def get_profile(self, name: str) -> Optional[ModProfile]:
        """
        Retrieve a profile by name.

        Args:
            name: The profile name.

        Returns:
            The ModProfile if found, None otherwise.
        """
        return self.profiles.get(name)

    def get_active_profile(self) -> ModProfile:
        """Get the profile named by active_profile."""
        return self.profiles[self.active_profile]

    def get_profile_names(self) -> list[str]:
        """Get all profile names, sorted."""
        return sorted(self.profiles)
