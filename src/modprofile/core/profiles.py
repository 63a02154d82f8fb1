"""
Profile and mod operations.

Profiles are managed on the owning ModData; mods are managed on a single
profile. Like the folder operations, everything is validated before the
first mutation.
"""

import copy
from typing import Optional

from .errors import DuplicateName, LastProfileError, NotFound
from .folders import detach_mod, normalize_name, require_folder, require_mod
from .models import IndividualEntry, ModConfig, ModData, ModProfile
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


def require_profile(data: ModData, name: str) -> ModProfile:
    """
    Get a profile by name.

    Raises:
        NotFound: If there is no such profile.
    """
    profile = data.get_profile(name)
    if profile is None:
        raise NotFound("profile", name)
    return profile


def add_profile(data: ModData, name: str, profile: Optional[ModProfile] = None) -> ModProfile:
    """
    Add a profile.

    Args:
        data: The mod data to modify.
        name: The new profile's name.
        profile: Contents of the new profile. An empty profile is created if None.

    Returns:
        The added profile.

    Raises:
        DuplicateName: If a profile with that name already exists.
        InvalidName: If the name is empty.
    """
    name = normalize_name(name, kind="profile")
    if name in data.profiles:
        raise DuplicateName("profile", name)

    if profile is None:
        profile = ModProfile()
    data.profiles[name] = profile
    logger.info(f"Added profile '{name}'")
    return profile


def duplicate_profile(data: ModData, source: str, name: str) -> ModProfile:
    """
    Copy a profile, including its folders, under a new name.

    Raises:
        NotFound: If the source profile does not exist.
        DuplicateName: If the new name is taken.
    """
    original = require_profile(data, source)
    return add_profile(data, name, copy.deepcopy(original))


def rename_profile(data: ModData, old_name: str, new_name: str) -> None:
    """
    Rename a profile, keeping it active if it was.

    Raises:
        NotFound: If ``old_name`` does not exist.
        DuplicateName: If ``new_name`` is taken by another profile.
    """
    require_profile(data, old_name)
    new_name = normalize_name(new_name, kind="profile")
    if new_name == old_name:
        return
    if new_name in data.profiles:
        raise DuplicateName("profile", new_name)

    items = [(new_name if key == old_name else key, profile) for key, profile in data.profiles.items()]
    data.profiles.clear()
    data.profiles.update(items)
    if data.active_profile == old_name:
        data.active_profile = new_name
    logger.info(f"Renamed profile '{old_name}' to '{new_name}'")


def remove_profile(data: ModData, name: str) -> None:
    """
    Remove a profile together with all of its folders.

    If the removed profile was active, the first remaining profile by name
    becomes active.

    Raises:
        NotFound: If the profile does not exist.
        LastProfileError: If it is the only profile.
    """
    require_profile(data, name)
    if len(data.profiles) == 1:
        raise LastProfileError(f"Cannot remove '{name}', it is the only profile")

    del data.profiles[name]
    if data.active_profile == name:
        data.active_profile = data.get_profile_names()[0]
    logger.info(f"Removed profile '{name}', active profile is '{data.active_profile}'")


def set_active_profile(data: ModData, name: str) -> None:
    """
    Switch the active profile.

    Raises:
        NotFound: If the profile does not exist.
    """
    require_profile(data, name)
    data.active_profile = name


def add_mod(profile: ModProfile, mod: ModConfig, folder: Optional[str] = None) -> None:
    """
    Add a mod to the root list or to a folder.

    Args:
        profile: The profile to modify.
        mod: The mod to add.
        folder: Destination folder, or None for the root list.

    Raises:
        DuplicateName: If the profile already contains a mod with that identifier.
        NotFound: If the destination folder does not exist.
    """
    if profile.find_mod(mod.mod_id) is not None:
        raise DuplicateName("mod", mod.mod_id)

    if folder is None:
        profile.mods.append(IndividualEntry(mod=mod))
    else:
        require_folder(profile, folder).mods.append(mod)


def remove_mod(profile: ModProfile, mod_id: str) -> ModConfig:
    """
    Remove a mod from wherever it lives in the profile.

    Returns:
        The removed mod.

    Raises:
        NotFound: If the mod does not exist.
    """
    return detach_mod(profile, require_mod(profile, mod_id))


def set_mod_enabled(profile: ModProfile, mod_id: str, enabled: bool) -> None:
    """Enable or disable a mod. Raises NotFound for unknown mods."""
    require_mod(profile, mod_id)
    profile.get_mod(mod_id).enabled = enabled


def set_mod_priority(profile: ModProfile, mod_id: str, priority: int) -> None:
    """Set a mod's own priority. Raises NotFound for unknown mods."""
    require_mod(profile, mod_id)
    profile.get_mod(mod_id).priority = priority


def move_entry(profile: ModProfile, from_index: int, to_index: int) -> None:
    """
    Reorder the root list by moving one entry.

    Args:
        profile: The profile to modify.
        from_index: Current position of the entry.
        to_index: Position the entry should occupy afterwards.

    Raises:
        IndexError: If either index is out of range.
    """
    count = len(profile.mods)
    if not (0 <= from_index < count and 0 <= to_index < count):
        raise IndexError(f"Entry index out of range (0-{count - 1})")

    entry = profile.mods.pop(from_index)
    profile.mods.insert(to_index, entry)
