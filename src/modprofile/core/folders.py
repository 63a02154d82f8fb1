"""
Folder operations on a single profile.

Each operation validates everything it needs before the first mutation, so
a raised error always leaves the profile untouched.
"""

from typing import Optional

from .errors import DuplicateName, InvalidName, NotFound
from .models import GroupEntry, IndividualEntry, ModConfig, ModGroup, ModLocation, ModProfile
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


def normalize_name(name: str, kind: str = "folder") -> str:
    """
    Strip surrounding whitespace from a folder or profile name.

    Raises:
        InvalidName: If nothing is left.
    """
    stripped = name.strip()
    if not stripped:
        raise InvalidName(f"{kind.capitalize()} name cannot be empty")
    return stripped


def require_folder(profile: ModProfile, name: str) -> ModGroup:
    """
    Get a folder by name.

    Raises:
        NotFound: If the profile has no such folder.
    """
    group = profile.get_group(name)
    if group is None:
        raise NotFound("folder", name)
    return group


def require_mod(profile: ModProfile, mod_id: str) -> ModLocation:
    """
    Locate a mod by identifier.

    Raises:
        NotFound: If the profile does not contain the mod.
    """
    location = profile.find_mod(mod_id)
    if location is None:
        raise NotFound("mod", mod_id)
    return location


def detach_mod(profile: ModProfile, location: ModLocation) -> ModConfig:
    """Remove the mod at a location from its owning list and return it."""
    if location.folder is None:
        return profile.mods.pop(location.index).mod
    return profile.groups[location.folder].mods.pop(location.index)


def create_folder(profile: ModProfile, name: str) -> ModGroup:
    """
    Create an empty folder and append a reference to it to the root list.

    Args:
        profile: The profile to modify.
        name: The new folder's name.

    Returns:
        The created ModGroup.

    Raises:
        DuplicateName: If a folder with that name already exists.
        InvalidName: If the name is empty.
    """
    name = normalize_name(name)
    if name in profile.groups:
        raise DuplicateName("folder", name)

    group = ModGroup()
    profile.groups[name] = group
    profile.mods.append(GroupEntry(group_name=name, enabled=True))
    logger.debug(f"Created folder '{name}'")
    return group


def rename_folder(profile: ModProfile, old_name: str, new_name: str) -> None:
    """
    Rename a folder in place.

    The folder keeps its position, its mods and its priority override.

    Raises:
        NotFound: If ``old_name`` does not exist.
        DuplicateName: If another folder is already called ``new_name``.
        InvalidName: If ``new_name`` is empty.
    """
    require_folder(profile, old_name)
    new_name = normalize_name(new_name)
    if new_name == old_name:
        return
    if new_name in profile.groups:
        raise DuplicateName("folder", new_name)

    items = [(new_name if key == old_name else key, group) for key, group in profile.groups.items()]
    profile.groups.clear()
    profile.groups.update(items)

    for entry in profile.mods:
        if isinstance(entry, GroupEntry) and entry.group_name == old_name:
            entry.group_name = new_name

    logger.debug(f"Renamed folder '{old_name}' to '{new_name}'")


def delete_folder(profile: ModProfile, name: str) -> list[ModConfig]:
    """
    Delete a folder, releasing its mods to the end of the root list.

    Released mods keep their own priority; the folder's override no longer
    applies to them.

    Args:
        profile: The profile to modify.
        name: The folder to delete.

    Returns:
        The mods that were moved back to the root list.

    Raises:
        NotFound: If the folder does not exist.
    """
    group = require_folder(profile, name)

    del profile.groups[name]
    profile.mods[:] = [
        entry for entry in profile.mods
        if not (isinstance(entry, GroupEntry) and entry.group_name == name)
    ]
    profile.mods.extend(IndividualEntry(mod=mod) for mod in group.mods)

    logger.debug(f"Deleted folder '{name}', released {len(group.mods)} mod(s)")
    return group.mods


def move_to_folder(profile: ModProfile, mod_id: str, folder: str) -> None:
    """
    Move a mod from the root list or another folder into a folder.

    The mod is appended to the destination folder. Its stored priority is
    not changed. Moving a mod into the folder it already lives in does nothing.

    Raises:
        NotFound: If the mod or the destination folder does not exist.
    """
    location = require_mod(profile, mod_id)
    destination = require_folder(profile, folder)
    if location.folder == folder:
        logger.debug(f"Mod '{mod_id}' is already in folder '{folder}'")
        return

    destination.mods.append(detach_mod(profile, location))
    logger.debug(f"Moved mod '{mod_id}' from {location.folder or 'root'} to folder '{folder}'")


def move_to_root(profile: ModProfile, mod_id: str) -> None:
    """
    Move a mod out of its folder to the end of the root list.

    Moving a mod that is already at the root does nothing.

    Raises:
        NotFound: If the mod does not exist.
    """
    location = require_mod(profile, mod_id)
    if location.folder is None:
        return

    profile.mods.append(IndividualEntry(mod=detach_mod(profile, location)))
    logger.debug(f"Moved mod '{mod_id}' from folder '{location.folder}' to root")


def set_priority_override(profile: ModProfile, folder: str, value: Optional[int]) -> None:
    """
    Set or clear a folder's priority override.

    Args:
        profile: The profile to modify.
        folder: The folder name.
        value: The new override, or None to let each mod use its own priority.

    Raises:
        NotFound: If the folder does not exist.
    """
    group = require_folder(profile, folder)
    group.priority_override = value


def set_folder_enabled(profile: ModProfile, folder: str, enabled: bool) -> None:
    """
    Enable or disable a folder as a whole.

    Raises:
        NotFound: If the folder does not exist or is not referenced from the root list.
    """
    require_folder(profile, folder)
    index = profile.group_entry_index(folder)
    if index is None:
        raise NotFound("folder reference", folder)
    profile.mods[index].enabled = enabled
