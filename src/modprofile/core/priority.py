"""
Effective load priority of mods.

Nothing here is cached: a folder's override can change independently of
the mods it contains, so priorities are resolved on every call.
"""

from typing import Iterator, Optional

from .models import GroupEntry, IndividualEntry, ModConfig, ModGroup, ModProfile


def effective_priority(mod: ModConfig, enclosing_folder: Optional[ModGroup] = None) -> int:
    """
    Compute the priority a mod actually loads with.

    Args:
        mod: The mod.
        enclosing_folder: The folder containing the mod, or None for
            root-level mods.

    Returns:
        The folder's priority override if one is set, else the mod's own priority.
    """
    if enclosing_folder is not None and enclosing_folder.priority_override is not None:
        return enclosing_folder.priority_override
    return mod.priority


def iter_enabled_mods_with_priority(profile: ModProfile) -> Iterator[tuple[ModConfig, Optional[str], int]]:
    """
    Iterate over enabled mods in display order with their effective priority.

    Mods inside disabled folders are skipped, as are disabled mods.

    Yields:
        Tuples of (mod, name of the enclosing folder or None, effective priority).
    """
    for entry in profile.mods:
        if isinstance(entry, IndividualEntry):
            if entry.mod.enabled:
                yield entry.mod, None, effective_priority(entry.mod)
        elif isinstance(entry, GroupEntry) and entry.enabled:
            group = profile.groups.get(entry.group_name)
            if group is None:
                continue
            for mod in group.mods:
                if mod.enabled:
                    yield mod, entry.group_name, effective_priority(mod, group)


def get_enabled_mods_with_priority(profile: ModProfile) -> list[tuple[str, int]]:
    """
    List enabled mods in display order with their effective priority.

    Args:
        profile: The profile to resolve.

    Returns:
        List of (mod identifier, effective priority) tuples.
    """
    return [(mod.mod_id, priority) for mod, _, priority in iter_enabled_mods_with_priority(profile)]


def get_load_order_with_priority(profile: ModProfile) -> list[tuple[ModConfig, Optional[str], int]]:
    """
    List enabled mods in load order with their folder and effective priority.

    Lower effective priorities load first. Mods with equal priority keep
    their display order.
    """
    return sorted(iter_enabled_mods_with_priority(profile), key=lambda item: item[2])


def resolve_load_order(profile: ModProfile) -> list[ModConfig]:
    """
    Order enabled mods for loading.

    Args:
        profile: The profile to resolve.

    Returns:
        Enabled mods in load order.
    """
    return [mod for mod, _, _ in get_load_order_with_priority(profile)]
