"""
Structural invariant checks for mod data.

These helpers never modify the model. They are used after loading and by
tests to confirm that operations preserve the invariants.
"""

from collections import Counter

from .errors import InvariantError
from .models import GroupEntry, IndividualEntry, ModConfig, ModData, ModGroup, ModProfile


def find_profile_violations(profile: ModProfile, profile_name: str = "") -> list[str]:
    """
    Check a single profile.

    Checks performed:
    - every folder reference resolves to a folder of the same profile
    - no folder is referenced more than once
    - no mod identifier appears in more than one place
    - folders contain only mod configs

    Args:
        profile: The profile to check.
        profile_name: Name used to prefix messages.

    Returns:
        Human-readable descriptions of every violation found.
    """
    prefix = f"Profile '{profile_name}': " if profile_name else ""
    violations = []

    references = Counter()
    for entry in profile.mods:
        if isinstance(entry, GroupEntry):
            references[entry.group_name] += 1
            if entry.group_name not in profile.groups:
                violations.append(f"{prefix}reference to missing folder '{entry.group_name}'")
        elif not isinstance(entry, IndividualEntry):
            violations.append(f"{prefix}unexpected root entry {entry!r}")

    for name, count in references.items():
        if count > 1:
            violations.append(f"{prefix}folder '{name}' is referenced {count} times")

    for name, group in profile.groups.items():
        if not isinstance(group, ModGroup):
            violations.append(f"{prefix}folder '{name}' is not a folder")
            continue
        for mod in group.mods:
            if not isinstance(mod, ModConfig):
                violations.append(f"{prefix}folder '{name}' contains {type(mod).__name__}")

    occurrences = Counter(
        entry.mod.mod_id for entry in profile.mods if isinstance(entry, IndividualEntry)
    )
    for group in profile.groups.values():
        if isinstance(group, ModGroup):
            occurrences.update(mod.mod_id for mod in group.mods if isinstance(mod, ModConfig))
    for mod_id, count in occurrences.items():
        if count > 1:
            violations.append(f"{prefix}mod '{mod_id}' appears {count} times")

    return violations


def find_violations(data: ModData) -> list[str]:
    """
    Check every profile plus the active profile pointer.

    Returns:
        Human-readable descriptions of every violation found.
    """
    violations = []
    if not data.profiles:
        violations.append("no profiles")
    elif data.active_profile not in data.profiles:
        violations.append(f"active profile '{data.active_profile}' does not exist")

    for name, profile in data.profiles.items():
        violations.extend(find_profile_violations(profile, name))
    return violations


def check_invariants(data: ModData) -> None:
    """
    Raise if the mod data violates any invariant.

    Raises:
        InvariantError: Listing every violation found.
    """
    violations = find_violations(data)
    if violations:
        raise InvariantError(violations)
