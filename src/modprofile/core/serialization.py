"""
Conversion between models and JSON-compatible documents.

The document layout mirrors the persisted mod data file: mods are stored
inline wherever they live, folder references are untagged objects carrying a
``group_name`` key, and default-valued fields are omitted.
"""

from typing import Any

from .errors import SchemaError
from .models import (
    GroupEntry,
    IndividualEntry,
    ModConfig,
    ModData,
    ModGroup,
    ModOrGroup,
    ModProfile,
)


_MOD_KEYS = {"spec", "enabled", "required", "priority"}


def expect_type(value: Any, kind: type, what: str) -> Any:
    if kind is int:
        valid = isinstance(value, int) and not isinstance(value, bool)
    else:
        valid = isinstance(value, kind)
    if not valid:
        raise SchemaError(f"Expected {kind.__name__} for {what}, got {type(value).__name__}")
    return value


def expect_object(value: Any, what: str) -> dict:
    return expect_type(value, dict, what)


def mod_config_from_dict(raw: Any) -> ModConfig:
    """
    Build a ModConfig from its persisted form.

    Args:
        raw: Object with a ``spec`` holding the mod ``url``.

    Returns:
        The parsed ModConfig.

    Raises:
        SchemaError: If required fields are missing or have the wrong type.
    """
    raw = expect_object(raw, "mod config")
    spec = expect_object(raw.get("spec"), "mod spec")
    mod_id = expect_type(spec.get("url"), str, "mod spec url")

    extra = {key: value for key, value in raw.items() if key not in _MOD_KEYS}
    spec_extra = {key: value for key, value in spec.items() if key != "url"}
    if spec_extra:
        # Unknown spec fields are kept under the reserved "spec" key
        extra["spec"] = spec_extra

    return ModConfig(
        mod_id=mod_id,
        enabled=expect_type(raw.get("enabled", True), bool, f"enabled of '{mod_id}'"),
        required=expect_type(raw.get("required", False), bool, f"required of '{mod_id}'"),
        priority=expect_type(raw.get("priority", 0), int, f"priority of '{mod_id}'"),
        extra=extra,
    )


def mod_config_to_dict(mod: ModConfig) -> dict:
    """Convert a ModConfig to its persisted form."""
    extra = dict(mod.extra)
    spec = dict(extra.pop("spec", {}))
    spec["url"] = mod.mod_id

    data = {"spec": spec, "required": mod.required, "enabled": mod.enabled}
    if mod.priority != 0:
        data["priority"] = mod.priority
    data.update(extra)
    return data


def mod_group_from_dict(raw: Any) -> ModGroup:
    """Build a ModGroup from its persisted form."""
    raw = expect_object(raw, "mod group")
    mods = expect_type(raw.get("mods", []), list, "group mods")
    override = raw.get("priority_override")
    if override is not None:
        expect_type(override, int, "priority_override")
    return ModGroup(
        mods=[mod_config_from_dict(item) for item in mods],
        priority_override=override,
    )


def mod_group_to_dict(group: ModGroup) -> dict:
    """Convert a ModGroup to its persisted form."""
    data = {"mods": [mod_config_to_dict(mod) for mod in group.mods]}
    if group.priority_override is not None:
        data["priority_override"] = group.priority_override
    return data


def entry_from_dict(raw: Any) -> ModOrGroup:
    """
    Build a root-list entry from its persisted form.

    Objects carrying a ``group_name`` are folder references; anything else
    is an inline mod config.
    """
    raw = expect_object(raw, "profile entry")
    if "group_name" in raw:
        return GroupEntry(
            group_name=expect_type(raw["group_name"], str, "group_name"),
            enabled=expect_type(raw.get("enabled", True), bool, "group enabled"),
        )
    return IndividualEntry(mod=mod_config_from_dict(raw))


def entry_to_dict(entry: ModOrGroup) -> dict:
    """Convert a root-list entry to its persisted form."""
    if isinstance(entry, GroupEntry):
        return {"group_name": entry.group_name, "enabled": entry.enabled}
    return mod_config_to_dict(entry.mod)


def groups_from_dict(raw: Any) -> dict[str, ModGroup]:
    """Build a folder mapping from its persisted form."""
    raw = expect_object(raw, "groups")
    return {name: mod_group_from_dict(group) for name, group in raw.items()}


def profile_from_dict(raw: Any) -> ModProfile:
    """Build a current-version ModProfile from its persisted form."""
    raw = expect_object(raw, "profile")
    mods = expect_type(raw.get("mods", []), list, "profile mods")
    return ModProfile(
        mods=[entry_from_dict(item) for item in mods],
        groups=groups_from_dict(raw.get("groups", {})),
    )


def profile_to_dict(profile: ModProfile) -> dict:
    """Convert a ModProfile to its persisted form."""
    return {
        "mods": [entry_to_dict(entry) for entry in profile.mods],
        "groups": {name: mod_group_to_dict(group) for name, group in profile.groups.items()},
    }


def mod_data_to_document(data: ModData) -> dict:
    """
    Convert a ModData to a version-tagged document ready for JSON encoding.

    Args:
        data: The current-version mod data.

    Returns:
        Dictionary with ``version``, ``active_profile`` and ``profiles`` keys.
    """
    return {
        "version": data.version,
        "active_profile": data.active_profile,
        "profiles": {name: profile_to_dict(profile) for name, profile in data.profiles.items()},
    }
