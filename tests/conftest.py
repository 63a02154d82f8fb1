"""
Pytest configuration and shared fixtures.

This file contains pytest configuration and reusable test fixtures.
"""

import pytest

from src.modprofile.config.settings import AppSettings
from src.modprofile.core.models import (
    GroupEntry,
    IndividualEntry,
    ModConfig,
    ModData,
    ModGroup,
    ModProfile,
)


def mod_doc(url: str, priority: int = 0, enabled: bool = True, required: bool = False) -> dict:
    """Build the persisted form of a mod config."""
    doc = {"spec": {"url": url}, "required": required, "enabled": enabled}
    if priority:
        doc["priority"] = priority
    return doc


@pytest.fixture
def sample_profile() -> ModProfile:
    """
    Create a profile with two root mods.

    Returns:
        A ModProfile holding A (priority 1) and B (priority 2).
    """
    return ModProfile(mods=[
        IndividualEntry(ModConfig(mod_id="A", priority=1)),
        IndividualEntry(ModConfig(mod_id="B", priority=2)),
    ])


@pytest.fixture
def folder_profile() -> ModProfile:
    """
    Create a profile mixing root mods and two folders.

    Returns:
        A ModProfile: root [A, folder Maps, C, folder Audio];
        Maps holds M1 and M2 with override 10, Audio holds S1.
    """
    return ModProfile(
        mods=[
            IndividualEntry(ModConfig(mod_id="A", priority=1)),
            GroupEntry(group_name="Maps", enabled=True),
            IndividualEntry(ModConfig(mod_id="C", priority=3)),
            GroupEntry(group_name="Audio", enabled=True),
        ],
        groups={
            "Maps": ModGroup(
                mods=[ModConfig(mod_id="M1", priority=4), ModConfig(mod_id="M2", priority=5)],
                priority_override=10,
            ),
            "Audio": ModGroup(mods=[ModConfig(mod_id="S1", priority=7)]),
        },
    )


@pytest.fixture
def sample_mod_data(folder_profile) -> ModData:
    """
    Create mod data with two profiles.

    Returns:
        ModData with active profile 'default' (the folder profile) and an
        empty 'second' profile.
    """
    return ModData(
        active_profile="default",
        profiles={"default": folder_profile, "second": ModProfile()},
    )


@pytest.fixture
def legacy_document() -> dict:
    """
    Create a 0.0.0 document written before version tags existed.

    Returns:
        Decoded JSON with two profiles of flat mod lists.
    """
    return {
        "active_profile": "default",
        "profiles": {
            "default": {"mods": [mod_doc("a", priority=5), mod_doc("b", enabled=False)]},
            "coop": {"mods": [mod_doc("c", required=True)]},
        },
    }


@pytest.fixture
def v0_1_0_document() -> dict:
    """
    Create a 0.1.0 document with a shared folder mapping.

    Both profiles reference the shared folder 'mg1'; 'coop' also references
    a folder that does not exist.

    Returns:
        Decoded JSON document tagged 0.1.0.
    """
    return {
        "version": "0.1.0",
        "active_profile": "default",
        "profiles": {
            "default": {"mods": [mod_doc("a"), {"group_name": "mg1", "enabled": False}]},
            "coop": {"mods": [
                {"group_name": "mg1", "enabled": True},
                {"group_name": "missing", "enabled": True},
                mod_doc("d"),
            ]},
        },
        "groups": {
            "mg1": {"mods": [mod_doc("b", required=True), mod_doc("c", priority=2)]},
            "unused": {"mods": [mod_doc("z")]},
        },
    }


@pytest.fixture
def test_settings(tmp_path) -> AppSettings:
    """
    Create settings that keep every file inside the test directory.

    Returns:
        AppSettings with file logging disabled and tmp_path-based paths.
    """
    return AppSettings(
        log_to_file=False,
        backup_path=tmp_path / "backups",
        mod_data_path=tmp_path / "mod_data.json",
        confirm_mod_deletion=False,
        confirm_profile_deletion=False,
    )
