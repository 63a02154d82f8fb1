"""
Tests for conversion between models and persisted documents.
"""

import pytest

from src.modprofile.core.errors import SchemaError
from src.modprofile.core.models import GroupEntry, IndividualEntry, ModConfig, ModGroup
from src.modprofile.core.serialization import (
    entry_from_dict,
    entry_to_dict,
    mod_config_from_dict,
    mod_config_to_dict,
    mod_data_to_document,
    mod_group_from_dict,
    mod_group_to_dict,
)


class TestModConfigConversion:
    """Tests for mod config documents."""

    def test_defaults_when_fields_missing(self):
        """Test that only the spec url is required."""
        mod = mod_config_from_dict({"spec": {"url": "https://example.com/mod"}})
        assert mod == ModConfig(mod_id="https://example.com/mod")

    def test_zero_priority_is_omitted(self):
        """Test default priority is not written."""
        assert mod_config_to_dict(ModConfig(mod_id="a")) == {
            "spec": {"url": "a"}, "required": False, "enabled": True,
        }
        assert mod_config_to_dict(ModConfig(mod_id="a", priority=-4))["priority"] == -4

    def test_unknown_fields_survive(self):
        """Test fields this package does not interpret are written back."""
        raw = {
            "spec": {"url": "a", "version": "1.2"},
            "required": True,
            "enabled": False,
            "priority": 3,
            "note": "keep me",
        }
        mod = mod_config_from_dict(raw)
        assert mod.required is True
        assert mod.extra == {"note": "keep me", "spec": {"version": "1.2"}}
        assert mod_config_to_dict(mod) == raw

    @pytest.mark.parametrize("raw", [
        None,
        {},
        {"spec": "a"},
        {"spec": {"url": 5}},
        {"spec": {"url": "a"}, "priority": "high"},
        {"spec": {"url": "a"}, "priority": True},
        {"spec": {"url": "a"}, "enabled": "yes"},
    ])
    def test_invalid_mod_config(self, raw):
        """Test type problems raise SchemaError."""
        with pytest.raises(SchemaError):
            mod_config_from_dict(raw)


class TestGroupAndEntryConversion:
    """Tests for folder and root entry documents."""

    def test_override_omitted_when_unset(self):
        """Test priority_override is only written when set."""
        assert mod_group_to_dict(ModGroup()) == {"mods": []}
        assert mod_group_to_dict(ModGroup(priority_override=0)) == {"mods": [], "priority_override": 0}

    def test_group_from_dict(self):
        """Test reading a folder with an override."""
        group = mod_group_from_dict({"mods": [{"spec": {"url": "a"}}], "priority_override": 7})
        assert group == ModGroup(mods=[ModConfig(mod_id="a")], priority_override=7)

    def test_invalid_override(self):
        """Test a non-integer override is rejected."""
        with pytest.raises(SchemaError):
            mod_group_from_dict({"mods": [], "priority_override": "7"})

    def test_entries_are_untagged(self):
        """Test folder references are recognised by their group_name key."""
        assert entry_from_dict({"group_name": "g", "enabled": False}) == GroupEntry(group_name="g", enabled=False)
        assert entry_from_dict({"spec": {"url": "a"}}) == IndividualEntry(ModConfig(mod_id="a"))
        assert entry_to_dict(GroupEntry(group_name="g")) == {"group_name": "g", "enabled": True}
        assert entry_to_dict(IndividualEntry(ModConfig(mod_id="a")))["spec"] == {"url": "a"}


class TestModDataDocument:
    """Tests for whole-document conversion."""

    def test_document_layout(self, sample_mod_data):
        """Test the top-level keys and per-profile folders."""
        document = mod_data_to_document(sample_mod_data)

        assert document["version"] == "0.2.0"
        assert document["active_profile"] == "default"
        assert list(document["profiles"]) == ["default", "second"]
        default = document["profiles"]["default"]
        assert default["mods"][1] == {"group_name": "Maps", "enabled": True}
        assert default["groups"]["Maps"]["priority_override"] == 10
        assert "priority_override" not in default["groups"]["Audio"]
        assert "groups" not in document
