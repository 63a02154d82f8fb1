"""
Tests for ModDataRepository.
"""

import json
import logging

import pytest

from src.modprofile.core import folders, profiles
from src.modprofile.core.errors import DuplicateName, NotFound, SchemaError
from src.modprofile.core.models import GroupEntry, ModData
from src.modprofile.core.repository import ModDataRepository
from src.modprofile.core.validation import find_violations
from src.modprofile.infrastructure.mod_data_store import ModDataStore


@pytest.fixture
def repository(test_settings) -> ModDataRepository:
    """Repository over an empty data file location in tmp_path."""
    store = ModDataStore(test_settings.mod_data_path)
    return ModDataRepository(store=store, settings=test_settings)


@pytest.fixture
def loaded_repository(repository, sample_mod_data) -> ModDataRepository:
    """Repository whose stored data is the sample mod data."""
    repository._store.save(sample_mod_data)
    repository.load()
    return repository


def read_document(repository: ModDataRepository) -> dict:
    with open(repository._store.data_file, encoding="utf-8") as f:
        return json.load(f)


class TestLoading:
    """Tests for load, reset and restore."""

    def test_data_requires_load(self, repository):
        """Test accessing data before loading."""
        assert not repository.is_loaded
        with pytest.raises(RuntimeError):
            repository.data

    def test_load_defaults(self, repository):
        """Test first run."""
        repository.load()
        assert repository.is_loaded
        assert repository.data == ModData()

    def test_upgraded_data_is_written_back(self, repository, legacy_document):
        """Test migration runs once: the upgraded document replaces the old one."""
        with open(repository._store.data_file, "w", encoding="utf-8") as f:
            json.dump(legacy_document, f)

        result = repository.load()

        assert result.was_upgraded
        assert repository.last_migration is result
        assert read_document(repository)["version"] == "0.2.0"
        assert not repository.load().was_upgraded

    def test_inconsistent_data_is_logged(self, repository, sample_mod_data, caplog):
        """Test duplicate mods in loaded data are reported but kept."""
        sample_mod_data.profiles["second"].groups["Maps"] = sample_mod_data.profiles["default"].groups["Maps"]
        sample_mod_data.profiles["second"].mods.append(GroupEntry(group_name="Maps"))
        sample_mod_data.profiles["default"].groups["Audio"].mods.append(
            sample_mod_data.profiles["default"].get_mod("A")
        )
        repository._store.save(sample_mod_data)

        with caplog.at_level(logging.WARNING):
            repository.load()

        assert "mod 'A' appears 2 times" in caplog.text
        assert repository.data.profiles["second"].mod_ids() == ["M1", "M2"]

    def test_dangling_reference_is_dropped_and_saved(self, repository, caplog):
        """Test a current file with a stray folder reference is cleaned on load."""
        document = {
            "version": "0.2.0",
            "active_profile": "default",
            "profiles": {"default": {"mods": [{"group_name": "ghost", "enabled": True}], "groups": {}}},
        }
        with open(repository._store.data_file, "w", encoding="utf-8") as f:
            json.dump(document, f)

        with caplog.at_level(logging.WARNING):
            result = repository.load()

        assert result.dropped_references == 1
        assert "missing folder 'ghost'" in caplog.text
        assert read_document(repository)["profiles"]["default"]["mods"] == []

        repository.apply(folders.create_folder, "ghost")
        assert find_violations(repository.data) == []
        assert read_document(repository)["profiles"]["default"]["mods"] == [
            {"group_name": "ghost", "enabled": True},
        ]

    def test_reset(self, loaded_repository):
        """Test starting fresh replaces and saves the data."""
        loaded_repository.reset()
        assert loaded_repository.data == ModData()
        assert list(read_document(loaded_repository)["profiles"]) == ["default"]

    def test_reset_after_schema_error(self, repository, legacy_document):
        """Test reset works even when the stored data cannot be loaded."""
        legacy_document["version"] = "9.0.0"
        with open(repository._store.data_file, "w", encoding="utf-8") as f:
            json.dump(legacy_document, f)

        with pytest.raises(SchemaError):
            repository.load()
        assert not repository.is_loaded

        repository.reset()
        assert repository.load().data == ModData()

    def test_backup_and_restore(self, loaded_repository, sample_mod_data, test_settings):
        """Test restoring the latest backup."""
        path = loaded_repository.backup()
        assert path.parent == test_settings.backup_path

        loaded_repository.reset()
        loaded_repository.restore_latest_backup()

        assert loaded_repository.data == sample_mod_data
        assert read_document(loaded_repository)["active_profile"] == "default"

    def test_restore_without_backup(self, repository):
        """Test restoring when there is nothing to restore."""
        with pytest.raises(FileNotFoundError):
            repository.restore_latest_backup()


class TestOperations:
    """Tests for apply and apply_to_data."""

    def test_apply_targets_active_profile_and_saves(self, loaded_repository):
        """Test a folder operation on the active profile."""
        loaded_repository.apply(folders.create_folder, "New")

        assert "New" in loaded_repository.data.profiles["default"].groups
        assert "New" in read_document(loaded_repository)["profiles"]["default"]["groups"]

    def test_apply_to_named_profile(self, loaded_repository):
        """Test folders are owned by the targeted profile only."""
        loaded_repository.apply(folders.create_folder, "Maps", profile="second")

        second = loaded_repository.data.profiles["second"]
        default = loaded_repository.data.profiles["default"]
        assert second.groups["Maps"].mods == []
        assert [mod.mod_id for mod in default.groups["Maps"].mods] == ["M1", "M2"]

    def test_apply_returns_operation_result(self, loaded_repository):
        """Test the operation's return value is passed through."""
        released = loaded_repository.apply(folders.delete_folder, "Maps")
        assert [mod.mod_id for mod in released] == ["M1", "M2"]

    def test_apply_to_data(self, loaded_repository):
        """Test a profile-level operation."""
        loaded_repository.apply_to_data(profiles.set_active_profile, "second")
        assert read_document(loaded_repository)["active_profile"] == "second"
        assert loaded_repository.profile() is loaded_repository.data.profiles["second"]

    def test_not_found_is_logged_and_raised(self, loaded_repository, caplog):
        """Test unknown names are logged as errors and leave the file alone."""
        before = read_document(loaded_repository)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(NotFound):
                loaded_repository.apply(folders.delete_folder, "Nope")

        assert "delete_folder: unknown folder 'Nope'" in caplog.text
        assert read_document(loaded_repository) == before

    def test_duplicate_name_is_raised_without_saving(self, loaded_repository):
        """Test rejected operations do not write."""
        before = read_document(loaded_repository)
        with pytest.raises(DuplicateName):
            loaded_repository.apply(folders.rename_folder, "Maps", "Audio")
        assert read_document(loaded_repository) == before

    def test_unknown_profile(self, loaded_repository):
        """Test targeting a profile that does not exist."""
        with pytest.raises(NotFound):
            loaded_repository.apply(folders.create_folder, "X", profile="nope")

    def test_priorities(self, loaded_repository):
        """Test the read-only priority queries."""
        assert loaded_repository.get_enabled_mods_with_priority() == [
            ("A", 1), ("M1", 10), ("M2", 10), ("C", 3), ("S1", 7),
        ]
        assert [mod.mod_id for mod in loaded_repository.load_order()] == ["A", "C", "S1", "M1", "M2"]
        assert loaded_repository.get_enabled_mods_with_priority("second") == []

    def test_load_order_with_priority(self, loaded_repository):
        """Test load order rows name each mod's folder."""
        rows = [(mod.mod_id, folder, priority) for mod, folder, priority in loaded_repository.load_order_with_priority()]
        assert rows[2] == ("S1", "Audio", 7)
        assert rows[0] == ("A", None, 1)
        assert loaded_repository.load_order_with_priority("second") == []
