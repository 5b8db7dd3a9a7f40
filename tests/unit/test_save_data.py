"""Tests for persisted player state."""

import json
import logging

from pocketbird.core.save_data import (
    DEFAULT_HAT,
    DEFAULT_SPECIES,
    JsonSaveStore,
    MemorySaveStore,
    SaveData,
    UserSettings,
)


class TestSaveData:
    def test_defaults(self):
        data = SaveData()
        assert data.unlocked_species == [DEFAULT_SPECIES]
        assert data.current_species == DEFAULT_SPECIES
        assert data.settings == UserSettings()

    def test_unlock(self):
        data = SaveData()
        assert data.unlock("redCardinal") is True
        assert data.unlock("redCardinal") is False
        assert data.unlocked_species == [DEFAULT_SPECIES, "redCardinal"]

    def test_wire_keys(self):
        """Should use the camelCase keys of the stored format."""
        d = SaveData(settings=UserSettings(birb_mode=True), sticky_notes=[{"id": 1}]).to_dict()
        assert d == {
            "unlockedSpecies": ["bluebird"],
            "currentSpecies": "bluebird",
            "settings": {"birbMode": True, "soundEnabled": True},
            "unlockedHats": ["none"],
            "currentHat": "none",
            "stickyNotes": [{"id": 1}],
        }

    def test_sticky_notes_omitted_when_absent(self):
        assert "stickyNotes" not in SaveData().to_dict()

    def test_from_dict_current_must_be_unlocked(self):
        data = SaveData.from_dict({"unlockedSpecies": ["shimaEnaga"], "currentSpecies": "redCardinal"})
        assert data.current_species == "shimaEnaga"

    def test_from_dict_garbage(self):
        assert SaveData.from_dict("??") == SaveData()
        assert SaveData.from_dict({"unlockedSpecies": []}).unlocked_species == [DEFAULT_SPECIES]

    def test_hats_default_to_none(self):
        data = SaveData()
        assert data.unlocked_hats == [DEFAULT_HAT]
        assert data.current_hat == DEFAULT_HAT

    def test_unlock_hat(self):
        data = SaveData()
        assert data.unlock_hat("fez") is True
        assert data.unlock_hat("fez") is False
        assert data.unlocked_hats == [DEFAULT_HAT, "fez"]

    def test_hats_from_dict(self):
        data = SaveData.from_dict({"unlockedHats": ["none", "fez"], "currentHat": "fez"})
        assert data.unlocked_hats == ["none", "fez"]
        assert data.current_hat == "fez"

    def test_saves_without_hats_wear_none(self):
        data = SaveData.from_dict({"unlockedSpecies": ["bluebird"], "currentSpecies": "bluebird"})
        assert data.unlocked_hats == [DEFAULT_HAT]
        assert data.current_hat == DEFAULT_HAT

    def test_locked_current_hat_is_dropped(self):
        data = SaveData.from_dict({"unlockedHats": ["none"], "currentHat": "wizard-hat"})
        assert data.current_hat == DEFAULT_HAT

    def test_settings_from_garbage(self):
        assert UserSettings.from_dict(None) == UserSettings()


class TestMemorySaveStore:
    def test_empty_store_loads_defaults(self):
        assert MemorySaveStore().load() == SaveData()

    def test_loads_are_independent_copies(self):
        store = MemorySaveStore()
        store.save(SaveData())
        first = store.load()
        first.unlock("redCardinal")
        assert store.load().unlocked_species == [DEFAULT_SPECIES]
        assert store.save_count == 1

    def test_reset(self):
        store = MemorySaveStore(SaveData(unlocked_species=["a", "b"], current_species="b"))
        assert store.load().current_species == "b"
        store.reset()
        assert store.load() == SaveData()


class TestJsonSaveStore:
    def test_save_and_load(self, tmp_path):
        store = JsonSaveStore(tmp_path / "dir" / "save.json")
        data = SaveData()
        data.unlock("redCardinal")
        data.current_species = "redCardinal"
        store.save(data)
        assert json.loads(store.path.read_text())["currentSpecies"] == "redCardinal"
        assert store.load() == data

    def test_missing_file(self, tmp_path):
        assert JsonSaveStore(tmp_path / "save.json").load() == SaveData()

    def test_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "save.json"
        path.write_text("][")
        with caplog.at_level(logging.WARNING, logger="pocketbird.core.save_data"):
            assert JsonSaveStore(path).load() == SaveData()
        assert "unreadable save file" in caplog.text

    def test_reset_removes_file(self, tmp_path):
        store = JsonSaveStore(tmp_path / "save.json")
        store.save(SaveData())
        store.reset()
        assert not store.path.exists()
        store.reset()  # already gone
