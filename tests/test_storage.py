"""Tests for key-value stores and best streak persistence."""

import json
import logging

import pytest

from core.storage import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    load_best_streak,
    save_best_streak,
)
from settings import BEST_STREAK_KEY


class TestMemoryStore:

    def test_get_missing(self):
        assert MemoryStore().get("nope") is None

    def test_set_then_get(self):
        store = MemoryStore()
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_conforms_to_protocol(self):
        assert isinstance(MemoryStore(), KeyValueStore)


class TestJsonFileStore:
    """Tests for the on-disk store."""

    def test_missing_file_starts_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "store.json")
        assert store.get(BEST_STREAK_KEY) is None

    def test_value_survives_reload(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileStore(path).set(BEST_STREAK_KEY, "12")

        assert JsonFileStore(path).get(BEST_STREAK_KEY) == "12"
        assert json.loads(path.read_text()) == {BEST_STREAK_KEY: "12"}

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        assert JsonFileStore(path).get(BEST_STREAK_KEY) is None

    def test_corrupt_file_is_logged_with_arguments(self, tmp_path, caplog):
        path = tmp_path / "store.json"
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING, logger="core.storage"):
            JsonFileStore(path)

        [record] = caplog.records
        assert record.msg == "Failed to read store %s: %s"
        assert record.args[0] == path

    def test_write_failure_is_logged_with_arguments(self, tmp_path, caplog):
        store = JsonFileStore(tmp_path)
        caplog.clear()

        with caplog.at_level(logging.WARNING, logger="core.storage"):
            store.set(BEST_STREAK_KEY, "3")

        [record] = caplog.records
        assert record.msg == "Failed to write store %s: %s"
        assert record.args[0] == tmp_path

    def test_non_object_file_starts_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2, 3]")
        assert JsonFileStore(path).get(BEST_STREAK_KEY) is None

    def test_write_failure_keeps_value_in_memory(self, tmp_path):
        # A directory cannot be opened for writing
        store = JsonFileStore(tmp_path)
        store.set(BEST_STREAK_KEY, "3")
        assert store.get(BEST_STREAK_KEY) == "3"


class TestBestStreakHelpers:

    @pytest.mark.parametrize(
        "stored,expected",
        [(None, 0), ("0", 0), ("10", 10), ("abc", 0), ("-4", 0), ("", 0)],
    )
    def test_load(self, stored, expected):
        store = MemoryStore({} if stored is None else {BEST_STREAK_KEY: stored})
        assert load_best_streak(store) == expected

    def test_save_encodes_as_string(self):
        store = MemoryStore()
        save_best_streak(store, 12)
        assert store.get(BEST_STREAK_KEY) == "12"
