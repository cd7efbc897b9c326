"""Tests for src/store.py: the JSON journal store."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from dreamlog.aggregation import mood_distribution
from dreamlog.models import DreamEntry
from dreamlog.store import DEFAULT_STORE_KEY, JsonEntryStore


def _make_entry(entry_id: str = "e1", **kwargs) -> DreamEntry:
    defaults = {
        "title": "Flying over the city",
        "description": "Rooftops and wind.",
        "date": "2026-10-17T08:00:00.000Z",
        "mood": "joyful",
        "themes": ["Flying", "City"],
    }
    defaults.update(kwargs)
    return DreamEntry(id=entry_id, **defaults)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "journal.json"


class TestJsonEntryStore:
    def test_missing_file_is_empty(self, store_path):
        store = JsonEntryStore(store_path)
        assert store.load_all() == []
        assert store.last_report.clean

    def test_round_trip(self, store_path):
        store = JsonEntryStore(store_path)
        entries = [_make_entry("a"), _make_entry("b", mood="sad", themes=[])]
        assert store.save_all(entries) is True
        assert JsonEntryStore(store_path).load_all() == entries

    def test_blob_lives_under_key(self, store_path):
        JsonEntryStore(store_path).save_all([_make_entry("a")])
        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert list(data) == [DEFAULT_STORE_KEY]
        assert data[DEFAULT_STORE_KEY][0]["id"] == "a"

    def test_other_keys_preserved(self, store_path):
        store_path.write_text(json.dumps({"settings": {"theme": "dark"}}), encoding="utf-8")
        JsonEntryStore(store_path).save_all([_make_entry("a")])
        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert data["settings"] == {"theme": "dark"}

    def test_custom_key(self, store_path):
        JsonEntryStore(store_path, key="other").save_all([_make_entry("a")])
        assert JsonEntryStore(store_path).load_all() == []
        assert len(JsonEntryStore(store_path, key="other").load_all()) == 1

    def test_corrupt_json_starts_fresh(self, store_path):
        store_path.write_text("{not json", encoding="utf-8")
        assert JsonEntryStore(store_path).load_all() == []

    def test_non_object_document(self, store_path):
        store_path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonEntryStore(store_path).load_all() == []

    def test_non_list_value(self, store_path):
        store_path.write_text(json.dumps({DEFAULT_STORE_KEY: "oops"}), encoding="utf-8")
        assert JsonEntryStore(store_path).load_all() == []

    def test_bad_records_skipped_and_reported(self, store_path):
        records = [
            {"id": "good", "date": "2026-10-17T08:00:00Z"},
            {"title": "no id"},
            "not a record",
            {"id": "themes", "themes": "Flying"},
            {"id": "good", "title": "duplicate"},
        ]
        store_path.write_text(json.dumps({DEFAULT_STORE_KEY: records}), encoding="utf-8")
        store = JsonEntryStore(store_path)
        entries = store.load_all()
        assert [e.id for e in entries] == ["good"]
        report = store.last_report
        assert report.loaded == 1
        assert [i.index for i in report.issues] == [1, 2, 3, 4]
        assert report.issues[3].reason == "duplicate id"

    def test_mistyped_fields_still_load(self, store_path):
        records = [
            {"id": "a", "date": 1760688000000, "mood": "sad"},
            {"id": "b", "date": "2026-10-17T08:00:00Z", "mood": "joyful"},
            {"id": "c", "mood": 7, "lucidity": 2},
        ]
        store_path.write_text(json.dumps({DEFAULT_STORE_KEY: records}), encoding="utf-8")
        store = JsonEntryStore(store_path)
        entries = store.load_all()
        assert store.last_report.clean
        assert entries[0].date == ""
        assert (entries[2].mood, entries[2].lucidity) == ("7", "2")
        assert mood_distribution(entries).as_dict() == {"sad": 1, "joyful": 1, "7": 1}

    def test_missing_fields_defaulted(self, store_path):
        store_path.write_text(json.dumps({DEFAULT_STORE_KEY: [{"id": "x"}]}), encoding="utf-8")
        entry = JsonEntryStore(store_path).load_all()[0]
        assert entry.mood == "neutral"
        assert entry.lucidity == "not-lucid"
        assert entry.date == ""

    def test_save_failure_returns_false(self, store_path):
        store = JsonEntryStore(store_path)
        with patch("dreamlog.store.atomic_write", side_effect=OSError("disk full")):
            assert store.save_all([_make_entry("a")]) is False
        assert not store_path.exists()

    def test_append_puts_newest_first(self, store_path):
        store = JsonEntryStore(store_path)
        store.append(_make_entry("first"))
        store.append(_make_entry("second"))
        assert [e.id for e in store.load_all()] == ["second", "first"]

    def test_unicode_preserved(self, store_path):
        store = JsonEntryStore(store_path)
        store.save_all([_make_entry("a", title="Rêve étrange 夢")])
        assert store.load_all()[0].title == "Rêve étrange 夢"
