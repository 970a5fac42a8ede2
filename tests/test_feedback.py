"""Tests for the feedback log and its stores (makeover/client/feedback.py)."""

import json

import pytest

from makeover.client.feedback import FeedbackLog, JsonFileStore, MemoryStore


def test_memory_store_round_trip():
    store = MemoryStore()
    assert store.get("missing") is None
    store.set("k", [1, 2])
    assert store.get("k") == [1, 2]


def test_record_appends_entry(sample_plan):
    log = FeedbackLog(MemoryStore())

    first = log.record("up", "love it", sample_plan)
    log.record("down", "", sample_plan)

    entries = log.entries()
    assert len(entries) == 2
    assert entries[0] == first
    assert first["designPlan"]["wallColor"]["color"] == "Soft Off-White"
    assert isinstance(first["timestamp"], int)


def test_invalid_rating_rejected(sample_plan):
    log = FeedbackLog(MemoryStore())
    with pytest.raises(ValueError):
        log.record("meh", "", sample_plan)
    assert log.entries() == []


def test_json_file_store_persists(tmp_path, sample_plan):
    path = tmp_path / "nested" / "feedback.json"
    FeedbackLog(JsonFileStore(path)).record("up", "nice", sample_plan)

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["designFeedback"][0]["rating"] == "up"

    # A fresh store over the same file sees the earlier entry
    log = FeedbackLog(JsonFileStore(path))
    log.record("down", "", sample_plan)
    assert [e["rating"] for e in log.entries()] == ["up", "down"]


def test_json_file_store_keeps_other_keys(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

    JsonFileStore(path).set("designFeedback", [])

    assert json.loads(path.read_text(encoding="utf-8")) == {"theme": "dark", "designFeedback": []}
