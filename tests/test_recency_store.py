"""Tests for the recent-buffers cache file."""

import json
import logging

import pytest

from bufseek.recency import RecencyTracker
from bufseek.recency_store import CACHE_FILENAME, RecencyStore
from bufseek.types import RecencyEntry


@pytest.fixture
def store(tmp_path):
    return RecencyStore.in_directory(tmp_path)


def _triples(entries):
    return [(e.identity, e.display_label, e.last_used) for e in entries]


class TestRoundTrip:
    def test_save_then_load(self, store, clock):
        tracker = RecencyTracker(clock=clock)
        for name in ["/p/a.py", "rsync://h//srv/b.conf", "/p/c.md", "/p/a.py"]:
            tracker.record_access(name, handle=object())
        assert store.save(tracker.snapshot()) is True
        loaded = store.load()
        assert _triples(loaded) == _triples(tracker.snapshot())
        assert loaded == tracker.snapshot()   # live_handle excluded from equality

    def test_live_handle_not_persisted(self, store):
        store.save([RecencyEntry("/p/a.py", "a.py", 42, live_handle=object())])
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data == [{"identity": "/p/a.py", "display_label": "a.py", "last_used": 42}]

    def test_loaded_entries_have_no_handle(self, store):
        store.save([RecencyEntry("/p/a.py", "a.py", 42, live_handle=object())])
        assert store.load()[0].live_handle is None

    def test_save_overwrites(self, store):
        store.save([RecencyEntry("A", "A", 1), RecencyEntry("B", "B", 0)])
        store.save([RecencyEntry("C", "C", 5)])
        assert _triples(store.load()) == [("C", "C", 5)]

    def test_unicode_identity(self, store):
        store.save([RecencyEntry("/notes/café.md", "café.md", 7)])
        assert store.path.read_text(encoding="utf-8").count("café") == 2
        assert store.load()[0].identity == "/notes/café.md"

    def test_default_filename(self, tmp_path):
        assert RecencyStore.in_directory(tmp_path).path == tmp_path / CACHE_FILENAME

    def test_creates_parent_directory(self, tmp_path):
        store = RecencyStore(tmp_path / "nested" / "dir" / "recent.json")
        assert store.save([RecencyEntry("A", "A", 1)]) is True
        assert store.path.exists()


class TestLoadDegradesToEmpty:
    def test_missing_file(self, store):
        assert not store.path.exists()
        assert store.load() == []

    def test_empty_file(self, store):
        store.path.write_text("", encoding="utf-8")
        assert store.load() == []

    @pytest.mark.parametrize("content", [
        "{not json",
        "[{\"identity\": \"a\"",
        "\x00\x01garbage",
    ])
    def test_unparseable(self, store, content, caplog):
        store.path.write_text(content, encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="bufseek"):
            assert store.load() == []
        assert "malformed" in caplog.text

    @pytest.mark.parametrize("data", [
        {"identity": "a", "display_label": "a", "last_used": 1},
        ["just a string"],
        [{"identity": "a", "display_label": "a"}],
        [{"identity": "a", "display_label": "a", "last_used": "yesterday"}],
        [{"identity": "a", "display_label": "a", "last_used": True}],
        [{"identity": 3, "display_label": "a", "last_used": 1}],
    ])
    def test_wrong_shape(self, store, data):
        store.path.write_text(json.dumps(data), encoding="utf-8")
        assert store.load() == []

    def test_no_partial_salvage(self, store):
        """One bad record discards the whole file."""
        data = [
            {"identity": "good", "display_label": "good", "last_used": 2},
            {"identity": "bad"},
        ]
        store.path.write_text(json.dumps(data), encoding="utf-8")
        assert store.load() == []

    def test_undecodable_bytes(self, store):
        store.path.write_bytes(b"\xff\xfe\xfa")
        assert store.load() == []


class TestSaveFailure:
    def test_unwritable_destination(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = RecencyStore(blocker / "recent.json")
        with caplog.at_level(logging.INFO, logger="bufseek"):
            assert store.save([RecencyEntry("A", "A", 1)]) is False
        assert "not saved" in caplog.text

    def test_failed_save_leaves_entries_untouched(self, tmp_path, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("A")
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        RecencyStore(blocker / "recent.json").save(tracker.snapshot())
        assert [e.identity for e in tracker.snapshot()] == ["A"]
