"""Tests for the in-memory recent-document list."""

import pytest

from bufseek.recency import DEFAULT_MAX_ENTRIES, RecencyTracker
from bufseek.types import RecencyEntry, display_label_for


def _ids(tracker: RecencyTracker) -> list[str]:
    return [e.identity for e in tracker.snapshot()]


# ---------------------------------------------------------------------------
# Display labels
# ---------------------------------------------------------------------------


class TestDisplayLabel:
    def test_local_path_uses_basename(self):
        assert display_label_for("/home/user/proj/main.py") == "main.py"

    def test_relative_path(self):
        assert display_label_for("src/app/views.py") == "views.py"

    def test_remote_uses_segment_after_last_slash(self):
        assert display_label_for("rsync://host//srv/app/conf.yaml") == "conf.yaml"

    def test_scp_remote(self):
        assert display_label_for("scp://user@box/etc/hosts") == "hosts"

    def test_bare_name(self):
        assert display_label_for("README") == "README"


# ---------------------------------------------------------------------------
# record_access
# ---------------------------------------------------------------------------


class TestRecordAccess:
    def test_first_access_adds_entry(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("/p/a.py")
        [entry] = tracker.snapshot()
        assert entry.identity == "/p/a.py"
        assert entry.display_label == "a.py"
        assert entry.last_used == 1_700_000_000

    def test_reaccess_moves_to_front(self, clock):
        """A, B, A gives [A, B]: moved, not duplicated."""
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("A")
        tracker.record_access("B")
        tracker.record_access("A")
        assert _ids(tracker) == ["A", "B"]

    def test_middle_entry_moves_and_others_keep_order(self, clock):
        tracker = RecencyTracker(clock=clock)
        for name in ["A", "B", "C", "D"]:
            tracker.record_access(name)
        tracker.record_access("B")
        assert _ids(tracker) == ["B", "D", "C", "A"]

    def test_never_duplicates(self, clock):
        tracker = RecencyTracker(clock=clock)
        sequence = ["a", "b", "a", "c", "c", "b", "d", "a", "e", "b", "a", "a"]
        for identity in sequence:
            tracker.record_access(identity)
            ids = _ids(tracker)
            assert len(ids) == len(set(ids))
        assert set(_ids(tracker)) == set(sequence)

    def test_ordered_by_last_used_descending(self, clock):
        tracker = RecencyTracker(clock=clock)
        for identity in ["a", "b", "c", "a", "d", "b"]:
            tracker.record_access(identity)
        stamps = [e.last_used for e in tracker.snapshot()]
        assert stamps == sorted(stamps, reverse=True)
        assert len(set(stamps)) == len(stamps)

    def test_head_repeat_is_noop(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("A")
        first = tracker.snapshot()[0].last_used
        tracker.record_access("A")
        tracker.record_access("A")
        assert len(tracker) == 1
        assert tracker.snapshot()[0].last_used == first

    def test_head_repeat_attaches_missing_handle(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.restore([RecencyEntry("A", "A", 10)])
        handle = object()
        tracker.record_access("A", handle=handle)
        entry = tracker.get("A")
        assert entry.live_handle is handle
        assert entry.last_used == 10
        assert len(tracker) == 1

    def test_head_repeat_keeps_existing_handle(self, clock):
        tracker = RecencyTracker(clock=clock)
        first, second = object(), object()
        tracker.record_access("A", handle=first)
        tracker.record_access("A", handle=second)
        assert tracker.get("A").live_handle is first

    def test_reaccess_bumps_timestamp(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("A")
        old = tracker.get("A").last_used
        tracker.record_access("B")
        tracker.record_access("A")
        assert tracker.get("A").last_used > old

    def test_empty_identity_ignored(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("")
        assert len(tracker) == 0

    def test_non_trackable_ignored(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("A")
        tracker.record_access("term://shell", trackable=False)
        assert _ids(tracker) == ["A"]

    def test_raw_name_sets_label(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("buf-17", "/work/notes/todo.md")
        assert tracker.get("buf-17").display_label == "todo.md"

    def test_handle_is_kept(self, clock):
        handle = object()
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("/p/a.py", handle=handle)
        assert tracker.get("/p/a.py").live_handle is handle


# ---------------------------------------------------------------------------
# Capacity
# ---------------------------------------------------------------------------


class TestCapacity:
    def test_default_capacity(self):
        assert RecencyTracker().max_entries == DEFAULT_MAX_ENTRIES == 100

    def test_evicts_oldest(self, clock):
        n = 5
        tracker = RecencyTracker(max_entries=n, clock=clock)
        for i in range(n + 1):
            tracker.record_access(f"doc{i}")
        assert len(tracker) == n
        assert _ids(tracker) == [f"doc{i}" for i in range(n, 0, -1)]
        assert tracker.get("doc0") is None

    def test_reaccess_does_not_evict(self, clock):
        tracker = RecencyTracker(max_entries=2, clock=clock)
        tracker.record_access("A")
        tracker.record_access("B")
        tracker.record_access("A")
        assert _ids(tracker) == ["A", "B"]

    def test_default_capacity_enforced(self, clock):
        tracker = RecencyTracker(clock=clock)
        for i in range(150):
            tracker.record_access(f"/f/{i}")
        assert len(tracker) == 100
        assert _ids(tracker)[0] == "/f/149"
        assert _ids(tracker)[-1] == "/f/50"

    @pytest.mark.parametrize("bad", [0, -1])
    def test_invalid_capacity(self, bad):
        with pytest.raises(ValueError):
            RecencyTracker(max_entries=bad)


# ---------------------------------------------------------------------------
# snapshot / restore / reset
# ---------------------------------------------------------------------------


class TestRestore:
    def test_snapshot_is_a_copy(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("A")
        snap = tracker.snapshot()
        snap.clear()
        assert len(tracker) == 1

    def test_restore_replaces_list(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("old")
        tracker.restore([
            RecencyEntry("B", "B", 20),
            RecencyEntry("A", "A", 10),
        ])
        assert _ids(tracker) == ["B", "A"]

    def test_restore_clears_live_handles(self):
        tracker = RecencyTracker()
        tracker.restore([RecencyEntry("A", "A", 10, live_handle=object())])
        assert tracker.get("A").live_handle is None

    def test_restore_does_not_dedup(self):
        tracker = RecencyTracker()
        tracker.restore([RecencyEntry("A", "A", 20), RecencyEntry("A", "A", 10)])
        assert len(tracker) == 2

    def test_restore_truncates_to_capacity(self):
        tracker = RecencyTracker(max_entries=2)
        tracker.restore([RecencyEntry(x, x, 30 - i) for i, x in enumerate("abc")])
        assert _ids(tracker) == ["a", "b"]

    def test_access_after_restore_moves_to_front(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.restore([RecencyEntry("B", "B", 20), RecencyEntry("A", "A", 10)])
        tracker.record_access("A")
        assert _ids(tracker) == ["A", "B"]

    def test_reset(self, clock):
        tracker = RecencyTracker(clock=clock)
        tracker.record_access("A")
        tracker.reset()
        assert tracker.snapshot() == []
