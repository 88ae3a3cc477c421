"""
Recently-used document list.

Keeps a bounded, deduplicated list of document identities ordered most
recent first. Ordering is maintained by moving the touched entry to the
front rather than by sorting, so every observation sees entries in
descending ``last_used`` order.
"""

import logging
from typing import Any, Callable, Iterable, Iterator, Optional

from .types import RecencyEntry, display_label_for, now_seconds

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100


class RecencyTracker:
    """
    In-memory recent-document list.

    The list is small (``max_entries`` defaults to 100), so lookups are
    plain linear scans over identities.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        *,
        clock: Callable[[], int] = now_seconds,
    ):
        """
        Args:
            max_entries: Capacity; the oldest entry is evicted beyond it
            clock: Returns the current time in whole seconds
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: list[RecencyEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RecencyEntry]:
        return iter(list(self._entries))

    def record_access(
        self,
        identity: str,
        raw_name: Optional[str] = None,
        *,
        handle: Any = None,
        trackable: bool = True,
    ) -> None:
        """
        Move a document to the front of the list, adding it if new.

        Empty identities and non-trackable documents are ignored. If the
        document is already at the front it keeps its position and
        timestamp, so repeated activation does not churn them; a handle is
        still attached if the entry had none (restored from the store).

        Args:
            identity: Stable document key
            raw_name: Name the display label is derived from (defaults to
                the identity)
            handle: Host reference to the open document
            trackable: False for unlisted/special documents
        """
        if not identity or not trackable:
            return

        if self._entries and self._entries[0].identity == identity:
            head = self._entries[0]
            if head.live_handle is None and handle is not None:
                head.live_handle = handle
            return

        for i, entry in enumerate(self._entries):
            if entry.identity == identity:
                del self._entries[i]
                break

        self._entries.insert(0, RecencyEntry(
            identity=identity,
            display_label=display_label_for(raw_name or identity),
            last_used=self._clock(),
            live_handle=handle,
        ))

        if len(self._entries) > self.max_entries:
            evicted = self._entries.pop()
            logger.debug("Evicted %s from recent list", evicted.identity)

    def snapshot(self) -> list[RecencyEntry]:
        """Current entries, most recent first."""
        return list(self._entries)

    def restore(self, records: Iterable[RecencyEntry]) -> None:
        """
        Replace the list with records loaded from the store.

        Records are trusted to be unique already (they were written by a
        tracker). Live handles are cleared; entries past capacity are
        dropped from the tail.
        """
        self._entries = [
            RecencyEntry(
                identity=r.identity,
                display_label=r.display_label,
                last_used=r.last_used,
            )
            for r in records
        ][:self.max_entries]

    def get(self, identity: str) -> Optional[RecencyEntry]:
        for entry in self._entries:
            if entry.identity == identity:
                return entry
        return None

    def reset(self) -> None:
        """Forget all history."""
        self._entries = []
