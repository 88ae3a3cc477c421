"""
JSON-file persistence for the recent-document list.

The cache file holds a single array of
``{"identity": str, "display_label": str, "last_used": int}`` objects.
Storage problems never propagate: a missing, unreadable or malformed file
loads as empty history, and a failed save leaves the session unsaved.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from .types import RecencyEntry

logger = logging.getLogger(__name__)

CACHE_FILENAME = "recent_buffers.json"

_FIELDS = (("identity", str), ("display_label", str), ("last_used", int))


class MalformedHistoryError(ValueError):
    """Persisted history does not have the expected shape."""


def _parse_records(data) -> list[RecencyEntry]:
    """Validate decoded JSON. Any bad record invalidates the whole file."""
    if not isinstance(data, list):
        raise MalformedHistoryError(f"expected a list, got {type(data).__name__}")
    entries = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedHistoryError(f"record {i} is not an object")
        for key, expected in _FIELDS:
            value = item.get(key)
            # bool is an int subclass but never a valid timestamp
            if not isinstance(value, expected) or isinstance(value, bool):
                raise MalformedHistoryError(f"record {i} has invalid {key!r}: {value!r}")
        entries.append(RecencyEntry(
            identity=item["identity"],
            display_label=item["display_label"],
            last_used=item["last_used"],
        ))
    return entries


class RecencyStore:
    """Reads and writes the recent-document cache file."""

    def __init__(self, path: Path):
        """
        Args:
            path: Location of the JSON cache file
        """
        self.path = Path(path)

    @classmethod
    def in_directory(cls, data_dir: Path, filename: str = CACHE_FILENAME) -> "RecencyStore":
        return cls(Path(data_dir) / filename)

    def save(self, entries: Iterable[RecencyEntry]) -> bool:
        """
        Overwrite the cache file with the given entries, in order.

        Returns:
            True if the file was written, False if the write failed
        """
        data = [e.to_record() for e in entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
        except OSError as e:
            logger.info("Recent buffers not saved to %s: %s", self.path, e)
            return False
        logger.debug("Saved %d recent buffers to %s", len(data), self.path)
        return True

    def load(self) -> list[RecencyEntry]:
        """
        Read the cache file.

        Returns:
            Entries in stored order; empty if the file is absent, empty,
            unreadable or malformed
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.info("Could not read recent buffers from %s: %s", self.path, e)
            return []

        if not content.strip():
            return []

        try:
            return _parse_records(json.loads(content))
        except (json.JSONDecodeError, MalformedHistoryError) as e:
            logger.warning("Discarding malformed recent buffers file %s: %s", self.path, e)
            return []
