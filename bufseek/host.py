"""
Filesystem-backed host.

Treats files on disk as loaded documents and keeps an in-process event
registry, so the core can run outside an editor (CLI, scripts, tests).
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from .types import RecencyEntry, has_scheme

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class TextDocument:
    """An in-memory document; lines are stored without line terminators."""
    number: int
    identity: str = ""
    lines: list[str] = field(default_factory=list)
    listed: bool = True
    loaded: bool = True

    def get_lines(self) -> list[str]:
        return list(self.lines)


@dataclass(eq=False)
class FileDocument:
    """A document backed by a file, read on demand."""
    number: int
    identity: str
    listed: bool = True
    loaded: bool = True

    def get_lines(self) -> list[str]:
        try:
            return Path(self.identity).read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            logger.info("Cannot read %s: %s", self.identity, e)
            return []


class FileSystemHost:
    """
    Host implementation over an explicit set of documents.

    Documents are live while they are registered with the host. Resource
    existence is checked on the local filesystem; remote identities are
    never reported as existing.
    """

    def __init__(self, documents: Sequence[Any] = ()):
        self._documents: list[Any] = list(documents)
        self._subscribers: dict[str, list[Callable[..., Any]]] = defaultdict(list)

    @classmethod
    def from_paths(cls, paths: Sequence[Path | str]) -> "FileSystemHost":
        documents = [
            FileDocument(number=i, identity=str(Path(p).expanduser().resolve()))
            for i, p in enumerate(paths, start=1)
        ]
        return cls(documents)

    def documents(self) -> list[Any]:
        return [d for d in self._documents if d.loaded]

    def add(self, document: Any) -> None:
        self._documents.append(document)

    def close(self, document: Any) -> None:
        """Unload a document; it stays in history but is no longer live."""
        self._documents = [d for d in self._documents if d is not document]

    def find(self, identity: str) -> Optional[Any]:
        for document in self.documents():
            if document.identity == identity:
                return document
        return None

    def is_live(self, entry: RecencyEntry) -> bool:
        if entry.live_handle is not None and any(
            d is entry.live_handle for d in self.documents()
        ):
            return True
        return self.find(entry.identity) is not None

    def resource_exists(self, identity: str) -> bool:
        if not identity or has_scheme(identity):
            return False
        return Path(identity).is_file()

    # -- Events --

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        self._subscribers[event].append(callback)

    def emit(self, event: str, *args: Any) -> None:
        for callback in list(self._subscribers.get(event, ())):
            callback(*args)
