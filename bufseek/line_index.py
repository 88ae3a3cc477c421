"""
Flat line index over loaded documents.

Built once per search session and discarded afterwards; matching re-runs
over the same index on every query change.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence

from .protocol import Document
from .types import SearchLineEntry, display_label_for

logger = logging.getLogger(__name__)


def document_label(document: Document) -> str:
    """Display label for a document; unnamed documents get a placeholder."""
    if not document.identity:
        return f"[Buffer {document.number}]"
    return display_label_for(document.identity)


def iter_document_lines(document: Document) -> Iterator[SearchLineEntry]:
    """Yield the non-blank lines of a document with their 1-based numbers."""
    label = document_label(document)
    for line_number, text in enumerate(document.get_lines(), start=1):
        if not text or text.isspace():
            continue
        yield SearchLineEntry(
            document_identity=document.identity,
            display_label=label,
            line_number=line_number,
            text=text,
            document=document,
        )


class DocumentLineIndex(Sequence[SearchLineEntry]):
    """Searchable lines of a set of documents, in document then line order."""

    def __init__(self, entries: Iterable[SearchLineEntry] = ()):
        self._entries = list(entries)

    @classmethod
    def build(cls, documents: Iterable[Document]) -> "DocumentLineIndex":
        """Index every non-blank line of the given documents."""
        entries: list[SearchLineEntry] = []
        count = 0
        for document in documents:
            entries.extend(iter_document_lines(document))
            count += 1
        logger.debug("Indexed %d lines from %d documents", len(entries), count)
        return cls(entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SearchLineEntry]:
        return iter(self._entries)
