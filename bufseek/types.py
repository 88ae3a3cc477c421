"""
Data types for buffer history and line search.
"""

import os
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional


# Identities with a scheme prefix (rsync://host/path, scp://host//path)
_SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')

# Highlight groups: the whole-line base layer and the query matches on top
LINE_GROUP = "line"
MATCH_GROUP = "match"


def now_seconds() -> int:
    """Current wall-clock time in whole seconds since the epoch."""
    return int(time.time())


def has_scheme(identity: str) -> bool:
    """Check if an identity carries a ``scheme://`` prefix."""
    return bool(_SCHEME_PATTERN.match(identity))


def scheme_of(identity: str) -> Optional[str]:
    """Return the lowercased scheme of an identity, or None for local paths."""
    if not has_scheme(identity):
        return None
    return identity.split("://", 1)[0].lower()


def display_label_for(name: str) -> str:
    """Short human-readable label for a document name.

    Remote names (``scheme://...``) use the segment after the final slash;
    local paths use their last path component.
    """
    if has_scheme(name):
        return name.rsplit("/", 1)[-1]
    return os.path.basename(name)


class MatchMode(str, Enum):
    """How a query is matched against indexed lines."""
    FUZZY = "fuzzy"
    EXACT = "exact"


@dataclass
class RecencyEntry:
    """
    A document in the recent-history list.

    Attributes:
        identity: Stable document key (usually a path or remote URI)
        display_label: Short name shown to the user
        last_used: Epoch seconds of the most recent activation
        live_handle: Host reference to the open document; None for entries
            restored from disk until the document is activated again
    """
    identity: str
    display_label: str
    last_used: int
    live_handle: Any = field(default=None, compare=False, repr=False)

    def to_record(self) -> dict:
        """Serializable form. The live handle is never persisted."""
        return {
            "identity": self.identity,
            "display_label": self.display_label,
            "last_used": self.last_used,
        }


@dataclass(frozen=True)
class SearchLineEntry:
    """One non-blank line of a loaded document."""
    document_identity: str
    display_label: str
    line_number: int                      # 1-based position in the source
    text: str
    document: Any = field(default=None, compare=False, repr=False)

    @property
    def display(self) -> str:
        """Picker row, also the string fuzzy matching runs against."""
        return f"[{self.display_label}:{self.line_number}] {self.text}"


class HighlightSpan(NamedTuple):
    """Half-open character range [start, end) within a line."""
    start: int
    end: int
    group: str = MATCH_GROUP


@dataclass
class MatchResult:
    """A search line that passed the query filter."""
    entry: SearchLineEntry
    accepted: bool = True
    score: Optional[float] = None         # fuzzy ranking key; None in exact mode
    highlight_spans: Optional[list[HighlightSpan]] = None  # filled lazily

    def __str__(self) -> str:
        score_str = f" [{self.score:.3f}]" if self.score is not None else ""
        return f"{self.entry.display}{score_str}"


# ---------------------------------------------------------------------------
# Recent-list presentation and selection outcomes
# ---------------------------------------------------------------------------

STATUS_OPEN = "open"
STATUS_EXISTS = "file exists"
STATUS_CLOSED = "closed"


@dataclass(frozen=True)
class RecentListing:
    """A recency entry annotated with host-computed liveness.

    ``exists`` is only meaningful when ``live`` is False.
    """
    entry: RecencyEntry
    live: bool
    exists: bool = False

    @property
    def status(self) -> str:
        if self.live:
            return STATUS_OPEN
        return STATUS_EXISTS if self.exists else STATUS_CLOSED

    @property
    def display(self) -> str:
        return f"{self.entry.display_label} [{self.status}]"


class OpenAction(str, Enum):
    """What the host should do with a selected recent entry."""
    SWITCH = "switch"             # document is open, switch to its handle
    OPEN_REMOTE = "open_remote"   # remote identity, host fetches it
    EDIT = "edit"                 # local file still on disk
    MISSING = "missing"           # stale entry, warn the user


@dataclass(frozen=True)
class SelectionAction:
    action: OpenAction
    identity: str
    handle: Any = None
    message: str = ""


@dataclass(frozen=True)
class JumpTarget:
    """Where the host should put the cursor for a selected search line."""
    document: Any
    identity: str
    line_number: int
    column: int = 0
