"""
bufseek: recent-buffer history and multi-buffer line search for editors.

Quick start:
    from bufseek import BufferSeeker, MatchMode

    seeker = BufferSeeker(host)
    seeker.initialize()
    results = seeker.search(MatchMode.FUZZY, query="todo")
"""

from .api import BufferSeeker, SearchSession
from .config import SeekConfig, load_or_create_config
from .highlight import HighlightSpanComputer
from .line_index import DocumentLineIndex
from .matching import MatchEngine, SubsequenceScorer
from .recency import RecencyTracker
from .recency_store import RecencyStore
from .types import (
    HighlightSpan,
    MatchMode,
    MatchResult,
    OpenAction,
    RecencyEntry,
    RecentListing,
    SearchLineEntry,
)

__all__ = [
    "BufferSeeker",
    "SearchSession",
    "SeekConfig",
    "load_or_create_config",
    "HighlightSpanComputer",
    "DocumentLineIndex",
    "MatchEngine",
    "SubsequenceScorer",
    "RecencyTracker",
    "RecencyStore",
    "HighlightSpan",
    "MatchMode",
    "MatchResult",
    "OpenAction",
    "RecencyEntry",
    "RecentListing",
    "SearchLineEntry",
]
