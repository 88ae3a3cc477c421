"""
Host-facing API for buffer history and multi-buffer search.

A BufferSeeker owns the recent-document list for one editor session:

    seeker = BufferSeeker(host)
    seeker.initialize()                 # restore history, hook host events
    ...
    listings = seeker.list_recent()     # recent buffers picker
    session = seeker.open_search(MatchMode.FUZZY)
    results = session.filter("query")   # re-run on every keystroke
    spans = session.highlight(results[0])
    ...
    seeker.flush_to_store()             # on session end
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from .config import SeekConfig, load_or_create_config
from .highlight import HighlightSpanComputer
from .line_index import DocumentLineIndex
from .matching import MatchEngine
from .protocol import DOCUMENT_ACTIVATED, SESSION_ENDING, FuzzyScorer, HostProtocol
from .recency import RecencyTracker
from .recency_store import RecencyStore
from .types import (
    HighlightSpan,
    JumpTarget,
    MatchMode,
    MatchResult,
    OpenAction,
    RecentListing,
    SelectionAction,
    now_seconds,
    scheme_of,
)

logger = logging.getLogger(__name__)


class SearchSession:
    """
    One picker invocation over a fixed line index.

    The index is built once when the session opens; ``filter`` runs per
    query change and ``highlight`` per focused result.
    """

    def __init__(
        self,
        index: DocumentLineIndex,
        mode: MatchMode,
        scorer: Optional[FuzzyScorer] = None,
    ):
        self.index = index
        self.mode = MatchMode(mode)
        self._engine = MatchEngine(self.mode, scorer)
        self._highlighter = HighlightSpanComputer(self.mode)
        self.query = ""

    def filter(self, query: Optional[str]) -> list[MatchResult]:
        """Accepted entries for ``query`` in presentation order."""
        self.query = query or ""
        return self._engine.match(self.index, self.query)

    def highlight(self, result: MatchResult, query: Optional[str] = None) -> list[HighlightSpan]:
        """
        Spans for a result, computed on first request and cached on it.

        Args:
            result: A result returned by ``filter``
            query: Query to highlight (defaults to the last filtered query)
        """
        if result.highlight_spans is None or query is not None:
            text = result.entry.text
            active = self.query if query is None else query
            result.highlight_spans = self._highlighter.compute(text, active)
        return result.highlight_spans


class BufferSeeker:
    """
    Recent-buffer tracking and multi-buffer search for one host session.

    Holds the process's recency state explicitly; nothing is kept in
    module globals. Call ``initialize`` once at startup and
    ``flush_to_store`` once at teardown (the session-ending host event
    does this automatically after ``initialize``).
    """

    def __init__(
        self,
        host: HostProtocol,
        config: Optional[SeekConfig] = None,
        *,
        data_dir: Optional[Path] = None,
        store: Optional[RecencyStore] = None,
        scorer: Optional[FuzzyScorer] = None,
        clock=now_seconds,
    ):
        """
        Args:
            host: Editor-side collaborator
            config: Configuration (loaded or created in data_dir if omitted)
            data_dir: Data directory override for config and cache
            store: Cache store override (defaults to the configured path)
            scorer: Fuzzy ranking collaborator override
            clock: Time source for access timestamps
        """
        self.host = host
        self.config = config if config is not None else load_or_create_config(data_dir)
        self.store = store if store is not None else RecencyStore(self.config.cache_path)
        self.tracker = RecencyTracker(self.config.max_entries, clock=clock)
        self.scorer = scorer
        self._initialized = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Restore history, subscribe to host events and seed open documents.

        Documents already loaded and listed in the host are recorded in
        host order, so the last one ends up most recent.
        """
        if self._initialized:
            return
        self._initialized = True

        restored = self.store.load()
        self.tracker.restore(restored)
        logger.info("Restored %d recent buffers from %s", len(self.tracker), self.store.path)

        self.host.subscribe(DOCUMENT_ACTIVATED, self.record_document)
        self.host.subscribe(SESSION_ENDING, self.flush_to_store)

        for document in self.host.documents():
            if document.loaded and document.listed:
                self.record_document(document)

    def flush_to_store(self) -> bool:
        """Persist the current history. Returns False if the write failed."""
        return self.store.save(self.tracker.snapshot())

    # -------------------------------------------------------------------------
    # Recent buffers
    # -------------------------------------------------------------------------

    def record_access(
        self,
        identity: str,
        raw_name: Optional[str] = None,
        *,
        handle: Any = None,
        trackable: bool = True,
    ) -> None:
        """Note that a document became active. See RecencyTracker.record_access."""
        self.tracker.record_access(identity, raw_name, handle=handle, trackable=trackable)

    def record_document(self, document: Any) -> None:
        """Activation callback: track a host document if it is listed."""
        if document is None:
            return
        self.tracker.record_access(
            document.identity,
            handle=document,
            trackable=bool(document.listed),
        )

    def list_recent(self) -> list[RecentListing]:
        """Recent entries, most recent first, with host liveness."""
        listings = []
        for entry in self.tracker.snapshot():
            if self.host.is_live(entry):
                listings.append(RecentListing(entry=entry, live=True))
            else:
                exists = self.host.resource_exists(entry.identity)
                listings.append(RecentListing(entry=entry, live=False, exists=exists))
        return listings

    def resolve_selection(self, listing: RecentListing) -> SelectionAction:
        """
        Decide how the host should open a selected recent entry.

        Stale local entries come back as MISSING with a warning message for
        the host to show; the entry itself is left in history.
        """
        entry = listing.entry
        if listing.live:
            return SelectionAction(OpenAction.SWITCH, entry.identity, handle=entry.live_handle)
        if scheme_of(entry.identity) in self.config.remote_schemes:
            return SelectionAction(OpenAction.OPEN_REMOTE, entry.identity)
        if self.host.resource_exists(entry.identity):
            return SelectionAction(OpenAction.EDIT, entry.identity)
        message = f"File {entry.identity} no longer exists."
        logger.warning("Recent buffer %s no longer exists", entry.identity)
        return SelectionAction(OpenAction.MISSING, entry.identity, message=message)

    # -------------------------------------------------------------------------
    # Multi-buffer search
    # -------------------------------------------------------------------------

    def open_search(
        self,
        mode: MatchMode,
        documents: Optional[Iterable[Any]] = None,
    ) -> SearchSession:
        """
        Index the given documents (default: all loaded host documents).
        """
        if documents is None:
            documents = self.host.documents()
        documents = [d for d in documents if d.loaded]
        index = DocumentLineIndex.build(documents)
        return SearchSession(index, mode, self.scorer)

    def search(
        self,
        mode: MatchMode,
        documents: Optional[Iterable[Any]] = None,
        query: Optional[str] = "",
        *,
        focused: int = 0,
    ) -> list[MatchResult]:
        """
        One-shot search: build the index, filter, highlight the focused result.

        Only ``results[focused]`` has ``highlight_spans`` populated.
        """
        session = self.open_search(mode, documents)
        results = session.filter(query)
        if 0 <= focused < len(results):
            session.highlight(results[focused])
        return results

    @staticmethod
    def jump_target(result: MatchResult) -> JumpTarget:
        """Cursor target for a selected search result."""
        entry = result.entry
        return JumpTarget(
            document=entry.document,
            identity=entry.document_identity,
            line_number=entry.line_number,
        )
