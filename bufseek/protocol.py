"""
Protocol definitions for the host editor and pluggable collaborators.

Defines the interface contracts bufseek relies on:
- Document: a buffer the host has loaded
- HostProtocol: document enumeration, liveness checks and event hooks
- FuzzyScorer: ranking function used by fuzzy line search
"""

from typing import Any, Callable, Optional, Protocol, Sequence, runtime_checkable

from .types import RecencyEntry


# Host events bufseek subscribes to during initialize()
DOCUMENT_ACTIVATED = "document_activated"   # callback(document)
SESSION_ENDING = "session_ending"           # callback()


@runtime_checkable
class Document(Protocol):
    """
    A document loaded in the host.

    ``identity`` is the empty string for unnamed scratch documents.
    ``number`` is the host's ordinal for the document, used to label
    unnamed documents in search results.
    """

    number: int
    identity: str
    listed: bool
    loaded: bool

    def get_lines(self) -> list[str]: ...


@runtime_checkable
class HostProtocol(Protocol):
    """
    The editor-side collaborator.

    Implemented by:
    - FileSystemHost (files on disk, used by the CLI and tests)
    - editor integrations
    """

    def documents(self) -> Sequence[Document]: ...

    def is_live(self, entry: RecencyEntry) -> bool: ...

    def resource_exists(self, identity: str) -> bool: ...

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None: ...


@runtime_checkable
class FuzzyScorer(Protocol):
    """
    Ranks a candidate string against a query.

    Returns a score where higher is better, or None to reject the
    candidate. Called only for candidates that already contain the
    query as a case-insensitive ordered subsequence.
    """

    def score(self, query: str, candidate: str) -> Optional[float]: ...
