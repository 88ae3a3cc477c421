"""
Highlight spans for the focused search result.

Every highlighted line gets a whole-line base span; query matches are
layered on top of it. The fuzzy highlighter is a greedy left-to-right scan
and is independent of the scorer that ranked the line, so it may mark a
different subsequence than the one the ranking found.
"""

from typing import Optional

from .types import LINE_GROUP, MATCH_GROUP, HighlightSpan, MatchMode


def line_span(text: str) -> HighlightSpan:
    return HighlightSpan(0, len(text), LINE_GROUP)


def exact_spans(text: str, query: str) -> list[HighlightSpan]:
    """Span of the first case-sensitive literal occurrence of ``query``."""
    if not query:
        return []
    start = text.find(query)
    if start < 0:
        return []
    return [HighlightSpan(start, start + len(query), MATCH_GROUP)]


def fuzzy_spans(text: str, query: str) -> list[HighlightSpan]:
    """
    One-character spans for each query character, matched greedily.

    Each query character takes the first case-insensitive match after the
    previous one, without backtracking. Stops at the first character that
    cannot be found and returns what was matched so far.
    """
    spans: list[HighlightSpan] = []
    position = 0
    for ch in query:
        target = ch.lower()
        for i in range(position, len(text)):
            if text[i].lower() == target:
                spans.append(HighlightSpan(i, i + 1, MATCH_GROUP))
                position = i + 1
                break
        else:
            break
    return spans


class HighlightSpanComputer:
    """Computes the spans to draw for a line under one match mode."""

    def __init__(self, mode: MatchMode):
        self.mode = MatchMode(mode)

    def match_spans(self, text: str, query: Optional[str]) -> list[HighlightSpan]:
        """Query spans only, without the base layer."""
        if not query:
            return []
        if self.mode is MatchMode.EXACT:
            return exact_spans(text, query)
        return fuzzy_spans(text, query)

    def compute(self, text: str, query: Optional[str]) -> list[HighlightSpan]:
        """Base line span followed by the query spans."""
        return [line_span(text), *self.match_spans(text, query)]
