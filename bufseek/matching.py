"""
Query matching over indexed lines.

Two modes, chosen per search and never mixed:

- fuzzy: the query must appear in the entry's ``[label:line] text`` row as a
  case-insensitive ordered subsequence; accepted rows are ranked best-first
  by a FuzzyScorer.
- exact: the raw line text must contain the query as a case-sensitive
  literal substring. Accepted rows keep index order; there is no ranking.

An empty query accepts every entry in index order in both modes.
"""

import logging
import math
from collections.abc import Iterable
from typing import Optional

from .protocol import FuzzyScorer
from .types import MatchMode, MatchResult, SearchLineEntry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Default fuzzy scorer (fzy-style alignment scoring)
# ---------------------------------------------------------------------------

SCORE_MIN = -math.inf
SCORE_MAX = math.inf

SCORE_GAP_LEADING = -0.005
SCORE_GAP_TRAILING = -0.005
SCORE_GAP_INNER = -0.01
SCORE_MATCH_CONSECUTIVE = 1.0
SCORE_MATCH_SLASH = 0.9
SCORE_MATCH_WORD = 0.8
SCORE_MATCH_CAPITAL = 0.7
SCORE_MATCH_DOT = 0.6

# Longer candidates are accepted but not scored
MATCH_MAX_LEN = 1024

_WORD_SEPARATORS = frozenset("-_ :[(")


def is_subsequence(query: str, candidate: str) -> bool:
    """Case-insensitive ordered-subsequence test."""
    remaining = iter(candidate.lower())
    return all(ch in remaining for ch in query.lower())


def _match_bonuses(candidate: str) -> list[float]:
    """Bonus for matching each character, based on the character before it."""
    bonuses = []
    prev = "/"
    for ch in candidate:
        if not ch.isalnum():
            bonus = 0.0
        elif prev == "/":
            bonus = SCORE_MATCH_SLASH
        elif prev in _WORD_SEPARATORS:
            bonus = SCORE_MATCH_WORD
        elif prev == ".":
            bonus = SCORE_MATCH_DOT
        elif prev.islower() and ch.isupper():
            bonus = SCORE_MATCH_CAPITAL
        else:
            bonus = 0.0
        bonuses.append(bonus)
        prev = ch
    return bonuses


class SubsequenceScorer:
    """
    Scores the best alignment of a query inside a candidate.

    Rewards consecutive runs and matches at word starts; penalizes gaps.
    Case-insensitive. Returns None when the query is not a subsequence.
    """

    def score(self, query: str, candidate: str) -> Optional[float]:
        if not is_subsequence(query, candidate):
            return None
        n, m = len(query), len(candidate)
        if n == 0 or m > MATCH_MAX_LEN:
            return SCORE_MIN
        if n == m:
            return SCORE_MAX

        q = query.lower()
        c = candidate.lower()
        bonuses = _match_bonuses(candidate)

        # best[j]: best score for query[:i+1] within candidate[:j+1]
        # ending[j]: best score for query[:i+1] with query[i] matched at j
        best_prev: list[float] = []
        ending_prev: list[float] = []
        for i in range(n):
            best = [SCORE_MIN] * m
            ending = [SCORE_MIN] * m
            gap = SCORE_GAP_TRAILING if i == n - 1 else SCORE_GAP_INNER
            running = SCORE_MIN
            for j in range(m):
                if q[i] == c[j]:
                    if i == 0:
                        s = j * SCORE_GAP_LEADING + bonuses[j]
                    elif j > 0:
                        s = max(
                            best_prev[j - 1] + bonuses[j],
                            ending_prev[j - 1] + SCORE_MATCH_CONSECUTIVE,
                        )
                    else:
                        s = SCORE_MIN
                    ending[j] = s
                    running = max(s, running + gap)
                else:
                    running = running + gap
                best[j] = running
            best_prev, ending_prev = best, ending
        return best_prev[m - 1]


# ---------------------------------------------------------------------------
# Match engine
# ---------------------------------------------------------------------------

class MatchEngine:
    """Filters (and in fuzzy mode ranks) index entries against a query."""

    def __init__(self, mode: MatchMode, scorer: Optional[FuzzyScorer] = None):
        """
        Args:
            mode: Matching semantics for this engine
            scorer: Fuzzy ranking collaborator (fuzzy mode only)
        """
        self.mode = MatchMode(mode)
        self.scorer = scorer if scorer is not None else SubsequenceScorer()

    def accepts(self, entry: SearchLineEntry, query: Optional[str]) -> bool:
        """Whether a single entry passes the query filter."""
        if not query:
            return True
        if self.mode is MatchMode.EXACT:
            return query in entry.text
        return is_subsequence(query, entry.display)

    def match(
        self,
        entries: Iterable[SearchLineEntry],
        query: Optional[str],
    ) -> list[MatchResult]:
        """
        Return accepted entries in presentation order.

        Fuzzy results are sorted by descending score; ties keep index
        order. Exact results always keep index order.
        """
        if not query:
            return [MatchResult(entry=e) for e in entries]
        if self.mode is MatchMode.EXACT:
            return [MatchResult(entry=e) for e in entries if query in e.text]

        scored: list[MatchResult] = []
        for entry in entries:
            candidate = entry.display
            if not is_subsequence(query, candidate):
                continue
            score = self.scorer.score(query, candidate)
            if score is None:
                continue
            scored.append(MatchResult(entry=entry, score=score))
        # sorted() is stable, so equal scores stay in index order
        results = sorted(scored, key=lambda r: -r.score)
        logger.debug("Fuzzy query %r matched %d entries", query, len(results))
        return results
