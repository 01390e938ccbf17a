"""Literal substring discovery over the visible ranges of a view.

``LiteralTargetProvider`` reports every occurrence of the typed pattern,
overlapping ones included, sorted by distance from the cursor.
``HybridTargetProvider`` adds the containing word and the characters that
would legitimately continue the pattern.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

from .classify import classify_match, is_word_char, word_at
from .types import Candidate, Position, TextRange

logger = logging.getLogger(__name__)

LINE_DISTANCE_WEIGHT = 100


def distance_key(candidate: Candidate, cursor: Position) -> int:
    """Sort key: whole lines dominate; column distance only breaks same-line ties."""
    line_diff = abs(candidate.line - cursor.line)
    col_diff = abs(candidate.column - cursor.column) if line_diff == 0 else 0
    return line_diff * LINE_DISTANCE_WEIGHT + col_diff


def find_columns(text: str, pattern: str, lo: int, hi: int, case_sensitive: bool = False) -> list[int]:
    """Return start columns of ``pattern`` in ``text[lo:hi]``, overlaps included."""
    if not pattern or hi - lo < len(pattern):
        return []
    if case_sensitive:
        columns: list[int] = []
        index = text.find(pattern, lo, hi)
        while index != -1:
            columns.append(index)
            index = text.find(pattern, index + 1, hi)
        return columns
    # Lowercasing can change string length, so match in place on the original text.
    matcher = re.compile(f"(?={re.escape(pattern)})", re.IGNORECASE)
    return [match.start() for match in matcher.finditer(text, lo, hi)]


def filter_candidates(
    candidates: Sequence[Candidate],
    max_candidates: int,
    min_match_length: int = 0,
) -> list[Candidate]:
    """Drop too-short matches, then keep at most ``max_candidates``.

    Either limit is disabled when it is ``<= 0``. Input order is kept.
    """
    kept = [c for c in candidates if min_match_length <= 0 or c.length >= min_match_length]
    if max_candidates > 0:
        kept = kept[:max_candidates]
    return kept


class LiteralTargetProvider:
    """Exact substring search restricted to visible text."""

    def __init__(self, case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive

    def _candidate(self, line: int, text: str, column: int, length: int) -> Candidate:
        end = column + length
        return Candidate(
            line=line,
            column=column,
            length=length,
            text=text[column:end],
            kind=classify_match(text, column, end),
            next_char=text[end] if end < len(text) else "",
        )

    def find(
        self,
        pattern: str,
        cursor: Position,
        ranges: Iterable[TextRange],
        line_text: Callable[[int], str],
    ) -> list[Candidate]:
        """Return all matches of ``pattern`` in ``ranges`` nearest-first."""
        if not pattern:
            return []
        found: list[Candidate] = []
        seen: set[tuple[int, int]] = set()
        for text_range in ranges:
            for line in range(text_range.start.line, text_range.end.line + 1):
                text = line_text(line)
                lo, hi = text_range.column_bounds(line, len(text))
                for column in find_columns(text, pattern, lo, hi, self.case_sensitive):
                    if (line, column) in seen:
                        continue
                    seen.add((line, column))
                    found.append(self._candidate(line, text, column, len(pattern)))
        found.sort(key=lambda c: distance_key(c, cursor))
        logger.debug("literal %r matched %d targets", pattern, len(found))
        return found


class HybridTargetProvider(LiteralTargetProvider):
    """Literal search that also tracks the word around each match."""

    def _candidate(self, line: int, text: str, column: int, length: int) -> Candidate:
        base = super()._candidate(line, text, column, length)
        return replace(base, full_word=word_at(text, column, column + length))

    @staticmethod
    def continuation_chars(candidates: Iterable[Candidate]) -> frozenset[str]:
        """Lower-cased word characters that directly follow any candidate."""
        return frozenset(c.next_char.lower() for c in candidates if is_word_char(c.next_char))
