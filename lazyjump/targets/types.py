"""Core value types shared by discovery, scoring, and labeling.

Everything here is immutable so a discovery result can be handed across
stages without defensive copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class JumpMode(str, Enum):
    """Discovery strategy for one jump session."""

    LITERAL = "literal"
    HYBRID = "hybrid"
    SEMANTIC = "semantic"

    @classmethod
    def parse(cls, value: str) -> JumpMode:
        """Return mode for ``value`` (case-insensitive), raising ``ValueError``."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"unknown jump mode: {value!r}")


class DensityLevel(str, Enum):
    """Labeling strategy chosen from candidate count."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based ``(line, column)`` document position."""

    line: int
    column: int


@dataclass(frozen=True)
class TextRange:
    """Half-open document range; ``end.column`` is exclusive."""

    start: Position
    end: Position

    @classmethod
    def lines(cls, first: int, last: int, last_width: int) -> TextRange:
        """Build a range covering whole lines ``first..last`` inclusive."""
        return cls(Position(first, 0), Position(last, max(0, last_width)))

    def contains_line(self, line: int) -> bool:
        return self.start.line <= line <= self.end.line

    def column_bounds(self, line: int, line_length: int) -> tuple[int, int]:
        """Return searchable ``[lo, hi)`` columns of ``line`` inside this range."""
        lo = self.start.column if line == self.start.line else 0
        hi = self.end.column if line == self.end.line else line_length
        return max(0, lo), max(0, min(hi, line_length))


@dataclass(frozen=True)
class Candidate:
    """One potential jump target discovered for the current pattern."""

    line: int
    column: int
    length: int
    text: str
    kind: str | None = None
    next_char: str = ""
    full_word: str = ""
    modifiers: tuple[str, ...] = ()

    @property
    def position(self) -> Position:
        return Position(self.line, self.column)

    @property
    def end_column(self) -> int:
        return self.column + self.length


@dataclass(frozen=True)
class Cluster:
    """Adjacent chainable candidates collapsed under one representative."""

    members: tuple[Candidate, ...]
    representative: Candidate

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class ScoredCandidate:
    """Candidate paired with its ranking score."""

    candidate: Candidate
    score: float
    cluster_id: int | None = None


@dataclass(frozen=True)
class LabeledCandidate:
    """Scored candidate with the label a user types to select it."""

    candidate: Candidate
    label: str
    score: float = 0.0
    is_sequence: bool = field(default=False)

    @property
    def first_char(self) -> str:
        return self.label[:1]

    @property
    def second_char(self) -> str:
        return self.label[1:2]


__all__ = [
    "Candidate",
    "Cluster",
    "DensityLevel",
    "JumpMode",
    "LabeledCandidate",
    "Position",
    "ScoredCandidate",
    "TextRange",
]
