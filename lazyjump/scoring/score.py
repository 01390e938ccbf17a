"""Candidate ranking by token kind and cursor proximity."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..targets.types import Candidate, ScoredCandidate

logger = logging.getLogger(__name__)

DEFAULT_TYPE_PRIORITIES: dict[str, int] = {
    "function": 100,
    "method": 100,
    "class": 90,
    "interface": 85,
    "type": 80,
    "enum": 75,
    "decorator": 70,
    "namespace": 65,
    "variable": 50,
    "property": 40,
    "parameter": 30,
    "enumMember": 25,
    "event": 20,
    "macro": 15,
    "label": 10,
}
UNKNOWN_TYPE_PRIORITY = 10
DISTANCE_WEIGHT = 2
MAX_DISTANCE_PENALTY = 50
PROXIMITY_BONUS = 20
PROXIMITY_LINES = 5


def type_priority(kind: str | None, priorities: Mapping[str, int] | None = None) -> int:
    """Return static priority for ``kind``; unknown or missing kinds get the floor."""
    table = DEFAULT_TYPE_PRIORITIES if priorities is None else priorities
    if kind is None:
        return UNKNOWN_TYPE_PRIORITY
    return int(table.get(kind, UNKNOWN_TYPE_PRIORITY))


def score_candidate(
    candidate: Candidate,
    cursor_line: int,
    priorities: Mapping[str, int] | None = None,
) -> float:
    """Score one candidate.

    ``priority - min(distance * 2, 50)`` plus a flat bonus when the candidate
    sits within five lines of the cursor.
    """
    distance = abs(candidate.line - cursor_line)
    score = type_priority(candidate.kind, priorities)
    score -= min(distance * DISTANCE_WEIGHT, MAX_DISTANCE_PENALTY)
    if distance <= PROXIMITY_LINES:
        score += PROXIMITY_BONUS
    return float(score)


def score_candidates(
    candidates: Iterable[Candidate],
    cursor_line: int,
    priorities: Mapping[str, int] | None = None,
    cluster_ids: Mapping[Candidate, int] | None = None,
) -> list[ScoredCandidate]:
    """Score and sort candidates descending; ties keep input order."""
    scored = [
        ScoredCandidate(
            candidate=candidate,
            score=score_candidate(candidate, cursor_line, priorities),
            cluster_id=None if cluster_ids is None else cluster_ids.get(candidate),
        )
        for candidate in candidates
    ]
    scored.sort(key=lambda item: -item.score)
    logger.debug("scored %d candidates around line %d", len(scored), cursor_line)
    return scored
