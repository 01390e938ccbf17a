"""Density-adaptive label assignment.

Sparse views get one keystroke per target. As density grows the nearest
targets keep single characters and the rest get two-character sequences,
and very dense views use sequences throughout. Assignment is a pure function
of its inputs so identical sessions always show identical labels.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..config import DensityThresholds, dedupe_characters
from ..targets.types import DensityLevel, LabeledCandidate, ScoredCandidate
from .density import density_level

logger = logging.getLogger(__name__)

DEFAULT_HOME_SIZE = 8
EXTENDED_SIZE = 12


def label_alphabet(characters: str, excluded: Iterable[str] = ()) -> str:
    """Return deduplicated jump characters minus ``excluded`` (case-insensitive)."""
    blocked = {ch.lower() for ch in excluded}
    return "".join(ch for ch in dedupe_characters(characters) if ch.lower() not in blocked)


def label_capacity(alphabet: str, level: DensityLevel, home_size: int = DEFAULT_HOME_SIZE) -> int:
    """Number of candidates ``level`` can label with ``alphabet``."""
    home = alphabet[:home_size]
    if level is DensityLevel.LOW:
        return len(alphabet)
    if level is DensityLevel.MEDIUM:
        extended = alphabet[home_size : home_size + EXTENDED_SIZE]
        return len(home) + len(extended) * len(home)
    return len(home) * len(alphabet)


def _single_labels(count: int, alphabet: str) -> list[str]:
    return list(alphabet[:count])


def _mixed_labels(count: int, alphabet: str, home_size: int) -> list[str]:
    home = alphabet[:home_size]
    extended = alphabet[home_size : home_size + EXTENDED_SIZE]
    labels = list(home[:count])
    index = 0
    while len(labels) < count and home:
        first = index // len(home)
        if first >= len(extended):
            break
        labels.append(extended[first] + home[index % len(home)])
        index += 1
    return labels


def _sequence_labels(count: int, alphabet: str, home_size: int) -> list[str]:
    labels: list[str] = []
    for first in alphabet[:home_size]:
        for second in alphabet:
            if len(labels) >= count:
                return labels
            labels.append(first + second)
    return labels


def _avoid_next_char_conflicts(labels: list[str], next_chars: Sequence[str], alphabet: str) -> list[str]:
    """Swap single labels that read like the text right after their target.

    Replacements come from the alternate-case alphabet and never reuse a
    label or the first character of a sequence already in play.
    """
    taken = {label[:1] for label in labels}
    alternates = dedupe_characters(alphabet.swapcase())
    resolved = list(labels)
    for index, label in enumerate(labels):
        next_char = next_chars[index]
        if len(label) != 1 or not next_char or label.lower() != next_char.lower():
            continue
        for alternate in alternates:
            if alternate.lower() == next_char.lower() or alternate in taken:
                continue
            taken.discard(label)
            taken.add(alternate)
            resolved[index] = alternate
            break
    return resolved


def assign_labels(
    scored: Sequence[ScoredCandidate],
    jump_characters: str,
    thresholds: DensityThresholds,
    *,
    excluded_chars: Iterable[str] = (),
    home_size: int = DEFAULT_HOME_SIZE,
) -> list[LabeledCandidate]:
    """Label ``scored`` (already in score order) with unique one/two-char labels.

    Candidates beyond the strategy's capacity are left out of the result.
    """
    if not scored:
        return []
    alphabet = label_alphabet(jump_characters, excluded_chars)
    level = density_level(len(scored), thresholds)
    if level is DensityLevel.LOW:
        labels = _single_labels(len(scored), alphabet)
    elif level is DensityLevel.MEDIUM:
        labels = _mixed_labels(len(scored), alphabet, home_size)
    else:
        labels = _sequence_labels(len(scored), alphabet, home_size)

    labels = _avoid_next_char_conflicts(
        labels,
        [item.candidate.next_char for item in scored[: len(labels)]],
        alphabet,
    )
    if len(labels) < len(scored):
        logger.debug("%d of %d candidates left unlabeled", len(scored) - len(labels), len(scored))
    return [
        LabeledCandidate(
            candidate=item.candidate,
            label=label,
            score=item.score,
            is_sequence=len(label) > 1,
        )
        for item, label in zip(scored, labels)
    ]


def second_phase_labels(first_char: str, labeled: Iterable[LabeledCandidate]) -> list[LabeledCandidate]:
    """Sequence candidates whose label starts with ``first_char``."""
    return [item for item in labeled if item.is_sequence and item.first_char == first_char]
