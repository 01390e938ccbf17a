"""Presentation adapter: label and highlight overlays for one session.

Each session owns one style handle per category (current match, other
matches, label text). Handles are created up front, their fragment batches
are replaced in place on every render pass, and they are disposed exactly
once when the session ends.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from ..targets.types import LabeledCandidate, Position

logger = logging.getLogger(__name__)


class StyleCategory(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    LABEL = "label"


@dataclass(frozen=True)
class OverlayFragment:
    """One styled span or inserted text anchored to a document position.

    ``anchor`` is ``"before"`` or ``"after"``; ``length`` is the number of
    buffer characters highlighted starting at ``position`` (zero for pure
    inserted text).
    """

    position: Position
    text: str = ""
    length: int = 0
    anchor: str = "before"


@dataclass(frozen=True)
class OverlayHooks:
    """Host operations backing the overlay handles."""

    create_style: Callable[[StyleCategory], object]
    set_fragments: Callable[[object, tuple[OverlayFragment, ...]], None]
    dispose_style: Callable[[object], None]


def label_fragments(
    labeled: Sequence[LabeledCandidate],
    refinement_char: str = "",
) -> tuple[OverlayFragment, ...]:
    """Label text shown after each match end.

    During second-character refinement only the remaining character is shown.
    """
    fragments: list[OverlayFragment] = []
    for item in labeled:
        text = item.second_char if refinement_char and item.is_sequence else item.label
        candidate = item.candidate
        fragments.append(
            OverlayFragment(
                position=Position(candidate.line, candidate.end_column),
                text=text,
                anchor="after",
            )
        )
    return tuple(fragments)


def highlight_fragments(labeled: Sequence[LabeledCandidate]) -> tuple[OverlayFragment, ...]:
    return tuple(
        OverlayFragment(position=item.candidate.position, length=item.candidate.length)
        for item in labeled
    )


class JumpOverlay:
    """Reusable per-session overlay handles."""

    def __init__(self, hooks: OverlayHooks) -> None:
        self._hooks = hooks
        self._handles = {category: hooks.create_style(category) for category in StyleCategory}
        self.disposed = False
        self.passes = 0

    def show(
        self,
        labeled: Sequence[LabeledCandidate],
        *,
        current_index: int = 0,
        show_labels: bool = True,
        refinement_char: str = "",
    ) -> None:
        """Replace every batch with fragments for ``labeled``; empty clears."""
        if self.disposed:
            return
        items = list(labeled)
        current = items[current_index % len(items)] if items else None
        others = [item for item in items if item is not current]
        self._set(StyleCategory.PRIMARY, highlight_fragments([current]) if current is not None else ())
        self._set(StyleCategory.SECONDARY, highlight_fragments(others))
        self._set(StyleCategory.LABEL, label_fragments(items, refinement_char) if show_labels else ())
        self.passes += 1

    def clear(self) -> None:
        self.show(())

    def dispose(self) -> None:
        """Clear and release all handles; later calls do nothing."""
        if self.disposed:
            return
        try:
            self.clear()
        finally:
            self.disposed = True
            for handle in self._handles.values():
                self._hooks.dispose_style(handle)
            logger.debug("overlay disposed after %d passes", self.passes)

    def _set(self, category: StyleCategory, fragments: tuple[OverlayFragment, ...]) -> None:
        self._hooks.set_fragments(self._handles[category], fragments)
