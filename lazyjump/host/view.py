"""Host view contract and an in-memory text view implementing it.

The jump engine never touches a concrete editor. It talks to a view through
``ViewHooks``, a bundle of callables. ``TextView`` is the buffer the
terminal runtime and the tests plug in.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..render.overlay import OverlayFragment, OverlayHooks, StyleCategory
from ..targets.semantic import TokenRequest
from ..targets.types import Position, TextRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewHooks:
    """Operations one host view exposes to the jump engine."""

    view_id: str
    visible_ranges: Callable[[], list[TextRange]]
    line_text: Callable[[int], str]
    cursor: Callable[[], Position]
    move_cursor: Callable[[Position, bool], None]
    overlay: OverlayHooks
    show_status: Callable[[str], None]
    notify: Callable[[str], None]
    request_tokens: Callable[[TokenRequest], None] | None = None


class TextView:
    """Line buffer with a cursor, a scrolled viewport, and overlay batches."""

    _ids = itertools.count(1)

    def __init__(self, text: str, view_id: str = "view", height: int = 24, supports_tokens: bool = False) -> None:
        self.view_id = view_id
        self.lines = text.splitlines() or [""]
        self.height = max(1, height)
        self.top = 0
        self.cursor = Position(0, 0)
        self.status = ""
        self.notices: list[str] = []
        self.token_requests: list[TokenRequest] = []
        self.supports_tokens = supports_tokens
        self.on_selection_changed: Callable[[str, Position], None] | None = None
        self._styles: dict[int, StyleCategory] = {}
        self._fragments: dict[int, tuple[OverlayFragment, ...]] = {}

    @property
    def bottom(self) -> int:
        return min(len(self.lines), self.top + self.height) - 1

    def visible_ranges(self) -> list[TextRange]:
        last = self.bottom
        return [TextRange.lines(self.top, last, len(self.lines[last]))]

    def line_text(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""

    def get_cursor(self) -> Position:
        return self.cursor

    def _clamp(self, position: Position) -> Position:
        line = max(0, min(position.line, len(self.lines) - 1))
        column = max(0, min(position.column, len(self.lines[line])))
        return Position(line, column)

    def move_cursor(self, position: Position, reveal_center: bool = False) -> None:
        """Place the cursor and scroll it into view.

        With ``reveal_center`` a line outside the viewport is centered;
        otherwise the viewport scrolls the minimum needed.
        """
        target = self._clamp(position)
        outside = not self.top <= target.line <= self.bottom
        if outside and reveal_center:
            self.top = target.line - self.height // 2
        elif target.line < self.top:
            self.top = target.line
        elif target.line > self.bottom:
            self.top = target.line - self.height + 1
        self.top = max(0, min(self.top, max(0, len(self.lines) - self.height)))
        changed = target != self.cursor
        self.cursor = target
        if changed and self.on_selection_changed is not None:
            self.on_selection_changed(self.view_id, target)

    def move_lines(self, delta: int) -> None:
        self.move_cursor(Position(self.cursor.line + delta, self.cursor.column))

    def show_status(self, message: str) -> None:
        self.status = message

    def notify(self, message: str) -> None:
        logger.info("notice for %s: %s", self.view_id, message)
        self.notices.append(message)

    def request_tokens(self, request: TokenRequest) -> None:
        self.token_requests.append(request)

    def create_style(self, category: StyleCategory) -> int:
        handle = next(self._ids)
        self._styles[handle] = category
        self._fragments[handle] = ()
        return handle

    def set_fragments(self, handle: object, fragments: tuple[OverlayFragment, ...]) -> None:
        if handle not in self._styles:
            raise KeyError(f"unknown or disposed style handle {handle!r}")
        self._fragments[handle] = tuple(fragments)

    def dispose_style(self, handle: object) -> None:
        self._styles.pop(handle, None)
        self._fragments.pop(handle, None)

    @property
    def style_count(self) -> int:
        return len(self._styles)

    def fragments(self, category: StyleCategory | None = None) -> list[OverlayFragment]:
        """Live overlay fragments, optionally for one category."""
        out: list[OverlayFragment] = []
        for handle, style in self._styles.items():
            if category is None or style == category:
                out.extend(self._fragments.get(handle, ()))
        return out

    def hooks(self) -> ViewHooks:
        return ViewHooks(
            view_id=self.view_id,
            visible_ranges=self.visible_ranges,
            line_text=self.line_text,
            cursor=self.get_cursor,
            move_cursor=self.move_cursor,
            overlay=OverlayHooks(
                create_style=self.create_style,
                set_fragments=self.set_fragments,
                dispose_style=self.dispose_style,
            ),
            show_status=self.show_status,
            notify=self.notify,
            request_tokens=self.request_tokens if self.supports_tokens else None,
        )
