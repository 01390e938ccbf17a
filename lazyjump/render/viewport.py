"""Render a ``TextView`` viewport with its live jump overlays as ANSI rows."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from ..host.view import TextView
from ..ui_theme import JumpTheme
from .ansi import clip_ansi_line
from .overlay import OverlayFragment, StyleCategory


def _group_by_line(view: TextView) -> dict[int, list[tuple[StyleCategory, OverlayFragment]]]:
    grouped: dict[int, list[tuple[StyleCategory, OverlayFragment]]] = defaultdict(list)
    for category in StyleCategory:
        for fragment in view.fragments(category):
            grouped[fragment.position.line].append((category, fragment))
    return grouped


def decorate_line(
    text: str,
    fragments: Sequence[tuple[StyleCategory, OverlayFragment]],
    theme: JumpTheme,
) -> str:
    """Apply highlight spans and inserted label text to one plain line.

    Text anchored ``"after"`` a column is inserted before text anchored
    ``"before"`` it, so a label hugging the end of one match never lands
    inside the next match's highlight.
    """
    char_styles = [""] * len(text)
    # Secondary first so the current match wins where spans overlap.
    for wanted in (StyleCategory.SECONDARY, StyleCategory.PRIMARY):
        for category, fragment in fragments:
            if category is not wanted or fragment.length <= 0:
                continue
            start = fragment.position.column
            for column in range(max(0, start), min(len(text), start + fragment.length)):
                char_styles[column] = theme.style_for(category)

    inserts: dict[int, list[tuple[int, str, str]]] = defaultdict(list)
    for category, fragment in fragments:
        if not fragment.text:
            continue
        order = 0 if fragment.anchor == "after" else 1
        column = min(max(0, fragment.position.column), len(text))
        inserts[column].append((order, fragment.text, theme.style_for(category)))

    out: list[str] = []
    for column in range(len(text) + 1):
        for _, inserted, style in sorted(inserts.get(column, ()), key=lambda item: item[0]):
            out.append(f"{style}{inserted}{theme.reset}" if style else inserted)
        if column == len(text):
            break
        style = char_styles[column]
        out.append(f"{style}{text[column]}{theme.reset}" if style else text[column])
    return "".join(out)


def render_view_rows(
    view: TextView,
    theme: JumpTheme,
    width: int,
    height: int,
    *,
    highlighted: Sequence[str] | None = None,
    status: str | None = None,
    show_cursor: bool = True,
) -> list[str]:
    """Build ``height`` rows: viewport lines then a status row.

    Lines carrying overlay fragments are drawn from plain text so labels are
    legible; other lines use ``highlighted`` when given.
    """
    body_rows = max(0, height - 1) if status is not None else height
    gutter_width = len(str(len(view.lines)))
    grouped = _group_by_line(view)
    rows: list[str] = []
    for offset in range(body_rows):
        line = view.top + offset
        if line >= len(view.lines):
            rows.append(clip_ansi_line(f"{theme.gutter}~{theme.reset}", width))
            continue
        gutter_style = theme.cursor_line if show_cursor and line == view.cursor.line else theme.gutter
        gutter = f"{gutter_style}{line + 1:>{gutter_width}}{theme.reset} "
        fragments = grouped.get(line)
        if fragments:
            body = decorate_line(view.lines[line], fragments, theme)
        elif highlighted is not None and line < len(highlighted):
            body = highlighted[line]
        else:
            body = view.lines[line]
        rows.append(clip_ansi_line(gutter + body + theme.reset, width))
    if status is not None:
        style = theme.status_notice if view.notices and status == view.notices[-1] else theme.status
        rows.append(clip_ansi_line(f"{style}{status}{theme.reset}", width))
    return rows
