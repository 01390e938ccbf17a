"""Source loading, sanitization, and idle-time syntax highlighting.

Pygments is imported lazily on first use so plain ``--render-labels`` runs
and tests stay fast. Highlighting failures fall back to the plain text.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
DEFAULT_STYLE = "monokai"

_FORMATTERS: dict[str, object] = {}
_INVALID_STYLES: set[str] = set()


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape control bytes so the buffer cannot ring bells or move the cursor."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _formatter_for_style(style: str):
    from pygments.formatters import TerminalFormatter
    from pygments.styles import get_style_by_name
    from pygments.util import ClassNotFound

    if style in _INVALID_STYLES:
        style = DEFAULT_STYLE
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        _INVALID_STYLES.add(style)
        style = DEFAULT_STYLE
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_lines(lines: list[str], path: Path, style: str = DEFAULT_STYLE) -> list[str]:
    """Return ANSI-highlighted copies of ``lines`` (same count, no newlines).

    Any Pygments failure returns ``lines`` unchanged.
    """
    from pygments import highlight
    from pygments.lexers import TextLexer, get_lexer_for_filename
    from pygments.util import ClassNotFound

    source = "\n".join(lines)
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False, ensurenl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False, ensurenl=False)
    try:
        rendered = highlight(source, lexer, _formatter_for_style(style))
    except Exception:
        logger.warning("highlighting %s failed", path, exc_info=True)
        return list(lines)
    out = rendered.split("\n")
    if len(out) < len(lines):
        return list(lines)
    return out[: len(lines)]
