"""Semantic token source backed by Pygments lexers.

Terminal sessions have no language server, so the buffer is lexed with
Pygments and name tokens are re-encoded into the same delta stream a server
would send. Pygments is imported lazily to keep startup cheap.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .semantic import TokenLegend

logger = logging.getLogger(__name__)

TOKEN_LEGEND = TokenLegend(
    token_types=(
        "function",
        "class",
        "namespace",
        "decorator",
        "variable",
        "property",
        "enumMember",
        "label",
        "macro",
        "type",
    ),
)

# Most specific Pygments token types first; the first containing type wins.
_TOKEN_KIND_NAMES: tuple[tuple[str, str], ...] = (
    ("Name.Function", "function"),
    ("Name.Class", "class"),
    ("Name.Exception", "class"),
    ("Name.Namespace", "namespace"),
    ("Name.Decorator", "decorator"),
    ("Name.Builtin.Pseudo", "variable"),
    ("Name.Builtin", "function"),
    ("Name.Attribute", "property"),
    ("Name.Property", "property"),
    ("Name.Constant", "enumMember"),
    ("Name.Label", "label"),
    ("Name.Variable", "variable"),
    ("Name.Other", "variable"),
    ("Comment.Preproc", "macro"),
    ("Keyword.Type", "type"),
)

_LEXER_CACHE: dict[str, object] = {}
_TOKEN_KINDS: list[tuple[object, str]] = []


def _token_kinds() -> list[tuple[object, str]]:
    if not _TOKEN_KINDS:
        from pygments.token import Name, string_to_tokentype

        for dotted, kind in _TOKEN_KIND_NAMES:
            _TOKEN_KINDS.append((string_to_tokentype(dotted), kind))
        # Plain ``Name`` last so every subtype above gets a chance first.
        _TOKEN_KINDS.append((Name, "variable"))
    return _TOKEN_KINDS


def token_kind(ttype) -> str | None:
    """Map a Pygments token type to a semantic kind, or ``None`` to skip it."""
    for parent, kind in _token_kinds():
        if ttype in parent:
            return kind
    return None


def _lexer_for(path: Path, source: str):
    key = path.suffix.lower() or path.name
    lexer = _LEXER_CACHE.get(key)
    if lexer is not None:
        return lexer

    from pygments.lexers import TextLexer, get_lexer_for_filename
    from pygments.util import ClassNotFound

    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False, ensurenl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False, ensurenl=False)
    _LEXER_CACHE[key] = lexer
    return lexer


def encode_source_tokens(source: str, path: Path) -> tuple[list[int], TokenLegend]:
    """Lex ``source`` and return a delta-encoded stream plus its legend.

    Tokens spanning a newline or consisting only of whitespace are dropped.
    """
    lexer = _lexer_for(path, source)
    type_index = {name: index for index, name in enumerate(TOKEN_LEGEND.token_types)}

    data: list[int] = []
    line = 0
    line_start = 0
    previous_line = 0
    previous_column = 0
    scanned = 0
    for offset, ttype, value in lexer.get_tokens_unprocessed(source):
        # Advance line bookkeeping up to this token's offset.
        newline = source.find("\n", scanned, offset)
        while newline != -1:
            line += 1
            line_start = newline + 1
            newline = source.find("\n", newline + 1, offset)
        scanned = max(scanned, offset)

        kind = token_kind(ttype)
        if kind is None or not value.strip() or "\n" in value:
            continue
        column = offset - line_start
        delta_line = line - previous_line
        delta_start = column - previous_column if delta_line == 0 else column
        data.extend((delta_line, delta_start, len(value), type_index[kind], 0))
        previous_line = line
        previous_column = column

    logger.debug("encoded %d tokens for %s", len(data) // 5, path.name)
    return data, TOKEN_LEGEND
