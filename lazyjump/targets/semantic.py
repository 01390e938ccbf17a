"""Semantic-token discovery.

Token data arrives in the language-server wire shape: a flat integer stream
of ``(delta_line, delta_start, length, type_index, modifier_bits)`` groups
plus a legend naming the type and modifier indexes. The stream is decoded
once per snapshot; ``find`` then matches the pattern against token text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from .literal import distance_key
from .types import Candidate, Position, TextRange

logger = logging.getLogger(__name__)

TOKEN_FIELDS = 5

DEFAULT_INCLUDED_TOKEN_TYPES: tuple[str, ...] = (
    "function",
    "method",
    "class",
    "interface",
    "type",
    "enum",
    "enumMember",
    "variable",
    "property",
    "parameter",
    "namespace",
    "typeParameter",
    "struct",
    "decorator",
    "event",
    "macro",
    "label",
)


@dataclass(frozen=True)
class TokenLegend:
    """Names for the type index and modifier bits of an encoded stream."""

    token_types: tuple[str, ...]
    token_modifiers: tuple[str, ...] = ()

    def modifiers_for(self, bits: int) -> tuple[str, ...]:
        return tuple(name for index, name in enumerate(self.token_modifiers) if bits & (1 << index))


@dataclass(frozen=True)
class TokenRequest:
    """Ask the host for tokens; ``version`` identifies the pattern it serves."""

    view_id: str
    version: int
    pattern: str
    ranges: tuple[TextRange, ...]


@dataclass(frozen=True)
class TokenResponse:
    """Host reply to a ``TokenRequest``; ``error`` set means the fetch failed."""

    view_id: str
    version: int
    data: tuple[int, ...] = ()
    legend: TokenLegend | None = None
    error: str | None = None


@dataclass(frozen=True)
class SemanticToken:
    """One decoded token with its source text."""

    line: int
    column: int
    length: int
    token_type: str
    modifiers: tuple[str, ...]
    text: str


def decode_tokens(
    data: Sequence[int],
    legend: TokenLegend,
    line_text: Callable[[int], str],
) -> list[SemanticToken]:
    """Decode a delta-encoded token stream.

    Raises ``ValueError`` when the stream length is not a multiple of five.
    Tokens whose type index is outside the legend are skipped.
    """
    if len(data) % TOKEN_FIELDS:
        raise ValueError(f"token stream length {len(data)} is not a multiple of {TOKEN_FIELDS}")

    tokens: list[SemanticToken] = []
    line = 0
    column = 0
    cached_line = -1
    cached_text = ""
    for offset in range(0, len(data), TOKEN_FIELDS):
        delta_line, delta_start, length, type_index, bits = data[offset : offset + TOKEN_FIELDS]
        line += delta_line
        column = column + delta_start if delta_line == 0 else delta_start
        if not 0 <= type_index < len(legend.token_types):
            logger.debug("skipping token with unknown type index %d", type_index)
            continue
        if line != cached_line:
            cached_line = line
            cached_text = line_text(line)
        tokens.append(
            SemanticToken(
                line=line,
                column=column,
                length=length,
                token_type=legend.token_types[type_index],
                modifiers=legend.modifiers_for(bits),
                text=cached_text[column : column + length],
            )
        )
    return tokens


class SemanticTargetProvider:
    """Match the pattern against the text of included semantic tokens.

    ``included_types`` of ``None`` keeps every token type. The provider works
    on whatever snapshot was last loaded; an empty snapshot finds nothing.
    """

    def __init__(
        self,
        included_types: Iterable[str] | None = DEFAULT_INCLUDED_TOKEN_TYPES,
        case_sensitive: bool = False,
    ) -> None:
        self.included_types = None if included_types is None else frozenset(included_types)
        self.case_sensitive = case_sensitive
        self.tokens: tuple[SemanticToken, ...] = ()

    def load(self, tokens: Iterable[SemanticToken]) -> None:
        self.tokens = tuple(tokens)

    def _included(self, token: SemanticToken) -> bool:
        if not token.text.strip():
            return False
        return self.included_types is None or token.token_type in self.included_types

    def find(
        self,
        pattern: str,
        cursor: Position,
        ranges: Iterable[TextRange],
        line_text: Callable[[int], str],
    ) -> list[Candidate]:
        if not pattern:
            return []
        visible = list(ranges)
        needle = pattern if self.case_sensitive else pattern.lower()
        found: list[Candidate] = []
        for token in self.tokens:
            if not self._included(token):
                continue
            if not any(self._inside(token, text_range) for text_range in visible):
                continue
            haystack = token.text if self.case_sensitive else token.text.lower()
            if needle not in haystack:
                continue
            text = line_text(token.line)
            end = token.column + token.length
            found.append(
                Candidate(
                    line=token.line,
                    column=token.column,
                    length=token.length,
                    text=token.text,
                    kind=token.token_type,
                    next_char=text[end] if end < len(text) else "",
                    modifiers=token.modifiers,
                )
            )
        found.sort(key=lambda c: distance_key(c, cursor))
        logger.debug("semantic %r matched %d of %d tokens", pattern, len(found), len(self.tokens))
        return found

    @staticmethod
    def _inside(token: SemanticToken, text_range: TextRange) -> bool:
        if not text_range.contains_line(token.line):
            return False
        if token.line == text_range.start.line and token.column < text_range.start.column:
            return False
        if token.line == text_range.end.line and token.column + token.length > text_range.end.column:
            return False
        return True
