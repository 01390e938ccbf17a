"""Word-shape heuristics for plain-text matches.

Literal and hybrid discovery have no token information, so each match gets a
rough kind from the word it starts. Scoring then treats it like a semantic
token of that kind.
"""

from __future__ import annotations

import re

_WORD_CHAR_RE = re.compile(r"\w")
_IDENTIFIER_RE = re.compile(r"^[a-z_]\w*$")


def is_word_char(ch: str) -> bool:
    return bool(ch) and _WORD_CHAR_RE.match(ch) is not None


def word_at(line: str, start: int, end: int) -> str:
    """Extend ``line[start:end]`` outward across word characters."""
    lo = max(0, start)
    hi = min(len(line), max(end, lo))
    while lo > 0 and is_word_char(line[lo - 1]):
        lo -= 1
    while hi < len(line) and is_word_char(line[hi]):
        hi += 1
    return line[lo:hi]


def classify_match(line: str, start: int, end: int) -> str:
    """Return ``class``, ``variable``, or ``property`` for a match.

    Only matches that begin a word are promoted; anything mid-word is a
    ``property``.
    """
    starts_word = start == 0 or not is_word_char(line[start - 1 : start])
    if starts_word:
        tail = start
        while tail < len(line) and is_word_char(line[tail]):
            tail += 1
        word = line[start:max(tail, end)]
        if word[:1].isupper():
            return "class"
        if _IDENTIFIER_RE.match(word):
            return "variable"
    return "property"
