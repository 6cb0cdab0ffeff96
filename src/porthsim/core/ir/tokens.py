"""
Token types produced by the lexer.

Classification order is marker, then integer, then word: a marker or an
integer always shadows a word with the same spelling.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from .location import SourceLocation

U64_MAX = 2**64 - 1

# Optional '+' then ASCII digits, the same text an unsigned 64-bit parse accepts
_INT_RE = re.compile(r"\+?[0-9]+")


class Marker(StrEnum):
    """Reserved keywords that structure control flow."""

    IF = "if"
    IF_STAR = "if*"
    ELSE = "else"
    WHILE = "while"
    DO = "do"
    END = "end"


class TokenKind(StrEnum):
    """Token categories."""

    WORD = "word"
    INT = "int"
    MARKER = "marker"


_MARKERS: dict[str, Marker] = {marker.value: marker for marker in Marker}


def parse_marker(text: str) -> Marker | None:
    """Return the marker spelled by ``text``, or None."""
    return _MARKERS.get(text)


def parse_u64(text: str) -> int | None:
    """Parse ``text`` as an unsigned 64-bit integer, or return None."""
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if value > U64_MAX:
        return None
    return value


@dataclass(frozen=True)
class Token:
    """
    A single token in the source.

    Attributes:
        kind: Word, Int or Marker
        value: str for words, int for integers, Marker for markers
        location: Where the token starts in the source
    """

    kind: TokenKind
    value: Marker | int | str
    location: SourceLocation

    @classmethod
    def from_text(cls, text: str, location: SourceLocation) -> Token:
        """Classify raw whitespace-delimited text into a token."""
        marker = parse_marker(text)
        if marker is not None:
            return cls(TokenKind.MARKER, marker, location)

        number = parse_u64(text)
        if number is not None:
            return cls(TokenKind.INT, number, location)

        return cls(TokenKind.WORD, text, location)

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.value!r}, {self.location})"
