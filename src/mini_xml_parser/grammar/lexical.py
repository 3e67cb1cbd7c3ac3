"""Lexical primitives over an immutable input cursor.

Each primitive takes a ``Cursor`` and returns ``(new_cursor, value)``, or
raises ``NoMatch`` leaving the caller's cursor untouched for the next
alternative.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from .errors import FailureKind, NoMatch

QUOTES = ("\"", "'")


@dataclass(frozen=True)
class Cursor:
    """Position in an immutable text buffer."""

    text: str
    offset: int = 0

    def __post_init__(self) -> None:
        if not (0 <= self.offset <= len(self.text)):
            raise ValueError("Cursor offset out of range")

    @property
    def remaining(self) -> str:
        """Unconsumed suffix of the input."""
        return self.text[self.offset:]

    @property
    def at_end(self) -> bool:
        return self.offset == len(self.text)

    def peek(self) -> str:
        """Next character, or '' at end of input."""
        return self.text[self.offset:self.offset + 1]

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.offset)

    def advance(self, count: int) -> "Cursor":
        return Cursor(self.text, self.offset + count)

    def preview(self, length: int) -> str:
        return self.text[self.offset:self.offset + length]


def to_cursor(source: Union[str, Cursor]) -> Cursor:
    """Accept either raw text or a cursor at the public rule boundary."""
    if isinstance(source, Cursor):
        return source
    if not isinstance(source, str):
        raise TypeError(f"Expected str or Cursor, got {type(source).__name__}")
    return Cursor(source)


def whitespace(cursor: Cursor) -> Tuple[Cursor, str]:
    """Skip zero or more whitespace characters. Never fails."""
    text = cursor.text
    end = cursor.offset
    while end < len(text) and text[end].isspace():
        end += 1
    return Cursor(text, end), text[cursor.offset:end]


def literal(cursor: Cursor, token: str) -> Tuple[Cursor, str]:
    """Consume exactly ``token``."""
    if not cursor.startswith(token):
        raise NoMatch(FailureKind.EXPECTED_LITERAL, cursor, f"Expected {token!r}")
    return cursor.advance(len(token)), token


def is_name_char(char: str, allow_bang: bool = False) -> bool:
    """ASCII letters and ':'; '!' only when ``allow_bang`` is set."""
    return (
        ("a" <= char <= "z")
        or ("A" <= char <= "Z")
        or char == ":"
        or (allow_bang and char == "!")
    )


def identifier(cursor: Cursor, allow_bang: bool = False) -> Tuple[Cursor, str]:
    """Read one or more name characters.

    ``allow_bang`` is set only when reading a start tag name, so that
    ``<!DOCTYPE`` can be recognized.
    """
    text = cursor.text
    end = cursor.offset
    while end < len(text) and is_name_char(text[end], allow_bang):
        end += 1
    if end == cursor.offset:
        raise NoMatch(FailureKind.EXPECTED_IDENTIFIER, cursor, "Expected a name")
    return Cursor(text, end), text[cursor.offset:end]


def take_until(cursor: Cursor, marker: str) -> Tuple[Cursor, str]:
    """Read everything before the first ``marker``; the marker is not consumed."""
    index = cursor.text.find(marker, cursor.offset)
    if index < 0:
        raise NoMatch(FailureKind.EXPECTED_LITERAL, cursor, f"Expected {marker!r}")
    return Cursor(cursor.text, index), cursor.text[cursor.offset:index]


def quote(cursor: Cursor) -> Tuple[Cursor, str]:
    """Consume an opening quote and return it."""
    char = cursor.peek()
    if char not in QUOTES:
        raise NoMatch(FailureKind.EXPECTED_QUOTE, cursor, "Expected a quote")
    return cursor.advance(1), char


def attribute_value(cursor: Cursor) -> Tuple[Cursor, str]:
    """Read a quoted value verbatim. No escapes; the value cannot hold its own quote."""
    after_quote, delimiter = quote(cursor)
    end = cursor.text.find(delimiter, after_quote.offset)
    if end < 0:
        raise NoMatch(
            FailureKind.UNTERMINATED_VALUE, cursor, f"Missing closing {delimiter}"
        )
    return Cursor(cursor.text, end + 1), cursor.text[after_quote.offset:end]


def eq(cursor: Cursor) -> Tuple[Cursor, str]:
    """Optional whitespace, '=', optional whitespace."""
    cursor, _ = whitespace(cursor)
    cursor, _ = literal(cursor, "=")
    cursor, _ = whitespace(cursor)
    return cursor, "="


def attribute(cursor: Cursor) -> Tuple[Cursor, Tuple[str, str]]:
    """Parse one ``key="value"`` pair, surrounded by optional whitespace.

    The key is lower-cased. Uniqueness is checked by the element rule.
    """
    cursor, _ = whitespace(cursor)
    cursor, key = identifier(cursor)
    cursor, _ = eq(cursor)
    cursor, value = attribute_value(cursor)
    cursor, _ = whitespace(cursor)
    return cursor, (key.lower(), value)
