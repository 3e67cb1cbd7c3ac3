"""Failure types raised by the grammar rules.

A rule either returns ``(cursor, value)`` or raises a ``GrammarError``:

``NoMatch``
    Soft failure. The rule did not match here; an ordered alternative may
    retry from the same cursor.

``FatalParseError``
    A committed production turned out inconsistent (mismatched end tag,
    duplicate attribute key, unterminated doctype). Alternatives never catch
    it, so it aborts the whole parse.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lexical import Cursor

# Characters of remaining input quoted in error messages
_CONTEXT_LENGTH = 20


class FailureKind(Enum):
    """Why a grammar rule failed."""

    EXPECTED_LITERAL = auto()      # A fixed token such as '<' or '?>' is missing
    EXPECTED_IDENTIFIER = auto()   # No name characters where a name is required
    EXPECTED_QUOTE = auto()        # Attribute value does not start with a quote
    UNTERMINATED_VALUE = auto()    # Closing quote never found
    UNTERMINATED_CDATA = auto()    # ']]>' never found
    NO_PROGRESS = auto()           # A child matched without consuming input
    INVALID_VERSION = auto()       # Version literal is not '1.' plus digits
    MISMATCHED_END_TAG = auto()    # End tag name differs from start tag name
    DUPLICATE_ATTRIBUTE = auto()   # Two attribute keys collide case-insensitively
    UNTERMINATED_DOCTYPE = auto()  # No '>' after '<!DOCTYPE'
    TRAILING_INPUT = auto()        # Valid parse, but input left over

    @property
    def is_fatal(self) -> bool:
        return self in _FATAL_KINDS


_FATAL_KINDS = frozenset({
    FailureKind.MISMATCHED_END_TAG,
    FailureKind.DUPLICATE_ATTRIBUTE,
    FailureKind.UNTERMINATED_DOCTYPE,
})


class GrammarError(Exception):
    """Base class for grammar failures, positioned at a cursor."""

    def __init__(self, kind: FailureKind, cursor: "Cursor", message: str) -> None:
        self.kind = kind
        self.cursor = cursor
        self.message = message
        super().__init__(f"{message} at offset {cursor.offset}: {cursor.preview(_CONTEXT_LENGTH)!r}")

    @property
    def offset(self) -> int:
        return self.cursor.offset

    @property
    def remaining(self) -> str:
        """Input left at the failure position."""
        return self.cursor.remaining

    @property
    def is_fatal(self) -> bool:
        return False


class NoMatch(GrammarError):
    """Soft failure: the next ordered alternative may be tried."""


class FatalParseError(GrammarError):
    """Fatal failure: aborts the whole parse without backtracking."""

    @property
    def is_fatal(self) -> bool:
        return True
