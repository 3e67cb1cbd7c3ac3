"""Recursive-descent grammar for the accepted XML subset.

Key Components:
    Parser: Element, node and document rules for one parsing session
    Cursor: Immutable input position shared by all rules
    char_data: CDATA section or plain text run
    NoMatch / FatalParseError: soft and fatal grammar failures
"""

from .chardata import (
    CDATA_END,
    CDATA_START,
    cdata_section,
    char_data,
    char_data_into_node,
    text_data,
)
from .errors import (
    FailureKind,
    FatalParseError,
    GrammarError,
    NoMatch,
)
from .lexical import (
    Cursor,
    attribute,
    attribute_value,
    eq,
    identifier,
    is_name_char,
    literal,
    take_until,
    to_cursor,
    whitespace,
)
from .parser import (
    DOCTYPE_MARKER,
    Parser,
    encoding_declaration,
    version_number,
)

__all__ = [
    "CDATA_END",
    "CDATA_START",
    "DOCTYPE_MARKER",
    "Cursor",
    "FailureKind",
    "FatalParseError",
    "GrammarError",
    "NoMatch",
    "Parser",
    "attribute",
    "attribute_value",
    "cdata_section",
    "char_data",
    "char_data_into_node",
    "encoding_declaration",
    "eq",
    "identifier",
    "is_name_char",
    "literal",
    "take_until",
    "text_data",
    "to_cursor",
    "version_number",
    "whitespace",
]
