"""Character data: CDATA sections and plain text runs."""

from typing import Tuple, Union

from mini_xml_parser.tree.nodes import Node

from .errors import FailureKind, NoMatch
from .lexical import Cursor, literal, take_until, to_cursor

CDATA_START = "<![CDATA["
CDATA_END = "]]>"


def cdata_section(cursor: Cursor) -> Tuple[Cursor, str]:
    """Read ``<![CDATA[ ... ]]>`` and return the content verbatim."""
    cursor, _ = literal(cursor, CDATA_START)
    try:
        cursor, data = take_until(cursor, CDATA_END)
    except NoMatch as e:
        raise NoMatch(
            FailureKind.UNTERMINATED_CDATA, e.cursor, "Unterminated CDATA section"
        ) from e
    cursor, _ = literal(cursor, CDATA_END)
    return cursor, data


def text_data(cursor: Cursor) -> Tuple[Cursor, str]:
    """Read a run of characters that are neither '<' nor '>'.

    May match zero characters. A literal '>' is never part of text.
    """
    text = cursor.text
    end = cursor.offset
    while end < len(text) and text[end] not in "<>":
        end += 1
    return Cursor(text, end), text[cursor.offset:end]


def char_data(source: Union[str, Cursor]) -> Tuple[Cursor, str]:
    """A CDATA section if one starts here, otherwise plain text."""
    cursor = to_cursor(source)
    try:
        return cdata_section(cursor)
    except NoMatch:
        return text_data(cursor)


def char_data_into_node(source: Union[str, Cursor]) -> Tuple[Cursor, Node]:
    cursor, data = char_data(source)
    return cursor, Node.of_char_data(data)
