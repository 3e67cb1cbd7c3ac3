"""Recursive-descent grammar for elements, nodes and documents.

Rules are ordered alternatives over an immutable ``Cursor``. A rule returns
``(cursor, value)`` on success. On ``NoMatch`` the caller still holds its own
cursor and simply tries the next alternative; ``FatalParseError`` is never
caught by an alternative and aborts the parse.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from mini_xml_parser.shared import ParserConfig, get_logger
from mini_xml_parser.tree.nodes import Document, Element, Node

from .chardata import char_data_into_node
from .errors import FailureKind, FatalParseError, GrammarError, NoMatch
from .lexical import (
    Cursor,
    attribute,
    attribute_value,
    eq,
    identifier,
    literal,
    quote,
    take_until,
    to_cursor,
    whitespace,
)

# Raw start tag name that triggers the doctype skip (case-sensitive)
DOCTYPE_MARKER = "!DOCTYPE"

# Only the digit run after this prefix becomes the reported version
VERSION_PREFIX = "1."

_ASCII_DIGITS = "0123456789"

Source = Union[str, Cursor]


def version_number(cursor: Cursor) -> Tuple[Cursor, int]:
    """Read a quoted ``1.N`` literal and return ``N`` as an integer.

    ``"1.0"`` gives 0 and ``"1.23"`` gives 23: the digits after ``1.`` are
    read as a whole number, not as a decimal fraction. Anything other than
    one or more ASCII digits there raises ``NoMatch`` with
    ``FailureKind.INVALID_VERSION``.
    """
    start = cursor
    cursor, delimiter = quote(cursor)
    if not cursor.startswith(VERSION_PREFIX):
        raise NoMatch(
            FailureKind.INVALID_VERSION, cursor, f"Version must start with {VERSION_PREFIX!r}"
        )
    cursor = cursor.advance(len(VERSION_PREFIX))

    text = cursor.text
    end = cursor.offset
    while end < len(text) and text[end] in _ASCII_DIGITS:
        end += 1
    if end == cursor.offset:
        raise NoMatch(
            FailureKind.INVALID_VERSION, cursor, f"Expected digits after {VERSION_PREFIX!r}"
        )
    digits = text[cursor.offset:end]
    cursor = Cursor(text, end)

    if not cursor.startswith(delimiter):
        raise NoMatch(
            FailureKind.INVALID_VERSION, start, "Version literal is not properly quoted"
        )
    return cursor.advance(1), int(digits)


def encoding_declaration(cursor: Cursor) -> Tuple[Cursor, Optional[str]]:
    """Read an optional ``encoding="..."``; the name is kept, never applied."""
    if not cursor.startswith("encoding"):
        return cursor, None
    cursor = cursor.advance(len("encoding"))
    cursor, _ = eq(cursor)
    return attribute_value(cursor)


class Parser:
    """Grammar for one parsing session.

    The set of tag names allowed to close without a slash is fixed when the
    parser is created and is only read while parsing.

    Examples:
        >>> parser = Parser(self_closing_tags=["img"])
        >>> cursor, element = parser.element('<img src="x.png">rest')
        >>> element.name, cursor.remaining
        ('img', 'rest')
    """

    def __init__(
        self,
        self_closing_tags: Iterable[str] = (),
        correlation_id: Optional[str] = None
    ) -> None:
        self.self_closing_tags: FrozenSet[str] = frozenset(
            name.lower() for name in self_closing_tags
        )
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, "grammar")

    @classmethod
    def from_config(cls, config: ParserConfig) -> "Parser":
        return cls(config.self_closing_tags, config.correlation_id)

    def _fatal(self, kind: FailureKind, cursor: Cursor, message: str) -> FatalParseError:
        self._logger.debug(
            "Fatal grammar failure",
            extra={"failure_kind": kind.name, "offset": cursor.offset, "reason": message}
        )
        return FatalParseError(kind, cursor, message)

    # Full-consumption entry points

    def complete_element(self, source: Source) -> Optional[Element]:
        """Parse an element that spans the whole input, then strip blank text.

        Returns None on any failure or when input is left over; use
        ``element`` to tell those cases apart.
        """
        try:
            cursor, element = self.element(source)
        except GrammarError as e:
            self._logger.debug(
                "Element parse rejected",
                extra={"failure_kind": e.kind.name, "offset": e.offset}
            )
            return None
        if not cursor.at_end:
            self._logger.debug(
                "Element parse left trailing input",
                extra={"offset": cursor.offset}
            )
            return None
        element.strip_whitespace()
        return element

    def complete_document(self, source: Source) -> Optional[Document]:
        """Parse a document that spans the whole input, then strip blank text."""
        try:
            cursor, document = self.document(source)
        except GrammarError as e:
            self._logger.debug(
                "Document parse rejected",
                extra={"failure_kind": e.kind.name, "offset": e.offset}
            )
            return None
        if not cursor.at_end:
            self._logger.debug(
                "Document parse left trailing input",
                extra={"offset": cursor.offset}
            )
            return None
        document.root.strip_whitespace()
        return document

    # Grammar rules

    def document(self, source: Source) -> Tuple[Cursor, Document]:
        """Parse the ``<?xml ...?>`` prolog, then the root element."""
        cursor = to_cursor(source)
        cursor, _ = whitespace(cursor)
        cursor, _ = literal(cursor, "<?xml")
        cursor, _ = whitespace(cursor)
        cursor, _ = literal(cursor, "version")
        cursor, _ = eq(cursor)
        cursor, version = version_number(cursor)
        cursor, _ = whitespace(cursor)
        cursor, encoding = encoding_declaration(cursor)
        cursor, _ = whitespace(cursor)
        cursor, _ = literal(cursor, "?>")
        cursor, _ = whitespace(cursor)
        cursor, root = self.element(cursor)
        cursor, _ = whitespace(cursor)
        return cursor, Document(version=version, encoding=encoding, root=root)

    def node(self, source: Source) -> Tuple[Cursor, Node]:
        """An element if one matches here, otherwise character data.

        Input starting with '<' is always tried as markup first.
        """
        cursor = to_cursor(source)
        try:
            return self.element_into_node(cursor)
        except NoMatch:
            return char_data_into_node(cursor)

    def element_into_node(self, source: Source) -> Tuple[Cursor, Node]:
        cursor, element = self.element(source)
        return cursor, Node.of_element(element)

    def element(self, source: Source) -> Tuple[Cursor, Element]:
        """Parse one element, its children and any whitespace after it."""
        start = to_cursor(source)
        cursor, _ = literal(start, "<")
        name_start = cursor
        cursor, raw_name = identifier(cursor, allow_bang=True)
        if raw_name == DOCTYPE_MARKER:
            return self._skip_doctype(cursor)
        # '!' is only read to spot the doctype marker
        if "!" in raw_name:
            raise NoMatch(
                FailureKind.EXPECTED_IDENTIFIER, name_start, f"Invalid tag name {raw_name!r}"
            )

        name = raw_name.lower()
        cursor, _ = whitespace(cursor)
        cursor, pairs = self._attributes(cursor)
        cursor, children = self._close(cursor, name)
        attributes = self._attribute_map(pairs, start)
        cursor, _ = whitespace(cursor)
        return cursor, Element(name=name, attributes=attributes, children=children)

    def _skip_doctype(self, cursor: Cursor) -> Tuple[Cursor, Element]:
        try:
            cursor, _ = take_until(cursor, ">")
        except NoMatch:
            raise self._fatal(
                FailureKind.UNTERMINATED_DOCTYPE, cursor, "Doctype declaration has no closing '>'"
            ) from None
        return cursor.advance(1), Element.doctype()

    def _attributes(self, cursor: Cursor) -> Tuple[Cursor, List[Tuple[str, str]]]:
        pairs = []
        while True:
            try:
                cursor, pair = attribute(cursor)
            except NoMatch:
                return cursor, pairs
            pairs.append(pair)

    def _close(self, cursor: Cursor, name: str) -> Tuple[Cursor, List[Node]]:
        # Bare '>' for configured names; a body that follows is left to the caller
        if name in self.self_closing_tags and cursor.startswith(">"):
            return cursor.advance(1), []
        if cursor.startswith("/>"):
            return cursor.advance(2), []
        return self._content(cursor, name)

    def _content(self, cursor: Cursor, name: str) -> Tuple[Cursor, List[Node]]:
        cursor, _ = literal(cursor, ">")
        cursor, _ = whitespace(cursor)

        children: List[Node] = []
        while not cursor.startswith("</"):
            next_cursor, child = self.node(cursor)
            if next_cursor.offset == cursor.offset:
                raise NoMatch(
                    FailureKind.NO_PROGRESS, cursor, f"Unexpected input inside <{name}>"
                )
            children.append(child)
            cursor = next_cursor

        cursor, _ = literal(cursor, "</")
        cursor, _ = whitespace(cursor)
        end_tag = cursor
        cursor, end_name = identifier(cursor)
        if end_name.lower() != name:
            raise self._fatal(
                FailureKind.MISMATCHED_END_TAG,
                end_tag,
                f"End tag </{end_name}> does not match <{name}>",
            )
        cursor, _ = whitespace(cursor)
        cursor, _ = literal(cursor, ">")
        return cursor, children

    def _attribute_map(self, pairs: List[Tuple[str, str]], start: Cursor) -> Dict[str, str]:
        attributes: Dict[str, str] = {}
        for key, value in pairs:
            if key in attributes:
                raise self._fatal(
                    FailureKind.DUPLICATE_ATTRIBUTE, start, f"Duplicate attribute {key!r}"
                )
            attributes[key] = value
        return attributes
