"""Document tree types produced by the grammar.

Ownership only points downward: an ``Element`` owns its ``children`` list and
nothing points back to a parent. Query results are plain references into the
existing tree.
"""

import string
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Union

# Name of the sentinel element yielded for a skipped <!DOCTYPE ...> declaration
DOCTYPE_ELEMENT_NAME = "doctype_decl"

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_lower(text: str) -> str:
    """Lower-case ASCII letters only; other characters are left as they are."""
    return text.translate(_ASCII_LOWER)


class NodeKind(Enum):
    """Variants of a tree node."""

    CHAR_DATA = auto()  # Text or CDATA content, stored verbatim
    ELEMENT = auto()    # Markup element


@dataclass(frozen=True)
class Node:
    """Tagged union of character data and element.

    Build nodes with ``Node.of_char_data`` and ``Node.of_element``, then
    narrow with the ``is_*`` / ``as_*`` / ``into_*`` accessors.
    """

    kind: NodeKind
    value: Union[str, "Element"]

    # Compared by value, never hashed
    __hash__ = None  # type: ignore

    def __post_init__(self) -> None:
        """Validate that the payload matches the variant."""
        if self.kind is NodeKind.CHAR_DATA and not isinstance(self.value, str):
            raise TypeError("Character data node must hold a str")
        if self.kind is NodeKind.ELEMENT and not isinstance(self.value, Element):
            raise TypeError("Element node must hold an Element instance")

    @classmethod
    def of_char_data(cls, text: str) -> "Node":
        return cls(NodeKind.CHAR_DATA, text)

    @classmethod
    def of_element(cls, element: "Element") -> "Node":
        return cls(NodeKind.ELEMENT, element)

    def is_char_data(self) -> bool:
        return self.kind is NodeKind.CHAR_DATA

    def as_char_data(self) -> Optional[str]:
        """Text of a character data node, or None for an element."""
        return self.value if self.kind is NodeKind.CHAR_DATA else None

    def into_char_data(self) -> Optional[str]:
        """Hand the text over to the caller; the node should not be reused."""
        return self.as_char_data()

    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT

    def as_element(self) -> Optional["Element"]:
        """Borrowed view of the element, or None for character data."""
        return self.value if self.kind is NodeKind.ELEMENT else None

    def into_element(self) -> Optional["Element"]:
        """Hand the element over to the caller; the node should not be reused."""
        return self.as_element()

    def to_dict(self) -> Union[str, Dict[str, Any]]:
        """Character data as a plain string, elements as a dictionary."""
        if self.kind is NodeKind.CHAR_DATA:
            return self.value
        return self.value.to_dict()


@dataclass
class Element:
    """A markup element: lower-cased name, attributes and ordered children."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")

    @classmethod
    def doctype(cls) -> "Element":
        """Sentinel standing in for a skipped doctype declaration."""
        return cls(DOCTYPE_ELEMENT_NAME)

    @property
    def is_doctype(self) -> bool:
        # '_' is not a name character, so no parsed tag can collide with the sentinel
        return self.name == DOCTYPE_ELEMENT_NAME

    @property
    def text(self) -> str:
        """Concatenated direct character data children."""
        return "".join(child.value for child in self.children if child.is_char_data())

    def child_nodes(self) -> List[Node]:
        """Fresh list of references to the children, for use with the query layer."""
        return list(self.children)

    def child_elements(self) -> List["Element"]:
        return [child.value for child in self.children if child.is_element()]

    def get_attribute(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value; keys are stored lower-cased."""
        return self.attributes.get(ascii_lower(key), default)

    def strip_whitespace(self) -> None:
        """Drop whitespace-only character data, recursively and in place.

        Retained text keeps its leading and trailing whitespace. See
        ``mini_xml_parser.tree.whitespace.trim_whitespace`` for the pure
        variant that also trims.
        """
        from .whitespace import strip_whitespace_in_place
        strip_whitespace_in_place(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": dict(self.attributes),
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass(frozen=True)
class Document:
    """Parsed document: prolog values plus the root element."""

    version: int
    encoding: Optional[str]
    root: Element

    __hash__ = None  # type: ignore

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation."""
        return {
            "version": self.version,
            "encoding": self.encoding,
            "root": self.root.to_dict(),
        }
