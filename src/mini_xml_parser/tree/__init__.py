"""Document tree for mini XML parsing.

Key Components:
    Node: Tagged union of character data and element
    Element: Markup element with lower-cased name, attributes and children
    Document: Prolog version and encoding plus the root element
    trim_whitespace / strip_whitespace_in_place: the two normalization passes
    first, last, nth, only, elem_name: read-only queries over node sequences
"""

from .nodes import (
    DOCTYPE_ELEMENT_NAME,
    Document,
    Element,
    Node,
    NodeKind,
)
from .query import (
    elem_name,
    find_by_attribute,
    first,
    iter_elements,
    last,
    nth,
    only,
)
from .whitespace import (
    strip_whitespace_in_place,
    trim_whitespace,
)

__all__ = [
    "DOCTYPE_ELEMENT_NAME",
    "Document",
    "Element",
    "Node",
    "NodeKind",
    "elem_name",
    "find_by_attribute",
    "first",
    "iter_elements",
    "last",
    "nth",
    "only",
    "strip_whitespace_in_place",
    "trim_whitespace",
]
