"""Read-only queries over flat sequences of tree references.

Every function takes a sequence of ``Node`` or ``Element`` references (for
instance ``element.child_nodes()``) and returns references into the same
tree. Nothing here copies or mutates nodes.
"""

from typing import Iterable, Iterator, List, Optional, Sequence, TypeVar, Union

from .nodes import Element, Node, ascii_lower

T = TypeVar("T", Node, Element)

QueryItem = Union[Node, Element]


def nth(items: Sequence[T], index: int) -> Optional[T]:
    """Item at ``index``, or None when the index is out of range.

    Negative indexes are out of range; they do not count from the end.
    """
    if 0 <= index < len(items):
        return items[index]
    return None


def first(items: Sequence[T]) -> Optional[T]:
    return nth(items, 0)


def last(items: Sequence[T]) -> Optional[T]:
    return nth(items, len(items) - 1)


def only(items: Sequence[T]) -> Optional[T]:
    """The single item of a one-item sequence, otherwise None."""
    if len(items) == 1:
        return items[0]
    return None


def _as_element(item: QueryItem) -> Optional[Element]:
    if isinstance(item, Element):
        return item
    return item.as_element()


def elem_name(items: Iterable[QueryItem], name: str) -> List[Element]:
    """Find elements named ``name``, ignoring ASCII case, in document order.

    The search is depth-first and pre-order. When an element matches, it is
    collected and its own descendants are not searched (prune-on-match), so
    an element nested inside a match of the same name is never returned.
    Character data contributes nothing.
    """
    target = ascii_lower(name)
    found: List[Element] = []
    for item in items:
        element = _as_element(item)
        if element is None:
            continue
        if ascii_lower(element.name) == target:
            found.append(element)
        else:
            found.extend(elem_name(element.children, name))
    return found


def iter_elements(items: Iterable[QueryItem]) -> Iterator[Element]:
    """Yield every element, pre-order, without pruning."""
    for item in items:
        element = _as_element(item)
        if element is None:
            continue
        yield element
        yield from iter_elements(element.children)


def find_by_attribute(
    items: Iterable[QueryItem], key: str, value: Optional[str] = None
) -> List[Element]:
    """Find elements carrying attribute ``key`` (and ``value``, when given)."""
    key = ascii_lower(key)
    return [
        element for element in iter_elements(items)
        if key in element.attributes
        and (value is None or element.attributes[key] == value)
    ]
