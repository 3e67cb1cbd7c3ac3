"""Whitespace normalization over parsed trees.

Two distinct operations, not interchangeable:

``strip_whitespace_in_place``
    Mutates an element: removes character data children that are empty once
    trimmed, recursively. Text that survives is left exactly as parsed.

``trim_whitespace``
    Pure rebuild of a node: every character data value is trimmed, and values
    that become empty are dropped. The input tree is not modified.
"""

from .nodes import Element, Node


def _is_blank(node: Node) -> bool:
    return node.is_char_data() and not node.value.strip()


def strip_whitespace_in_place(element: Element) -> None:
    """Remove whitespace-only character data below ``element``, in place."""
    element.children[:] = [child for child in element.children if not _is_blank(child)]
    for child in element.children:
        if child.is_element():
            strip_whitespace_in_place(child.value)


def trim_whitespace(node: Node) -> Node:
    """Return a trimmed copy of ``node``.

    Character data becomes its trimmed text. An element is rebuilt with its
    children trimmed, and children that trim to empty text are left out.
    Attributes are copied, never shared with the input.
    """
    if node.is_char_data():
        return Node.of_char_data(node.value.strip())

    element = node.value
    children = []
    for child in element.children:
        trimmed = trim_whitespace(child)
        if trimmed.is_char_data() and not trimmed.value:
            continue
        children.append(trimmed)

    return Node.of_element(Element(
        name=element.name,
        attributes=dict(element.attributes),
        children=children,
    ))
