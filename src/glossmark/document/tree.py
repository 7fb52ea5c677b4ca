"""Document tree model.

A document is a rooted tree of text and element nodes. The tree is strictly
single-owner: each node lives in exactly one parent's ``children`` list and
nodes keep no reference back to their parent. Anything that needs to go
"up" (paths, splicing) searches down from an explicit root instead.

Nodes compare by identity. Two text nodes with the same content are still
different positions in the document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(eq=False)
class TextNode:
    """Leaf node holding character data."""

    content: str = ""


@dataclass(eq=False)
class ElementNode:
    """Element node with a lower-case tag, attributes and ordered children."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return an attribute value, or ``default`` when absent."""
        return self.attributes.get(name, default)

    @property
    def classes(self) -> list[str]:
        return (self.attributes.get("class") or "").split()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def element_children(self) -> list[ElementNode]:
        return [c for c in self.children if isinstance(c, ElementNode)]

    def index_of(self, child: Node) -> int:
        """Index of ``child`` among this element's children (by identity).

        Raises:
            ValueError: If ``child`` is not a direct child.
        """
        for i, candidate in enumerate(self.children):
            if candidate is child:
                return i
        msg = "node is not a child of this element"
        raise ValueError(msg)


Node: TypeAlias = TextNode | ElementNode


def node_length(node: Node) -> int:
    """Maximum valid offset for a position inside ``node``."""
    if isinstance(node, TextNode):
        return len(node.content)
    return len(node.children)


def iter_document_order(root: Node) -> Iterator[Node]:
    """Yield ``root`` and every descendant, depth-first, left to right."""
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ElementNode):
            stack.extend(reversed(node.children))


def iter_elements(root: Node) -> Iterator[ElementNode]:
    """Yield element nodes under (and including) ``root`` in document order."""
    for node in iter_document_order(root):
        if isinstance(node, ElementNode):
            yield node


def find_parent(root: ElementNode, target: Node) -> ElementNode | None:
    """Find the element whose children contain ``target``.

    Returns None for the root itself or for detached nodes.
    """
    for element in iter_elements(root):
        for child in element.children:
            if child is target:
                return element
    return None


def contains(root: Node, target: Node) -> bool:
    """True if ``target`` is ``root`` or one of its descendants."""
    return any(node is target for node in iter_document_order(root))


def text_content(node: Node) -> str:
    """Concatenated character data of ``node`` and its descendants."""
    return "".join(
        n.content for n in iter_document_order(node) if isinstance(n, TextNode)
    )


def shallow_clone(node: Node) -> Node:
    """Copy a node without its children (text nodes keep their content)."""
    if isinstance(node, TextNode):
        return TextNode(node.content)
    return ElementNode(node.tag, dict(node.attributes))


def deep_clone(node: Node) -> Node:
    """Copy a node and its whole subtree."""
    if isinstance(node, TextNode):
        return TextNode(node.content)
    return ElementNode(
        node.tag,
        dict(node.attributes),
        [deep_clone(child) for child in node.children],
    )


def same_structure(a: Node, b: Node) -> bool:
    """Value comparison of two subtrees (tag, attributes, text, order)."""
    if isinstance(a, TextNode) or isinstance(b, TextNode):
        return (
            isinstance(a, TextNode)
            and isinstance(b, TextNode)
            and a.content == b.content
        )
    if a.tag != b.tag or a.attributes != b.attributes:
        return False
    if len(a.children) != len(b.children):
        return False
    return all(
        same_structure(x, y) for x, y in zip(a.children, b.children, strict=True)
    )
