"""Positions and ranges over the document tree.

Implements the parts of DOM Range behaviour the editor relies on:
boundary-point ordering, ``extractContents`` and ``insertNode``. All of it
works on the parentless tree by resolving paths down from the root.

Ordering uses ``path + (offset,)`` keys compared lexicographically. That
matches DOM boundary-point order: when one container is an ancestor of the
other, the shorter key sorts first on a tie, which is exactly "the gap before
child N comes before anything inside child N".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from glossmark.document.paths import (
    StructuralPath,
    common_prefix,
    decode_path,
    encode_position,
)
from glossmark.document.tree import (
    ElementNode,
    Node,
    TextNode,
    find_parent,
    node_length,
    shallow_clone,
)
from glossmark.errors import InvalidRangeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """A boundary point: a node plus an offset into it.

    ``offset`` is a character offset for text nodes and a child index for
    elements. Only meaningful while ``node`` is attached to the tree.
    """

    node: Node
    offset: int


@dataclass(frozen=True)
class Range:
    """A pair of boundary points, ``start`` at or before ``end``."""

    start: Position
    end: Position

    @property
    def collapsed(self) -> bool:
        return self.start == self.end


def boundary_key(root: ElementNode, position: Position) -> tuple[int, ...] | None:
    """Sort key for a boundary point, or None if its node is detached."""
    path = encode_position(root, position.node)
    if path is None:
        return None
    return (*path, position.offset)


def compare_positions(root: ElementNode, a: Position, b: Position) -> int:
    """Return -1, 0 or 1 as ``a`` is before, equal to, or after ``b``.

    Raises:
        InvalidRangeError: If either position is detached.
    """
    key_a = boundary_key(root, a)
    key_b = boundary_key(root, b)
    if key_a is None or key_b is None:
        msg = "position is not inside the document"
        raise InvalidRangeError(msg)
    return (key_a > key_b) - (key_a < key_b)


def make_range(root: ElementNode, a: Position, b: Position) -> Range:
    """Build a range from two positions given in either order."""
    if compare_positions(root, a, b) <= 0:
        return Range(a, b)
    return Range(b, a)


def position_is_valid(root: ElementNode, position: Position) -> bool:
    """True if the node is attached and the offset is within bounds."""
    if encode_position(root, position.node) is None:
        return False
    return 0 <= position.offset <= node_length(position.node)


def range_in_root(root: ElementNode, rng: Range) -> bool:
    """True if both endpoints are valid positions inside ``root``."""
    return position_is_valid(root, rng.start) and position_is_valid(root, rng.end)


def select_node_contents(element: ElementNode) -> Range:
    """Range spanning all children of ``element``."""
    return Range(Position(element, 0), Position(element, len(element.children)))


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_contents(root: ElementNode, rng: Range) -> tuple[list[Node], Position]:
    """Detach the range's contents from the tree.

    Partially selected ancestors are split: the selected part moves into a
    shallow clone of the ancestor, the unselected part stays in place. Fully
    selected children move as-is, so their identity is kept.

    Args:
        root: Document root.
        rng: Range to extract; must be inside ``root``.

    Returns:
        ``(fragment, collapsed_at)``: the detached nodes in document order,
        and the position the range collapses to afterwards (where the
        fragment used to start).

    Raises:
        InvalidRangeError: If the range is not inside ``root``.
    """
    if not range_in_root(root, rng):
        msg = "range is not inside the document"
        raise InvalidRangeError(msg)
    if rng.collapsed:
        return [], rng.start

    start_path = encode_position(root, rng.start.node)
    end_path = encode_position(root, rng.end.node)
    assert start_path is not None and end_path is not None  # range_in_root

    return _extract(
        root,
        rng.start.node,
        rng.start.offset,
        start_path,
        rng.end.node,
        rng.end.offset,
        end_path,
    )


def _extract(
    sub_root: ElementNode,
    start_node: Node,
    start_offset: int,
    start_path: StructuralPath,
    end_node: Node,
    end_offset: int,
    end_path: StructuralPath,
) -> tuple[list[Node], Position]:
    """Extract between two boundary points addressed relative to ``sub_root``."""
    if start_node is end_node and isinstance(start_node, TextNode):
        piece = start_node.content[start_offset:end_offset]
        start_node.content = (
            start_node.content[:start_offset] + start_node.content[end_offset:]
        )
        fragment: list[Node] = [TextNode(piece)] if piece else []
        return fragment, Position(start_node, start_offset)

    shared = common_prefix(start_path, end_path)
    common = decode_path(sub_root, shared)
    assert isinstance(common, ElementNode)

    start_rest = start_path[len(shared) :]
    end_rest = end_path[len(shared) :]

    # Children of the common ancestor that hold one endpoint but not the other.
    first_partial = common.children[start_rest[0]] if start_rest else None
    last_partial = common.children[end_rest[0]] if end_rest else None
    lo = start_rest[0] + 1 if start_rest else start_offset
    hi = end_rest[0] if end_rest else end_offset

    fragment = []

    if first_partial is not None:
        if isinstance(first_partial, TextNode):
            piece = first_partial.content[start_offset:]
            first_partial.content = first_partial.content[:start_offset]
            if piece:
                fragment.append(TextNode(piece))
        else:
            clone = shallow_clone(first_partial)
            assert isinstance(clone, ElementNode)
            clone.children, _ = _extract(
                first_partial,
                start_node,
                start_offset,
                start_rest[1:],
                first_partial,
                len(first_partial.children),
                (),
            )
            fragment.append(clone)

    fragment.extend(common.children[lo:hi])
    del common.children[lo:hi]

    if last_partial is not None:
        if isinstance(last_partial, TextNode):
            piece = last_partial.content[:end_offset]
            last_partial.content = last_partial.content[end_offset:]
            if piece:
                fragment.append(TextNode(piece))
        else:
            clone = shallow_clone(last_partial)
            assert isinstance(clone, ElementNode)
            clone.children, _ = _extract(
                last_partial,
                last_partial,
                0,
                (),
                end_node,
                end_offset,
                end_rest[1:],
            )
            fragment.append(clone)

    if first_partial is None:
        collapsed_at = Position(start_node, start_offset)
    else:
        collapsed_at = Position(common, common.index_of(first_partial) + 1)
    return fragment, collapsed_at


# ---------------------------------------------------------------------------
# Insertion
# ---------------------------------------------------------------------------


def insert_node(root: ElementNode, position: Position, node: Node) -> ElementNode:
    """Insert ``node`` at a boundary point, splitting a text node if needed.

    Unlike the DOM, inserting at either edge of a text node does not leave an
    empty text node behind.

    Returns:
        The element that now contains ``node``.

    Raises:
        InvalidRangeError: If ``position`` is not inside ``root``.
    """
    if not position_is_valid(root, position):
        msg = "insertion point is not inside the document"
        raise InvalidRangeError(msg)

    container = position.node
    if isinstance(container, ElementNode):
        container.children.insert(position.offset, node)
        return container

    parent = find_parent(root, container)
    if parent is None:
        # The root is always an element, so a valid text position has a parent.
        msg = "text node has no parent"
        raise InvalidRangeError(msg)

    index = parent.index_of(container)
    offset = position.offset
    if offset == 0:
        parent.children.insert(index, node)
    elif offset >= len(container.content):
        parent.children.insert(index + 1, node)
    else:
        tail = TextNode(container.content[offset:])
        container.content = container.content[:offset]
        parent.children[index + 1 : index + 1] = [node, tail]
    return parent


def surround_contents(root: ElementNode, rng: Range, wrapper: ElementNode) -> None:
    """Move the range's contents into ``wrapper`` and put it where they were.

    Everything is validated before the tree is touched, so a rejected range
    leaves the document unchanged.

    Raises:
        InvalidRangeError: If the range is collapsed, reversed, or not inside
            ``root``.
    """
    if not range_in_root(root, rng):
        msg = "selection must be inside the document"
        raise InvalidRangeError(msg)
    if rng.collapsed:
        msg = "selection is empty"
        raise InvalidRangeError(msg)
    if compare_positions(root, rng.start, rng.end) > 0:
        msg = "selection start is after its end"
        raise InvalidRangeError(msg)

    fragment, collapsed_at = extract_contents(root, rng)
    wrapper.children = fragment
    parent = insert_node(root, collapsed_at, wrapper)
    drop_empty_text(parent)


def drop_empty_text(element: ElementNode) -> int:
    """Remove empty text nodes among ``element``'s direct children.

    Returns:
        Number of nodes removed.
    """
    before = len(element.children)
    element.children[:] = [
        child
        for child in element.children
        if not (isinstance(child, TextNode) and child.content == "")
    ]
    removed = before - len(element.children)
    if removed:
        logger.debug("Dropped %d empty text node(s) from <%s>", removed, element.tag)
    return removed
