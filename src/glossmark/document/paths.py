"""Structural paths: node addresses that survive node-reference invalidation.

A path is the sequence of child indices walked from the document root down
to a node. The empty path addresses the root itself.

Paths are only as stable as the tree: inserting or removing siblings along
the path between encode and decode makes the path resolve to a different
node, or to nothing. That drift is not detected here; callers keep the tree
still between capture and restore.
"""

from __future__ import annotations

import logging
from typing import TypeAlias

from glossmark.document.tree import ElementNode, Node, TextNode
from glossmark.errors import PathNotFoundError

logger = logging.getLogger(__name__)

StructuralPath: TypeAlias = tuple[int, ...]


def encode_position(root: ElementNode, node: Node) -> StructuralPath | None:
    """Encode ``node`` as a path of child indices from ``root``.

    The walk descends from the root rather than climbing parent links, since
    nodes carry no parent reference.

    Args:
        root: Document root.
        node: Node to locate.

    Returns:
        Path tuple (``()`` for the root), or None if ``node`` is detached.
    """
    if node is root:
        return ()

    # Iterative DFS carrying the index path alongside each element.
    stack: list[tuple[ElementNode, StructuralPath]] = [(root, ())]
    while stack:
        element, prefix = stack.pop()
        for index, child in enumerate(element.children):
            path = (*prefix, index)
            if child is node:
                return path
            if isinstance(child, ElementNode):
                stack.append((child, path))

    logger.debug("encode_position: node %r is not attached to root", node)
    return None


def decode_path(root: ElementNode, path: StructuralPath) -> Node | None:
    """Resolve a path against ``root``.

    Pure: never mutates the tree.

    Returns:
        The addressed node, or None if an index is out of bounds at any depth
        (including an attempt to index into a text node).
    """
    current: Node = root
    for index in path:
        if isinstance(current, TextNode):
            return None
        if index < 0 or index >= len(current.children):
            return None
        current = current.children[index]
    return current


def resolve_path(root: ElementNode, path: StructuralPath) -> Node:
    """Resolve a path, raising if it no longer addresses a node.

    Raises:
        PathNotFoundError: If ``decode_path`` finds nothing.
    """
    node = decode_path(root, path)
    if node is None:
        raise PathNotFoundError(tuple(path))
    return node


def common_prefix(a: StructuralPath, b: StructuralPath) -> StructuralPath:
    """Longest shared leading run of two paths (their deepest common ancestor)."""
    length = 0
    for x, y in zip(a, b, strict=False):
        if x != y:
            break
        length += 1
    return a[:length]
