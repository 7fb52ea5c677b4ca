"""Shared pytest fixtures and tree helpers for glossmark tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count

import pytest

from glossmark.annotations.overlay import OverlayManager
from glossmark.config import get_settings
from glossmark.document.tree import ElementNode, Node, TextNode, iter_document_order
from glossmark.editor import Editor


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Drop the cached Settings so env changes in one test don't leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Tree lookup helpers
# =============================================================================


def find_text(root: Node, content: str) -> TextNode:
    """First text node (document order) whose content is exactly ``content``."""
    for node in iter_document_order(root):
        if isinstance(node, TextNode) and node.content == content:
            return node
    msg = f"no text node {content!r}"
    raise AssertionError(msg)


def find_tag(root: Node, tag: str, nth: int = 0) -> ElementNode:
    """The ``nth`` element (document order) with the given tag."""
    matches = [
        node
        for node in iter_document_order(root)
        if isinstance(node, ElementNode) and node.tag == tag
    ]
    if len(matches) <= nth:
        msg = f"no <{tag}> number {nth}"
        raise AssertionError(msg)
    return matches[nth]


# =============================================================================
# Editor fixtures
# =============================================================================


def sequential_ids(prefix: str = "tip") -> Callable[[], str]:
    """Deterministic marker id factory: tip-1, tip-2, ..."""
    counter = count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def make_editor() -> Callable[[str], Editor]:
    """Build an Editor whose overlay hands out predictable marker ids."""

    def _make(html: str) -> Editor:
        editor = Editor(html)
        editor.overlay = OverlayManager(editor, id_factory=sequential_ids())
        return editor

    return _make
