"""Clear-formatting cleanup.

Rich-text editing leaves presentational wrappers behind (``<font>`` from
colour commands, ``<span style>`` from highlight colours). Clearing
formatting unwraps them in place and keeps their content.
"""

from __future__ import annotations

import logging

from glossmark.document.tree import ElementNode, iter_elements

logger = logging.getLogger(__name__)


def is_presentational(element: ElementNode) -> bool:
    """True for ``<font>`` and for ``<span>`` elements carrying a style."""
    if element.tag == "font":
        return True
    return element.tag == "span" and "style" in element.attributes


def unwrap_element(parent: ElementNode, element: ElementNode) -> int:
    """Replace ``element`` in ``parent`` with its children, in order.

    Returns:
        The index in ``parent`` where the first former child now sits.

    Raises:
        ValueError: If ``element`` is not a direct child of ``parent``.
    """
    index = parent.index_of(element)
    parent.children[index : index + 1] = element.children
    element.children = []
    return index


def clear_formatting(root: ElementNode) -> int:
    """Unwrap every presentational wrapper under ``root``.

    Returns:
        Number of elements unwrapped.
    """
    removed = 0
    # Collect (parent, child) pairs first; unwrapping reshapes the lists.
    pairs = [
        (parent, child)
        for parent in iter_elements(root)
        for child in parent.element_children()
        if is_presentational(child)
    ]
    # Innermost first so a parent is never unwrapped before its nested wrapper.
    for parent, child in reversed(pairs):
        unwrap_element(parent, child)
        removed += 1

    if removed:
        logger.info("Cleared formatting: unwrapped %d element(s)", removed)
    return removed
