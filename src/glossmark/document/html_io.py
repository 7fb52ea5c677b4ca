"""HTML in and out of the document tree.

HTML is the tree's native serialization: the editor stores and reloads its
content as HTML, and the annotation markers are ordinary ``<span>`` elements
with ``data-*`` attributes. Parsing goes through selectolax's lexbor backend;
serialization is a direct walk of the tree.
"""

# Pattern: Functional Core (pure functions between HTML strings and trees)

from __future__ import annotations

import html as html_module
import logging
from typing import Any

from selectolax.lexbor import LexborHTMLParser

from glossmark.document.tree import ElementNode, Node, TextNode

logger = logging.getLogger(__name__)

# Root element that stands in for the editor container.
ROOT_TAG = "div"

# Tags dropped on load along with their content.
_STRIP_TAGS = frozenset(("script", "style", "noscript", "template"))

# Elements serialised without a closing tag.
_VOID_TAGS = frozenset(("br", "hr", "img", "input", "wbr", "col", "area"))


def parse_html(html: str) -> ElementNode:
    """Parse an HTML fragment into a fresh document root.

    The body's children become the root's children. Comments and
    script-like elements are skipped.

    Args:
        html: Editor HTML (an ``innerHTML``-style fragment or full document).

    Returns:
        A ``<div>`` root element owning the parsed content.
    """
    root = ElementNode(ROOT_TAG)
    if not html:
        return root

    tree = LexborHTMLParser(html)
    body = tree.body
    source = body if body is not None else tree.root
    if source is None:
        return root

    child = source.child
    while child is not None:
        converted = _convert(child)
        if converted is not None:
            root.children.append(converted)
        child = child.next

    logger.debug("Parsed HTML into %d top-level node(s)", len(root.children))
    return root


def _convert(node: Any) -> Node | None:
    """Convert one selectolax node (and its subtree) to a tree node."""
    tag = node.tag

    # Text node: selectolax uses "-text" as the tag
    if tag == "-text":
        return TextNode(node.text_content or "")

    # Comments, doctype and other non-element nodes
    if not tag or tag.startswith(("-", "_", "!")):
        return None

    if tag in _STRIP_TAGS:
        return None

    attributes = {
        name: ("" if value is None else value)
        for name, value in node.attributes.items()
    }
    element = ElementNode(tag, attributes)

    child = node.child
    while child is not None:
        converted = _convert(child)
        if converted is not None:
            element.children.append(converted)
        child = child.next
    return element


def outer_html(node: Node) -> str:
    """Serialise a node including its own tag."""
    if isinstance(node, TextNode):
        return html_module.escape(node.content, quote=False)

    attrs = "".join(
        f' {name}="{html_module.escape(value, quote=True)}"'
        for name, value in node.attributes.items()
    )
    if node.tag in _VOID_TAGS:
        return f"<{node.tag}{attrs}>"
    return f"<{node.tag}{attrs}>{inner_html(node)}</{node.tag}>"


def inner_html(element: ElementNode) -> str:
    """Serialise an element's children (the ``innerHTML`` equivalent)."""
    return "".join(outer_html(child) for child in element.children)
