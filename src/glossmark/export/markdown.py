"""Render the document tree as Markdown.

A pure, recursive transform: every element renders its children first and
then wraps the result according to its kind. Only the tag vocabulary the
editor produces is recognised; anything else passes its children through.

Text is not escaped, so literal ``*`` or ``_`` in the document reach the
Markdown unchanged.
"""

# Pattern: Functional Core (no state, identical trees give identical text)

from __future__ import annotations

import re
from enum import Enum, auto

from glossmark.annotations.markers import MARKER_CLASS, TEXT_ATTR, is_marker
from glossmark.document.tree import ElementNode, Node, TextNode

_WHITESPACE_RUN = re.compile(r"\s+")
_BLANK_LINE = re.compile(r"^\s*[\r\n]", re.MULTILINE)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


class ElementKind(Enum):
    """Closed set of element kinds the renderer distinguishes."""

    HEADING = auto()
    BOLD = auto()
    ITALIC = auto()
    UNDERLINE = auto()
    STRIKE = auto()
    BLOCKQUOTE = auto()
    PARAGRAPH = auto()
    LINE_BREAK = auto()
    UNORDERED_LIST = auto()
    ORDERED_LIST = auto()
    LIST_ITEM = auto()
    LINK = auto()
    MARKER = auto()
    UNKNOWN = auto()


_TAG_KINDS: dict[str, ElementKind] = {
    "h1": ElementKind.HEADING,
    "h2": ElementKind.HEADING,
    "h3": ElementKind.HEADING,
    "h4": ElementKind.HEADING,
    "strong": ElementKind.BOLD,
    "b": ElementKind.BOLD,
    "em": ElementKind.ITALIC,
    "i": ElementKind.ITALIC,
    "u": ElementKind.UNDERLINE,
    "s": ElementKind.STRIKE,
    "strike": ElementKind.STRIKE,
    "del": ElementKind.STRIKE,
    "blockquote": ElementKind.BLOCKQUOTE,
    "p": ElementKind.PARAGRAPH,
    "br": ElementKind.LINE_BREAK,
    "ul": ElementKind.UNORDERED_LIST,
    "ol": ElementKind.ORDERED_LIST,
    "li": ElementKind.LIST_ITEM,
    "a": ElementKind.LINK,
}

_INLINE_WRAPPERS: dict[ElementKind, tuple[str, str]] = {
    ElementKind.BOLD: ("**", "**"),
    ElementKind.ITALIC: ("_", "_"),
    ElementKind.UNDERLINE: ("<u>", "</u>"),
    ElementKind.STRIKE: ("~~", "~~"),
}


def classify(element: ElementNode, marker_class: str = MARKER_CLASS) -> ElementKind:
    """Map an element to its kind; unrecognised tags are ``UNKNOWN``."""
    if is_marker(element, marker_class):
        return ElementKind.MARKER
    return _TAG_KINDS.get(element.tag, ElementKind.UNKNOWN)


def render(root: Node, *, marker_class: str = MARKER_CLASS) -> str:
    """Render a document to Markdown.

    Collapses runs of three or more newlines to a blank line and trims the
    result.

    Args:
        root: Document root (usually the editor's container element).
        marker_class: Class name identifying tooltip markers.

    Returns:
        Markdown text.
    """
    markdown = render_node(root, marker_class=marker_class)
    return _EXCESS_NEWLINES.sub("\n\n", markdown).strip()


def render_node(node: Node, *, marker_class: str = MARKER_CLASS) -> str:
    """Render one node without the final newline cleanup."""
    if isinstance(node, TextNode):
        return _WHITESPACE_RUN.sub(" ", node.content)

    content = _render_children(node, marker_class)
    kind = classify(node, marker_class)

    match kind:
        case ElementKind.HEADING:
            level = int(node.tag[1])
            return f"{'#' * level} {content.strip()}\n\n"
        case (
            ElementKind.BOLD
            | ElementKind.ITALIC
            | ElementKind.UNDERLINE
            | ElementKind.STRIKE
        ):
            opening, closing = _INLINE_WRAPPERS[kind]
            return f"{opening}{content.strip()}{closing}"
        case ElementKind.BLOCKQUOTE:
            lines = [
                f"> {line.strip()}" if line.strip() else ">"
                for line in content.split("\n")
            ]
            return "\n".join(lines) + "\n\n"
        case ElementKind.PARAGRAPH:
            return f"{content.strip()}\n\n"
        case ElementKind.LINE_BREAK:
            return "  \n"
        case ElementKind.UNORDERED_LIST:
            return _BLANK_LINE.sub("", content) + "\n"
        case ElementKind.ORDERED_LIST:
            return _render_ordered_list(node, marker_class)
        case ElementKind.LIST_ITEM:
            return f"- {content.strip()}\n"
        case ElementKind.LINK:
            return f"[{content.strip()}]({node.get('href', '')})"
        case ElementKind.MARKER:
            tooltip = node.get(TEXT_ATTR) or ""
            if not tooltip:
                return content
            return f"{content.strip()}^{{{tooltip}}}"
        case ElementKind.UNKNOWN:
            return content


def _render_children(element: ElementNode, marker_class: str) -> str:
    return "".join(
        render_node(child, marker_class=marker_class) for child in element.children
    )


def _render_ordered_list(element: ElementNode, marker_class: str) -> str:
    """Number each element child from 1.

    List items contribute their content rather than their own ``- `` bullet,
    so numbering replaces the bullet instead of stacking on it.
    """
    items = []
    for number, child in enumerate(element.element_children(), start=1):
        if child.tag == "li":
            body = _render_children(child, marker_class)
        else:
            body = render_node(child, marker_class=marker_class)
        items.append(f"{number}. {body.strip()}")
    return "\n".join(items) + "\n\n"
