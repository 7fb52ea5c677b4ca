"""Tooltip marker format.

A marker is an inline ``<span>`` carrying the tooltip in ``data-*``
attributes, so the HTML the editor saves needs no side table:

    <span class="tooltip-anchor" data-tooltip-id="…" data-tooltip="…"
          data-icon="ℹ️" tabindex="0">annotated text</span>

Used by annotations/overlay.py (create/edit/list) and export/markdown.py
(the ``^{…}`` suffix).
"""

from __future__ import annotations

from glossmark.document.tree import ElementNode, Node

MARKER_TAG = "span"
MARKER_CLASS = "tooltip-anchor"
ID_ATTR = "data-tooltip-id"
TEXT_ATTR = "data-tooltip"
ICON_ATTR = "data-icon"


def is_marker(node: Node, css_class: str = MARKER_CLASS) -> bool:
    """True if ``node`` is a tooltip marker element."""
    return (
        isinstance(node, ElementNode)
        and node.tag == MARKER_TAG
        and node.has_class(css_class)
    )


def build_marker(
    marker_id: str, text: str, icon: str = "", css_class: str = MARKER_CLASS
) -> ElementNode:
    """Create an empty marker element; ``icon`` is omitted when blank."""
    attributes = {
        "class": css_class,
        ID_ATTR: marker_id,
        TEXT_ATTR: text,
        "tabindex": "0",
    }
    if icon:
        attributes[ICON_ATTR] = icon
    return ElementNode(MARKER_TAG, attributes)


def marker_id(marker: ElementNode) -> str | None:
    return marker.get(ID_ATTR) or None


def marker_text(marker: ElementNode) -> str:
    return marker.get(TEXT_ATTR) or ""


def marker_icon(marker: ElementNode) -> str | None:
    return marker.get(ICON_ATTR) or None
