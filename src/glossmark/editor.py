"""The host document container.

``Editor`` owns one document: its root element, the live selection, the
session store the selection snapshot is parked in, and the managers that act
on them. Several editors can coexist; none of this state is global.
"""

from __future__ import annotations

import logging

from glossmark.annotations.overlay import OverlayManager
from glossmark.config import get_settings
from glossmark.document.formatting import clear_formatting
from glossmark.document.html_io import ROOT_TAG, inner_html, parse_html
from glossmark.document.ranges import Position
from glossmark.document.tree import ElementNode, text_content
from glossmark.export.markdown import render
from glossmark.selection.bridge import SelectionBridge
from glossmark.selection.state import Selection, SessionStore

logger = logging.getLogger(__name__)


class Editor:
    """An editable, annotatable document.

    Attributes:
        root: Root element; its children are the document content.
        selection: The user's current selection.
        session: Session-scoped store (holds the selection snapshot).
        bridge: Selection capture/restore.
        overlay: Tooltip marker manager.
    """

    def __init__(self, html: str = "") -> None:
        self.root: ElementNode = parse_html(html)
        self.selection = Selection()
        self.session = SessionStore()
        self.bridge = SelectionBridge(self)
        self.overlay = OverlayManager(self)
        self.overlay.ensure_ids()

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def load_html(self, html: str) -> None:
        """Replace the document with parsed ``html``.

        The selection and any parked selection snapshot are dropped since
        their nodes are gone.
        """
        self.root = parse_html(html)
        self.selection.remove_all_ranges()
        self.session.remove(self.bridge.key)
        assigned = self.overlay.ensure_ids()
        logger.info(
            "Loaded document (%d top-level nodes, %d marker ids assigned)",
            len(self.root.children),
            assigned,
        )

    def to_html(self) -> str:
        """Serialise the document content (the container's inner HTML)."""
        return inner_html(self.root)

    def export_markdown(self) -> str:
        return render(self.root, marker_class=self.overlay.css_class)

    @property
    def is_empty(self) -> bool:
        """True when the document has no visible text."""
        return not text_content(self.root).strip()

    def clear(self) -> None:
        """Reset to a single empty paragraph."""
        self.root = ElementNode(ROOT_TAG, children=[ElementNode("p")])
        self.session.remove(self.bridge.key)
        self.selection.collapse(Position(self.root.children[0], 0))
        logger.info("Document cleared")

    def clear_formatting(self) -> int:
        """Unwrap ``<font>`` and styled ``<span>`` wrappers.

        Tooltip markers carry no ``style`` and are left alone.
        """
        return clear_formatting(self.root)

    # ------------------------------------------------------------------
    # Selection helpers
    # ------------------------------------------------------------------

    def select(
        self, anchor: Position, focus: Position | None = None
    ) -> None:
        """Set the live selection (a caret if ``focus`` is omitted)."""
        if focus is None:
            self.selection.collapse(anchor)
        else:
            self.selection.set_base_and_extent(anchor, focus)
