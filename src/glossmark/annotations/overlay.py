"""Tooltip marker overlay: create, find, edit, list and remove markers.

Markers live inside the document tree itself, so the tree is the only state.
The marker listing is recomputed from a document-order walk on every call;
there is no index to fall out of date.

Wrapping moves fully selected nodes and splits partly selected ones;
unwrapping puts a marker's children back where the marker was. A marker
that gets split keeps its id on the half left in place; the copied half is
re-identified so ids stay unique.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol
from uuid import uuid4

from glossmark.annotations.markers import (
    ICON_ATTR,
    ID_ATTR,
    TEXT_ATTR,
    build_marker,
    is_marker,
    marker_icon,
    marker_id,
    marker_text,
)
from glossmark.config import get_settings
from glossmark.document.formatting import unwrap_element
from glossmark.document.ranges import (
    Position,
    Range,
    select_node_contents,
    surround_contents,
)
from glossmark.document.tree import ElementNode, find_parent, iter_elements
from glossmark.errors import (
    EmptyTooltipTextError,
    InvalidRangeError,
    MarkerNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from glossmark.selection.state import Selection

logger = logging.getLogger(__name__)


class OverlayHost(Protocol):
    """What the overlay needs from the host document."""

    root: ElementNode
    selection: Selection


@dataclass(frozen=True)
class MarkerEntry:
    """One row of the marker listing."""

    marker: ElementNode
    display_index: int
    label: str

    @property
    def marker_id(self) -> str | None:
        return marker_id(self.marker)

    @property
    def text(self) -> str:
        return marker_text(self.marker)

    @property
    def icon(self) -> str | None:
        return marker_icon(self.marker)


def _clean_text(text: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        msg = "tooltip text must not be empty"
        raise EmptyTooltipTextError(msg)
    return cleaned


class OverlayManager:
    """Manages tooltip markers in one host document.

    Attributes:
        host: Document container (root element plus live selection).
        css_class: Class name identifying marker spans.
    """

    def __init__(
        self,
        host: OverlayHost,
        *,
        css_class: str | None = None,
        default_icon: str | None = None,
        label_prefix: str | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        config = get_settings().marker
        self.host = host
        self.css_class = css_class or config.css_class
        self.default_icon = default_icon or config.default_icon
        self.label_prefix = label_prefix or config.label_prefix
        self._new_id = id_factory or (lambda: str(uuid4()))

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def wrap(self, rng: Range, text: str, icon: str = "") -> ElementNode:
        """Wrap a range in a new tooltip marker.

        On success the live selection spans the marker's contents.

        Args:
            rng: Range to annotate.
            text: Tooltip text; trimmed, must not be blank.
            icon: Optional icon; omitted from the marker when blank.

        Returns:
            The inserted marker element.

        Raises:
            EmptyTooltipTextError: If ``text`` is blank.
            InvalidRangeError: If the range is collapsed or outside the root.
        """
        cleaned = _clean_text(text)
        marker = build_marker(
            self._new_id(), cleaned, (icon or "").strip(), self.css_class
        )
        root = self.host.root
        surround_contents(root, rng, marker)
        self.renew_copied_ids(marker)

        selection = self.host.selection
        selection.remove_all_ranges()
        selection.add_range(select_node_contents(marker))

        logger.info(
            "Tooltip %s added around %d node(s)",
            marker.get(ID_ATTR),
            len(marker.children),
        )
        return marker

    def wrap_selection(self, text: str, icon: str = "") -> ElementNode:
        """Wrap the host's live selection in a new tooltip marker.

        Raises:
            InvalidRangeError: If nothing is selected, plus everything
                ``wrap`` raises.
        """
        rng = self.host.selection.get_range(self.host.root)
        if rng is None:
            msg = "select some text first"
            raise InvalidRangeError(msg)
        return self.wrap(rng, text, icon)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def markers(self) -> list[ElementNode]:
        return [
            element
            for element in iter_elements(self.host.root)
            if is_marker(element, self.css_class)
        ]

    def find(self, target_id: str) -> ElementNode | None:
        """First marker in document order with the given id."""
        for marker in self.markers():
            if marker.get(ID_ATTR) == target_id:
                return marker
        return None

    def list_markers(self) -> list[MarkerEntry]:
        """All markers in document order, numbered from 1."""
        entries = []
        for index, marker in enumerate(self.markers(), start=1):
            icon = marker_icon(marker) or self.default_icon
            entries.append(
                MarkerEntry(
                    marker=marker,
                    display_index=index,
                    label=f"{icon} {self.label_prefix} {index}",
                )
            )
        return entries

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def edit(self, target_id: str, text: str, icon: str = "") -> ElementNode:
        """Change a marker's tooltip text and icon in place.

        A blank ``icon`` clears any existing icon.

        Raises:
            EmptyTooltipTextError: If ``text`` is blank (checked first).
            MarkerNotFoundError: If no marker has ``target_id``.
        """
        cleaned = _clean_text(text)
        marker = self.find(target_id)
        if marker is None:
            raise MarkerNotFoundError(target_id)

        marker.attributes[TEXT_ATTR] = cleaned
        icon = (icon or "").strip()
        if icon:
            marker.attributes[ICON_ATTR] = icon
        else:
            marker.attributes.pop(ICON_ATTR, None)

        logger.info("Tooltip %s updated", target_id)
        return marker

    def ensure_ids(self) -> int:
        """Give an identifier to every marker that lacks one.

        Markers pasted or loaded from older HTML may have no id. Existing ids
        are never changed.

        Returns:
            Number of ids assigned.
        """
        assigned = 0
        for marker in self.markers():
            if not marker.get(ID_ATTR):
                marker.attributes[ID_ATTR] = self._new_id()
                assigned += 1
        if assigned:
            logger.debug("Assigned ids to %d tooltip marker(s)", assigned)
        return assigned

    def renew_copied_ids(self, container: ElementNode) -> int:
        """Re-id markers under ``container`` whose id is also used outside it.

        Wrapping a range that only partly covers a marker splits that marker,
        and the half moved into the new wrapper carries the same id. That
        half gets a fresh id; the half left in place keeps the original.

        Returns:
            Number of ids replaced.
        """
        inside = [
            element
            for element in iter_elements(container)
            if element is not container and is_marker(element, self.css_class)
        ]
        if not inside:
            return 0
        inside_ids = {id(element) for element in inside}
        outside = {
            marker.get(ID_ATTR)
            for marker in self.markers()
            if id(marker) not in inside_ids
        }

        renewed = 0
        for element in inside:
            old_id = element.get(ID_ATTR)
            if old_id and old_id in outside:
                element.attributes[ID_ATTR] = self._new_id()
                renewed += 1
                logger.debug(
                    "Split tooltip %s: copy renamed to %s",
                    old_id,
                    element.get(ID_ATTR),
                )
        return renewed

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def unwrap(self, marker: ElementNode) -> None:
        """Remove a marker, splicing its children into its place.

        Selection endpoints inside the marker are moved to the matching
        points in the parent so they stay attached; endpoints in the parent
        after the marker shift by the number of spliced children, less one.

        Raises:
            MarkerNotFoundError: If ``marker`` is not in the document.
        """
        parent = find_parent(self.host.root, marker)
        if parent is None:
            raise MarkerNotFoundError(marker.get(ID_ATTR) or "")

        moved = len(marker.children)
        index = unwrap_element(parent, marker)
        self._reanchor_selection(marker, parent, index, moved)
        logger.info("Tooltip %s removed", marker.get(ID_ATTR))

    def remove(self, target_id: str) -> None:
        """Unwrap the marker with ``target_id``.

        Raises:
            MarkerNotFoundError: If no marker has ``target_id``.
        """
        marker = self.find(target_id)
        if marker is None:
            raise MarkerNotFoundError(target_id)
        self.unwrap(marker)

    def _reanchor_selection(
        self, marker: ElementNode, parent: ElementNode, index: int, moved: int
    ) -> None:
        selection = self.host.selection
        for name in ("anchor", "focus"):
            position: Position | None = getattr(selection, name)
            if position is None:
                continue
            if position.node is marker:
                setattr(selection, name, Position(parent, index + position.offset))
            elif position.node is parent and position.offset > index:
                # One marker became `moved` children.
                shifted = position.offset + moved - 1
                setattr(selection, name, Position(parent, shifted))
