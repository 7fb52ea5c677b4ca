"""Turn a selected range into a hyperlink."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from glossmark.config import get_settings
from glossmark.document.ranges import Range, select_node_contents, surround_contents
from glossmark.document.tree import ElementNode
from glossmark.errors import EmptyLinkUrlError

if TYPE_CHECKING:
    from glossmark.annotations.overlay import OverlayManager
    from glossmark.selection.state import Selection

logger = logging.getLogger(__name__)


class LinkHost(Protocol):
    """Document container plus the overlay that owns its marker ids."""

    root: ElementNode
    selection: Selection
    overlay: OverlayManager


def create_link(
    host: LinkHost,
    rng: Range,
    url: str,
    *,
    open_in_new_tab: bool | None = None,
    rel: str | None = None,
) -> ElementNode:
    """Wrap ``rng`` in an ``<a>`` element pointing at ``url``.

    Args:
        host: Document container whose root holds the range.
        rng: Range to link; must be non-collapsed and inside the root.
        url: Link target, trimmed.
        open_in_new_tab: Add ``target="_blank"``. Defaults from settings.
        rel: ``rel`` attribute. Defaults from settings.

    Returns:
        The inserted ``<a>`` element; the live selection spans its contents.

    Raises:
        EmptyLinkUrlError: If ``url`` is blank.
        InvalidRangeError: If the range is collapsed or outside the root.
    """
    config = get_settings().link
    href = (url or "").strip()
    if not href:
        msg = "link URL must not be empty"
        raise EmptyLinkUrlError(msg)
    if open_in_new_tab is None:
        open_in_new_tab = config.open_in_new_tab

    attributes = {"href": href, "rel": rel if rel is not None else config.rel}
    if open_in_new_tab:
        attributes["target"] = "_blank"
    anchor = ElementNode("a", attributes)

    surround_contents(host.root, rng, anchor)
    # Markers split by the link keep their id on the half left outside.
    host.overlay.renew_copied_ids(anchor)

    host.selection.remove_all_ranges()
    host.selection.add_range(select_node_contents(anchor))
    logger.info("Link added: %s", href)
    return anchor
