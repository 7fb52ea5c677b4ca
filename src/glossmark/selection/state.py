"""Live selection and the session store that outlives it.

``Selection`` mirrors the browser's selection object: one range at most,
recorded as anchor (where the drag started) and focus (where it ended).
``SessionStore`` is the short-lived key/value store the snapshot is parked
in while a dialog is open.
"""

from __future__ import annotations

import logging

from glossmark.document.ranges import Position, Range, make_range
from glossmark.document.tree import ElementNode

logger = logging.getLogger(__name__)


class Selection:
    """The user's current selection within one document."""

    def __init__(self) -> None:
        self.anchor: Position | None = None
        self.focus: Position | None = None

    @property
    def range_count(self) -> int:
        return 0 if self.anchor is None or self.focus is None else 1

    @property
    def is_collapsed(self) -> bool:
        return self.range_count == 0 or self.anchor == self.focus

    def set_base_and_extent(self, anchor: Position, focus: Position) -> None:
        """Select from ``anchor`` to ``focus`` (focus may precede anchor)."""
        self.anchor = anchor
        self.focus = focus

    def collapse(self, position: Position) -> None:
        """Place a caret at ``position``."""
        self.anchor = position
        self.focus = position

    def add_range(self, rng: Range) -> None:
        self.anchor = rng.start
        self.focus = rng.end

    def remove_all_ranges(self) -> None:
        self.anchor = None
        self.focus = None

    def get_range(self, root: ElementNode) -> Range | None:
        """Current range in document order, or None when nothing is selected.

        Raises:
            InvalidRangeError: If an endpoint is no longer in ``root``.
        """
        if self.anchor is None or self.focus is None:
            return None
        return make_range(root, self.anchor, self.focus)


class SessionStore:
    """String key/value store scoped to one editing session."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
