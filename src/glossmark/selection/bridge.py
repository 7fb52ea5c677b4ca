"""Carry a selection across an asynchronous dialog.

Opening a dialog moves focus, and with it the browser-style selection. Before
the dialog opens, ``capture()`` records the selection's endpoints as
structural paths; when it closes, ``restore()`` rebuilds the selection from
those paths. Paths are used instead of node references because node
references may not survive whatever happens while the dialog is up.

The snapshot is single-use: one restore attempt consumes it, whether the
attempt succeeds or not, so a stale selection is never reapplied later.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from glossmark.config import get_settings
from glossmark.document.paths import decode_path, encode_position
from glossmark.document.ranges import Position, make_range, position_is_valid
from glossmark.document.tree import ElementNode
from glossmark.errors import InvalidRangeError
from glossmark.selection.state import Selection, SessionStore

logger = logging.getLogger(__name__)


class SelectionHost(Protocol):
    """What the bridge needs from the host document."""

    root: ElementNode
    selection: Selection
    session: SessionStore


class SelectionSnapshot(BaseModel):
    """Selection endpoints encoded as structural paths."""

    start_path: tuple[int, ...]
    start_offset: int = Field(ge=0)
    end_path: tuple[int, ...]
    end_offset: int = Field(ge=0)


class SelectionBridge:
    """Snapshot and restore the host's selection through its session store."""

    def __init__(self, host: SelectionHost, key: str | None = None) -> None:
        self.host = host
        self.key = key or get_settings().selection.snapshot_key

    def capture(self) -> SelectionSnapshot | None:
        """Store the current selection, replacing any earlier snapshot.

        No-op when there is no selection or an endpoint lies outside the
        document root.

        Returns:
            The stored snapshot, or None if nothing was stored.
        """
        root = self.host.root
        selection = self.host.selection
        if selection.anchor is None or selection.focus is None:
            logger.debug("capture: no active selection")
            return None
        if not (
            position_is_valid(root, selection.anchor)
            and position_is_valid(root, selection.focus)
        ):
            logger.debug("capture: selection is outside the document")
            return None

        rng = selection.get_range(root)
        assert rng is not None
        start_path = encode_position(root, rng.start.node)
        end_path = encode_position(root, rng.end.node)
        assert start_path is not None and end_path is not None

        snapshot = SelectionSnapshot(
            start_path=start_path,
            start_offset=rng.start.offset,
            end_path=end_path,
            end_offset=rng.end.offset,
        )
        self.host.session.set(self.key, snapshot.model_dump_json())
        logger.debug("Captured selection %s", snapshot)
        return snapshot

    def restore(self) -> bool:
        """Reinstall the stored selection and discard the snapshot.

        Returns:
            True if the selection was restored; False if there was no
            snapshot or it no longer resolves against the tree.
        """
        stored = self.host.session.get(self.key)
        if stored is None:
            return False
        try:
            return self._apply(SelectionSnapshot.model_validate_json(stored))
        except (ValidationError, InvalidRangeError) as exc:
            logger.warning("Could not restore selection: %s", exc)
            return False
        finally:
            self.host.session.remove(self.key)

    def _apply(self, snapshot: SelectionSnapshot) -> bool:
        root = self.host.root
        start_node = decode_path(root, snapshot.start_path)
        end_node = decode_path(root, snapshot.end_path)
        if start_node is None or end_node is None:
            logger.info("Selection snapshot no longer resolves; not restored")
            return False

        start = Position(start_node, snapshot.start_offset)
        end = Position(end_node, snapshot.end_offset)
        if not (position_is_valid(root, start) and position_is_valid(root, end)):
            logger.info("Selection snapshot offsets out of range; not restored")
            return False

        selection = self.host.selection
        selection.remove_all_ranges()
        selection.add_range(make_range(root, start, end))
        logger.debug("Restored selection from %s", snapshot)
        return True

    @property
    def has_snapshot(self) -> bool:
        return self.key in self.host.session
