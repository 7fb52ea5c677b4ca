"""Tests for selection capture and restore across a dialog."""

from __future__ import annotations

import json
from collections.abc import Callable

from glossmark.document.ranges import Position
from glossmark.document.tree import ElementNode, TextNode
from glossmark.editor import Editor
from glossmark.selection.bridge import SelectionBridge, SelectionSnapshot
from glossmark.selection.state import Selection, SessionStore
from tests.conftest import find_tag, find_text

SNAPSHOT_KEY = "tooltip-selection"


class TestSelectionState:
    """Selection and SessionStore basics."""

    def test_empty_selection(self) -> None:
        selection = Selection()
        assert selection.range_count == 0
        assert selection.is_collapsed

    def test_caret_is_collapsed(self) -> None:
        t = TextNode("abc")
        selection = Selection()
        selection.collapse(Position(t, 1))
        assert selection.range_count == 1
        assert selection.is_collapsed

    def test_get_range_orders_backwards_selection(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        editor = make_editor("<p>abcdef</p>")
        t = find_text(editor.root, "abcdef")
        editor.select(Position(t, 5), Position(t, 2))
        rng = editor.selection.get_range(editor.root)
        assert rng is not None
        assert (rng.start.offset, rng.end.offset) == (2, 5)

    def test_session_store(self) -> None:
        store = SessionStore()
        store.set("k", "v")
        assert "k" in store
        assert store.get("k") == "v"
        store.remove("k")
        store.remove("k")
        assert store.get("k") is None
        assert len(store) == 0


class TestCapture:
    """SelectionBridge.capture()."""

    def test_stores_paths_under_session_key(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        """The snapshot is JSON in the session store under the fixed key."""
        editor = make_editor("<p>Intro</p><p>Hello world</p>")
        t = find_text(editor.root, "Hello world")
        editor.select(Position(t, 6), Position(t, 11))

        snapshot = editor.bridge.capture()

        assert snapshot == SelectionSnapshot(
            start_path=(1, 0), start_offset=6, end_path=(1, 0), end_offset=11
        )
        stored = json.loads(editor.session.get(SNAPSHOT_KEY))
        assert stored["start_path"] == [1, 0]
        assert stored["end_offset"] == 11

    def test_backwards_selection_is_normalised(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        editor = make_editor("<p>abcdef</p>")
        t = find_text(editor.root, "abcdef")
        editor.select(Position(t, 4), Position(t, 1))
        snapshot = editor.bridge.capture()
        assert snapshot is not None
        assert (snapshot.start_offset, snapshot.end_offset) == (1, 4)

    def test_no_selection_stores_nothing(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        editor = make_editor("<p>abc</p>")
        assert editor.bridge.capture() is None
        assert not editor.bridge.has_snapshot

    def test_selection_outside_document_stores_nothing(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        editor = make_editor("<p>abc</p>")
        loose = TextNode("elsewhere")
        editor.select(Position(loose, 0), Position(loose, 3))
        assert editor.bridge.capture() is None
        assert not editor.bridge.has_snapshot

    def test_second_capture_replaces_first(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        editor = make_editor("<p>abcdef</p>")
        t = find_text(editor.root, "abcdef")
        editor.select(Position(t, 0), Position(t, 1))
        editor.bridge.capture()
        editor.select(Position(t, 2), Position(t, 6))
        editor.bridge.capture()

        editor.selection.remove_all_ranges()
        assert editor.bridge.restore()
        assert editor.selection.anchor == Position(t, 2)
        assert editor.selection.focus == Position(t, 6)

    def test_custom_key(self, make_editor: Callable[[str], Editor]) -> None:
        editor = make_editor("<p>abc</p>")
        bridge = SelectionBridge(editor, key="other-key")
        t = find_text(editor.root, "abc")
        editor.select(Position(t, 0), Position(t, 2))
        bridge.capture()
        assert "other-key" in editor.session
        assert SNAPSHOT_KEY not in editor.session


class TestRestore:
    """SelectionBridge.restore()."""

    def test_restores_after_focus_moves_away(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        """Capture, lose the selection, restore: the same range comes back."""
        editor = make_editor("<p>Hello <b>big</b> world</p>")
        start = Position(find_text(editor.root, "Hello "), 2)
        end = Position(find_text(editor.root, " world"), 3)
        editor.select(start, end)
        editor.bridge.capture()

        editor.selection.remove_all_ranges()
        assert editor.bridge.restore()

        assert editor.selection.anchor == start
        assert editor.selection.focus == end

    def test_element_positions(self, make_editor: Callable[[str], Editor]) -> None:
        editor = make_editor("<p>Hello <b>world</b></p>")
        p = find_tag(editor.root, "p")
        editor.select(Position(p, 1), Position(p, 2))
        editor.bridge.capture()
        editor.selection.remove_all_ranges()

        assert editor.bridge.restore()
        assert editor.selection.anchor == Position(p, 1)

    def test_snapshot_is_single_use(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        """A second restore finds nothing to apply."""
        editor = make_editor("<p>abc</p>")
        t = find_text(editor.root, "abc")
        editor.select(Position(t, 0), Position(t, 2))
        editor.bridge.capture()

        assert editor.bridge.restore()
        assert not editor.bridge.has_snapshot
        assert not editor.bridge.restore()

    def test_nothing_stored(self, make_editor: Callable[[str], Editor]) -> None:
        editor = make_editor("<p>abc</p>")
        assert not editor.bridge.restore()

    def test_path_gone_after_paragraph_removed(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        """Failed restore leaves the selection alone and still consumes."""
        editor = make_editor("<p>one</p><p>two</p>")
        t = find_text(editor.root, "two")
        editor.select(Position(t, 0), Position(t, 3))
        editor.bridge.capture()

        editor.selection.remove_all_ranges()
        editor.root.children.pop()
        assert not editor.bridge.restore()
        assert editor.selection.range_count == 0
        assert not editor.bridge.has_snapshot

    def test_offset_out_of_range_after_edit(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        editor = make_editor("<p>a long line</p>")
        t = find_text(editor.root, "a long line")
        editor.select(Position(t, 2), Position(t, 11))
        editor.bridge.capture()

        t.content = "short"
        assert not editor.bridge.restore()
        assert not editor.bridge.has_snapshot

    def test_corrupt_snapshot(self, make_editor: Callable[[str], Editor]) -> None:
        editor = make_editor("<p>abc</p>")
        editor.session.set(SNAPSHOT_KEY, "{not json")
        assert not editor.bridge.restore()
        assert not editor.bridge.has_snapshot

    def test_negative_offset_rejected(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        editor = make_editor("<p>abc</p>")
        editor.session.set(
            SNAPSHOT_KEY,
            json.dumps(
                {
                    "start_path": [0, 0],
                    "start_offset": -1,
                    "end_path": [0, 0],
                    "end_offset": 2,
                }
            ),
        )
        assert not editor.bridge.restore()

    def test_drifted_path_resolves_to_new_node(
        self, make_editor: Callable[[str], Editor]
    ) -> None:
        """Structural paths are not corrected for edits made in between."""
        editor = make_editor("<p>first</p><p>second</p>")
        t = find_text(editor.root, "second")
        editor.select(Position(t, 0), Position(t, 3))
        editor.bridge.capture()

        editor.root.children.insert(0, ElementNode("p", children=[TextNode("zero")]))
        assert editor.bridge.restore()
        anchor = editor.selection.anchor
        assert anchor is not None
        assert isinstance(anchor.node, TextNode)
        assert anchor.node.content == "first"
