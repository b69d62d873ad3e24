"""Tests for evna.tui.viewport -- scrolling and the render snapshot."""

from __future__ import annotations

from evna.tui.selection import LineSpan
from evna.tui.text_buffer import CursorPosition
from evna.tui.viewport import SelectionRange, ViewportScroller, build_snapshot, display_column


class TestViewportScroller:
    """The cursor line always stays inside the window."""

    def test_scrolls_down_to_follow_cursor(self) -> None:
        scroller = ViewportScroller(3)
        assert scroller.update(5, 10) == 3

    def test_scrolls_up_to_follow_cursor(self) -> None:
        scroller = ViewportScroller(3)
        scroller.update(9, 10)
        assert scroller.update(2, 10) == 2

    def test_keeps_offset_when_cursor_visible(self) -> None:
        scroller = ViewportScroller(3)
        scroller.update(5, 10)
        assert scroller.update(4, 10) == 3

    def test_offset_clamped_when_document_shrinks(self) -> None:
        scroller = ViewportScroller(3)
        scroller.update(9, 10)
        assert scroller.update(1, 2) == 0

    def test_cursor_always_in_window(self) -> None:
        scroller = ViewportScroller(4)
        for cursor_line in [0, 7, 3, 15, 15, 0, 9, 19]:
            offset = scroller.update(cursor_line, 20)
            assert offset <= cursor_line <= offset + 3

    def test_height_at_least_one(self) -> None:
        assert ViewportScroller(0).height == 1

    def test_visible_range(self) -> None:
        scroller = ViewportScroller(3)
        scroller.update(4, 5)
        assert list(scroller.visible_range(5)) == [2, 3, 4]


class TestDisplayColumn:
    """Code-point columns map to screen columns."""

    def test_tabs_expand(self) -> None:
        assert display_column("\tab", 1, 4) == 4

    def test_wide_characters_take_two_columns(self) -> None:
        assert display_column("日本x", 2, 2) == 4


class TestBuildSnapshot:
    """Pure projection of editing state."""

    def test_visible_slice_and_cursor(self) -> None:
        lines = [f"line {i}" for i in range(10)]
        scroller = ViewportScroller(3)
        scroller.update(6, 10)
        snap = build_snapshot(lines, CursorPosition(6, 2), [], scroller, focused=True)
        assert snap.lines == ("line 4", "line 5", "line 6")
        assert snap.cursor == (2, 2)
        assert snap.lines_above == 4
        assert snap.lines_below == 3

    def test_tabs_expanded_for_display_only(self) -> None:
        lines = ["\tx"]
        snap = build_snapshot(lines, CursorPosition(0, 1), [], ViewportScroller(3), focused=True, tab_width=2)
        assert snap.lines == ("  x",)
        assert snap.cursor == (0, 2)
        assert lines == ["\tx"]

    def test_unfocused_hides_cursor(self) -> None:
        snap = build_snapshot(["abc"], CursorPosition(0, 1), [], ViewportScroller(3), focused=False)
        assert snap.cursor is None

    def test_placeholder_when_empty_and_unfocused(self) -> None:
        snap = build_snapshot([""], CursorPosition(), [], ViewportScroller(3), focused=False, placeholder="Type...")
        assert snap.showing_placeholder
        assert snap.lines == ("Type...",)

    def test_no_placeholder_when_focused(self) -> None:
        snap = build_snapshot([""], CursorPosition(), [], ViewportScroller(3), focused=True, placeholder="Type...")
        assert snap.showing_placeholder is False
        assert snap.lines == ("",)

    def test_selection_ranges_on_visible_rows(self) -> None:
        lines = ["hello", "world", "again"]
        scroller = ViewportScroller(2)
        scroller.update(2, 3)
        spans = [LineSpan(0, 2, 5), LineSpan(1, 0, 5), LineSpan(2, 0, 3)]
        snap = build_snapshot(lines, CursorPosition(2, 3), spans, scroller, focused=True)
        assert snap.selections == (SelectionRange(0, 0, 5), SelectionRange(1, 0, 3))

    def test_snapshot_is_repeatable(self) -> None:
        scroller = ViewportScroller(3)
        args = (["a", "b"], CursorPosition(1, 1), [], scroller)
        assert build_snapshot(*args, focused=True) == build_snapshot(*args, focused=True)
