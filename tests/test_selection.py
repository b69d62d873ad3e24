"""Tests for evna.tui.selection.SelectionModel."""

from __future__ import annotations

from evna.tui.selection import LineSpan, SelectionModel
from evna.tui.text_buffer import CursorPosition, TextBuffer


def model(lines: list[str], line: int = 0, col: int = 0) -> tuple[TextBuffer, SelectionModel]:
    buf = TextBuffer(lines)
    buf.cursor = CursorPosition(line, col)
    return buf, SelectionModel(buf)


class TestExtend:
    """Shift-motions grow the selection from a fixed anchor."""

    def test_starts_inactive(self) -> None:
        _, sel = model(["abc"])
        assert sel.is_active is False
        assert sel.get_selected_text() == ""

    def test_extend_anchors_at_cursor(self) -> None:
        buf, sel = model(["hello"], 0, 1)
        sel.extend("right")
        sel.extend("right")
        assert sel.selection.anchor == CursorPosition(0, 1)
        assert sel.selection.active == CursorPosition(0, 3)
        assert buf.cursor == CursorPosition(0, 3)
        assert sel.get_selected_text() == "el"

    def test_extend_backwards_keeps_anchor(self) -> None:
        _, sel = model(["hello"], 0, 3)
        sel.extend("left")
        sel.extend("left")
        assert sel.selection.anchor == CursorPosition(0, 3)
        assert sel.normalize() == (CursorPosition(0, 1), CursorPosition(0, 3))

    def test_extend_across_lines(self) -> None:
        _, sel = model(["ab", "cd"], 0, 1)
        sel.extend("down")
        assert sel.get_selected_text() == "b\nc"


class TestNormalize:
    """normalize orders endpoints without mutating the selection."""

    def test_normalize_is_idempotent(self) -> None:
        _, sel = model(["hello", "world"])
        sel.set(CursorPosition(1, 3), CursorPosition(0, 2))
        first = sel.normalize()
        assert first == (CursorPosition(0, 2), CursorPosition(1, 3))
        assert sel.normalize() == first
        assert sel.selection.anchor == CursorPosition(1, 3)

    def test_set_clamps_endpoints(self) -> None:
        _, sel = model(["ab"])
        sel.set(CursorPosition(5, 5), CursorPosition(-1, 0))
        assert sel.selection.anchor == CursorPosition(0, 2)
        assert sel.selection.active == CursorPosition(0, 0)


class TestDeleteIfActive:
    """Deleting a selection splices the span out of the buffer."""

    def test_inactive_returns_false(self) -> None:
        buf, sel = model(["abc"], 0, 1)
        assert sel.delete_if_active() is False
        assert buf.lines == ("abc",)

    def test_multi_line_span_joins_remainders(self) -> None:
        buf, sel = model(["hello", "world"])
        sel.set(CursorPosition(0, 2), CursorPosition(1, 3))
        assert sel.delete_if_active() is True
        assert buf.lines == ("he" + "ld",)
        assert buf.cursor == CursorPosition(0, 2)
        assert sel.is_active is False

    def test_reversed_selection_deletes_same_span(self) -> None:
        buf, sel = model(["hello", "world"])
        sel.set(CursorPosition(1, 3), CursorPosition(0, 2))
        sel.delete_if_active()
        assert buf.lines == ("held",)


class TestSelectAll:
    """select_all covers the whole document."""

    def test_select_all(self) -> None:
        _, sel = model(["one", "two", "three"])
        sel.select_all()
        assert sel.selection.anchor == CursorPosition(0, 0)
        assert sel.selection.active == CursorPosition(2, 5)
        assert sel.get_selected_text() == "one\ntwo\nthree"


class TestLineSpans:
    """line_spans gives per-line highlight ranges."""

    def test_inactive_has_no_spans(self) -> None:
        _, sel = model(["abc"])
        assert sel.line_spans() == []

    def test_spans_cover_each_line(self) -> None:
        _, sel = model(["hello", "big", "world"])
        sel.set(CursorPosition(0, 3), CursorPosition(2, 2))
        assert sel.line_spans() == [
            LineSpan(0, 3, 5),
            LineSpan(1, 0, 3),
            LineSpan(2, 0, 2),
        ]

    def test_clear_deactivates(self) -> None:
        _, sel = model(["abc"])
        sel.select_all()
        sel.clear()
        assert sel.is_active is False
        assert sel.line_spans() == []
