"""Vertical scrolling and the pure render projection of the input.

Nothing in this module mutates editing state. ``ViewportScroller`` only owns
the scroll offset, which the input recomputes after every key it handles;
``build_snapshot`` turns the current state into draw-ready data and may be
called any number of times per state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from evna.tui.selection import LineSpan
from evna.tui.text_buffer import CursorPosition
from evna.tui.utils import expand_tabs, visible_width


@dataclass(frozen=True)
class SelectionRange:
    """Highlighted columns ``[col_start, col_end)`` on one visible row."""

    row: int
    col_start: int
    col_end: int


@dataclass(frozen=True)
class RenderSnapshot:
    lines: tuple[str, ...]
    cursor: tuple[int, int] | None
    selections: tuple[SelectionRange, ...]
    scroll_offset: int
    total_lines: int
    showing_placeholder: bool = False

    @property
    def lines_above(self) -> int:
        return self.scroll_offset

    @property
    def lines_below(self) -> int:
        if self.showing_placeholder:
            return 0
        return max(0, self.total_lines - self.scroll_offset - len(self.lines))


class ViewportScroller:
    """Keeps the cursor line inside a window of ``height`` lines."""

    def __init__(self, height: int) -> None:
        self.height = max(1, height)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    def update(self, cursor_line: int, line_count: int) -> int:
        if cursor_line < self._offset:
            self._offset = cursor_line
        elif cursor_line > self._offset + self.height - 1:
            self._offset = cursor_line - self.height + 1
        # Do not leave blank rows below the document when it shrinks.
        max_offset = max(0, line_count - self.height)
        self._offset = max(0, min(self._offset, max_offset))
        return self._offset

    def reset(self) -> None:
        self._offset = 0

    def visible_range(self, line_count: int) -> range:
        return range(self._offset, min(line_count, self._offset + self.height))


def display_column(line: str, col: int, tab_width: int) -> int:
    """Screen column of code-point column *col* once tabs are expanded."""
    return visible_width(expand_tabs(line[: max(0, col)], tab_width))


def build_snapshot(
    lines: Sequence[str],
    cursor: CursorPosition,
    spans: Sequence[LineSpan],
    scroller: ViewportScroller,
    *,
    focused: bool,
    placeholder: str = "",
    tab_width: int = 2,
) -> RenderSnapshot:
    """Project editing state onto the visible window."""
    is_empty = len(lines) == 1 and lines[0] == ""
    if is_empty and not focused and placeholder:
        return RenderSnapshot(
            lines=(placeholder,),
            cursor=None,
            selections=(),
            scroll_offset=0,
            total_lines=1,
            showing_placeholder=True,
        )

    visible = scroller.visible_range(len(lines))
    display_lines = tuple(expand_tabs(lines[i], tab_width) for i in visible)

    cursor_cell: tuple[int, int] | None = None
    if focused and cursor.line in visible:
        cursor_cell = (
            cursor.line - visible.start,
            display_column(lines[cursor.line], cursor.col, tab_width),
        )

    ranges: list[SelectionRange] = []
    for span in spans:
        if span.line not in visible or span.end_col <= span.start_col:
            continue
        line = lines[span.line]
        ranges.append(
            SelectionRange(
                row=span.line - visible.start,
                col_start=display_column(line, span.start_col, tab_width),
                col_end=display_column(line, span.end_col, tab_width),
            )
        )

    return RenderSnapshot(
        lines=display_lines,
        cursor=cursor_cell,
        selections=tuple(ranges),
        scroll_offset=visible.start,
        total_lines=len(lines),
    )
