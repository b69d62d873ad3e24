"""Anchor/active selection over a TextBuffer."""

from __future__ import annotations

from dataclasses import dataclass

from evna.tui.text_buffer import CursorPosition, Motion, TextBuffer, clamp_position


@dataclass(frozen=True)
class Selection:
    anchor: CursorPosition
    active: CursorPosition
    is_active: bool = True


@dataclass(frozen=True)
class LineSpan:
    """Part of one buffer line covered by the selection, in code-point columns."""

    line: int
    start_col: int
    end_col: int


class SelectionModel:
    """Tracks one selection and edits it against a buffer.

    The selection is stored as entered (anchor first); ``normalize`` orders
    the endpoints on demand.
    """

    def __init__(self, buffer: TextBuffer) -> None:
        self._buffer = buffer
        self._selection = Selection(CursorPosition(), CursorPosition(), is_active=False)

    @property
    def is_active(self) -> bool:
        return self._selection.is_active

    @property
    def selection(self) -> Selection:
        return self._selection

    def set(self, anchor: CursorPosition, active: CursorPosition) -> None:
        lines = self._buffer.lines
        self._selection = Selection(
            clamp_position(lines, anchor), clamp_position(lines, active), is_active=True
        )

    def clear(self) -> None:
        if self._selection.is_active:
            self._selection = Selection(
                self._selection.anchor, self._selection.active, is_active=False
            )

    def extend(self, motion: Motion, page_size: int = 1) -> None:
        """Move the cursor by *motion*, growing the selection from its anchor."""
        anchor = self._selection.anchor if self.is_active else self._buffer.cursor
        self._buffer.move(motion, page_size)
        self.set(anchor, self._buffer.cursor)

    def select_all(self) -> None:
        self._buffer.cursor = self._buffer.end
        self.set(CursorPosition(0, 0), self._buffer.end)

    def normalize(self) -> tuple[CursorPosition, CursorPosition]:
        anchor, active = self._selection.anchor, self._selection.active
        if anchor <= active:
            return anchor, active
        return active, anchor

    def get_selected_text(self) -> str:
        if not self.is_active:
            return ""
        start, end = self.normalize()
        return self._buffer.text_between(start, end)

    def delete_if_active(self) -> bool:
        """Splice the selected span out of the buffer.

        Returns ``False`` without touching anything when no selection is
        active. Otherwise the cursor lands on the start of the span and the
        selection is deactivated.
        """
        if not self.is_active:
            return False
        start, end = self.normalize()
        self._buffer.delete_range(start, end)
        self._buffer.cursor = start
        self.clear()
        return True

    def line_spans(self) -> list[LineSpan]:
        """Per-line spans covered by the active selection (empty when inactive)."""
        if not self.is_active:
            return []
        start, end = self.normalize()
        lines = self._buffer.lines
        spans: list[LineSpan] = []
        for index in range(start.line, min(end.line, len(lines) - 1) + 1):
            line = lines[index]
            begin = start.col if index == start.line else 0
            stop = end.col if index == end.line else len(line)
            spans.append(LineSpan(index, min(begin, len(line)), min(stop, len(line))))
        return spans
