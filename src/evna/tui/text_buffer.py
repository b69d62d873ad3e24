"""Line buffer and cursor model for the multi-line input.

The buffer is a non-empty list of lines (no embedded newlines) plus a single
cursor. Every primitive clamps instead of raising, so any sequence of calls
leaves the buffer and cursor valid. Editing primitives return ``True`` when
they changed the text and ``False`` when they were a no-op.

Columns are code-point offsets. Word motion uses ASCII word characters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

from evna.tui.utils import is_whitespace_char, is_word_char, leading_indent, split_lines

Motion = Literal[
    "up",
    "down",
    "left",
    "right",
    "word_left",
    "word_right",
    "line_start",
    "line_end",
    "doc_start",
    "doc_end",
    "page_up",
    "page_down",
]


@dataclass(frozen=True, order=True)
class CursorPosition:
    """An address into the buffer. Ordering is lexicographic on (line, col)."""

    line: int = 0
    col: int = 0


def clamp_position(lines: Sequence[str], position: CursorPosition) -> CursorPosition:
    """Clamp *position* into the valid range for *lines*."""
    if not lines:
        return CursorPosition(0, 0)
    line = max(0, min(position.line, len(lines) - 1))
    col = max(0, min(position.col, len(lines[line])))
    return CursorPosition(line, col)


# ---------------------------------------------------------------------------
# Word scanning
# ---------------------------------------------------------------------------


def word_left_col(line: str, col: int) -> int:
    """Column reached by skipping whitespace then one word backwards.

    When the run before the cursor is neither whitespace nor word characters
    (punctuation), that run is skipped instead so the motion always advances.
    """
    col = max(0, min(col, len(line)))
    while col > 0 and is_whitespace_char(line[col - 1]):
        col -= 1
    if col > 0 and is_word_char(line[col - 1]):
        while col > 0 and is_word_char(line[col - 1]):
            col -= 1
    else:
        while col > 0 and not is_word_char(line[col - 1]) and not is_whitespace_char(line[col - 1]):
            col -= 1
    return col


def word_right_col(line: str, col: int) -> int:
    """Column reached by skipping one word (or punctuation run) then whitespace."""
    col = max(0, min(col, len(line)))
    if col < len(line) and is_word_char(line[col]):
        while col < len(line) and is_word_char(line[col]):
            col += 1
    else:
        while col < len(line) and not is_word_char(line[col]) and not is_whitespace_char(line[col]):
            col += 1
    while col < len(line) and is_whitespace_char(line[col]):
        col += 1
    return col


# ---------------------------------------------------------------------------
# TextBuffer
# ---------------------------------------------------------------------------


class TextBuffer:
    """Ordered lines of text with a clamped cursor."""

    def __init__(
        self,
        lines: Iterable[str] | None = None,
        *,
        max_lines: int | None = None,
    ) -> None:
        self._lines: list[str] = _sanitize(lines)
        self._cursor = CursorPosition(0, 0)
        self.max_lines = max_lines

    # -- Accessors -----------------------------------------------------------

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def cursor(self) -> CursorPosition:
        return self._cursor

    @cursor.setter
    def cursor(self, position: CursorPosition) -> None:
        self._cursor = clamp_position(self._lines, position)

    @property
    def current_line(self) -> str:
        return self._lines[self._cursor.line]

    @property
    def end(self) -> CursorPosition:
        """Position just after the last character of the document."""
        last = len(self._lines) - 1
        return CursorPosition(last, len(self._lines[last]))

    def line(self, index: int) -> str:
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return ""

    def get_text(self) -> str:
        return "\n".join(self._lines)

    def is_empty(self) -> bool:
        return len(self._lines) == 1 and self._lines[0] == ""

    def set_lines(self, lines: Iterable[str], cursor: CursorPosition | None = None) -> None:
        """Replace the whole document. The cursor is clamped to the new text."""
        self._lines = _sanitize(lines)
        self.cursor = cursor if cursor is not None else self._cursor

    def set_text(self, text: str, cursor: CursorPosition | None = None) -> None:
        self.set_lines(split_lines(text), cursor)

    # -- Insertion -----------------------------------------------------------

    def insert_char(self, char: str) -> bool:
        """Insert *char* (no newlines) at the cursor."""
        if not char:
            return False
        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        self._lines[line] = current[:col] + char + current[col:]
        self._cursor = CursorPosition(line, col + len(char))
        return True

    def insert_newline(self) -> bool:
        """Split the line at the cursor, carrying its indentation to the new line."""
        if self._at_line_cap(1):
            return False
        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        before, after = current[:col], current[col:]
        indent = leading_indent(before)
        self._lines[line] = before
        self._lines.insert(line + 1, indent + after)
        self._cursor = CursorPosition(line + 1, len(indent))
        return True

    def insert_text(self, text: str) -> bool:
        """Insert possibly multi-line *text* at the cursor.

        The first segment joins the text before the cursor, the last segment
        is followed by the text after the cursor, and middle segments become
        whole lines. Segments beyond the line cap are dropped.
        """
        if not text:
            return False
        segments = split_lines(text)
        room = len(segments) - 1
        if self.max_lines is not None:
            room = max(0, min(room, self.max_lines - len(self._lines)))
        segments = segments[: room + 1]

        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        before, after = current[:col], current[col:]

        if len(segments) == 1:
            if not segments[0]:
                return False
            self._lines[line] = before + segments[0] + after
            self._cursor = CursorPosition(line, col + len(segments[0]))
            return True

        new_lines = [before + segments[0], *segments[1:-1], segments[-1] + after]
        self._lines[line : line + 1] = new_lines
        self._cursor = CursorPosition(line + len(segments) - 1, len(segments[-1]))
        return True

    # -- Deletion ------------------------------------------------------------

    def backspace(self) -> bool:
        line, col = self._cursor.line, self._cursor.col
        if col > 0:
            current = self._lines[line]
            self._lines[line] = current[: col - 1] + current[col:]
            self._cursor = CursorPosition(line, col - 1)
            return True
        if line > 0:
            self._join_with_next(line - 1)
            return True
        return False

    def delete(self) -> bool:
        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        if col < len(current):
            self._lines[line] = current[:col] + current[col + 1 :]
            return True
        if line < len(self._lines) - 1:
            self._join_with_next(line)
            self._cursor = CursorPosition(line, col)
            return True
        return False

    def delete_range(self, start: CursorPosition, end: CursorPosition) -> bool:
        """Remove the text between two positions and put the cursor at the start."""
        start = clamp_position(self._lines, start)
        end = clamp_position(self._lines, end)
        if end < start:
            start, end = end, start
        if start == end:
            self._cursor = start
            return False
        if start.line == end.line:
            current = self._lines[start.line]
            self._lines[start.line] = current[: start.col] + current[end.col :]
        else:
            head = self._lines[start.line][: start.col]
            tail = self._lines[end.line][end.col :]
            self._lines[start.line : end.line + 1] = [head + tail]
        self._cursor = start
        return True

    def text_between(self, start: CursorPosition, end: CursorPosition) -> str:
        start = clamp_position(self._lines, start)
        end = clamp_position(self._lines, end)
        if end < start:
            start, end = end, start
        if start.line == end.line:
            return self._lines[start.line][start.col : end.col]
        parts = [self._lines[start.line][start.col :]]
        parts.extend(self._lines[start.line + 1 : end.line])
        parts.append(self._lines[end.line][: end.col])
        return "\n".join(parts)

    def delete_word_backward(self) -> bool:
        line, col = self._cursor.line, self._cursor.col
        if col == 0:
            if line == 0:
                return False
            self._join_with_next(line - 1)
            return True
        target = word_left_col(self._lines[line], col)
        return self.delete_range(CursorPosition(line, target), self._cursor)

    def delete_word_forward(self) -> bool:
        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        target = word_right_col(current, col)
        if target == col:
            if line == len(self._lines) - 1:
                return False
            self._join_with_next(line)
            self._cursor = CursorPosition(line, col)
            return True
        self._lines[line] = current[:col] + current[target:]
        return True

    def kill_line(self) -> bool:
        """Delete to end of line, or join the next line when already there."""
        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        if col < len(current):
            self._lines[line] = current[:col]
            return True
        if line < len(self._lines) - 1:
            self._join_with_next(line)
            self._cursor = CursorPosition(line, col)
            return True
        return False

    def kill_full_line(self) -> bool:
        """Remove the current line. The last remaining line is blanked instead."""
        line, col = self._cursor.line, self._cursor.col
        if len(self._lines) > 1:
            del self._lines[line]
            self.cursor = CursorPosition(min(line, len(self._lines) - 1), col)
            return True
        if self._lines[0] == "":
            return False
        self._lines[0] = ""
        self._cursor = CursorPosition(0, 0)
        return True

    def outdent_line(self) -> bool:
        """Remove one tab, else up to two spaces, else one space of indentation."""
        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        if current.startswith("\t"):
            removed = 1
        elif current.startswith("  "):
            removed = 2
        elif current.startswith(" "):
            removed = 1
        else:
            return False
        self._lines[line] = current[removed:]
        self._cursor = CursorPosition(line, max(0, col - removed))
        return True

    # -- Cursor motion -------------------------------------------------------

    def move(self, motion: Motion, page_size: int = 1) -> None:
        """Move the cursor. Unknown motions are ignored."""
        handler = getattr(self, f"_move_{motion}", None)
        if handler is None:
            return
        if motion in ("page_up", "page_down"):
            handler(max(1, page_size))
        else:
            handler()

    def _move_up(self) -> None:
        if self._cursor.line > 0:
            self.cursor = CursorPosition(self._cursor.line - 1, self._cursor.col)

    def _move_down(self) -> None:
        if self._cursor.line < len(self._lines) - 1:
            self.cursor = CursorPosition(self._cursor.line + 1, self._cursor.col)

    def _move_left(self) -> None:
        line, col = self._cursor.line, self._cursor.col
        if col > 0:
            self._cursor = CursorPosition(line, col - 1)
        elif line > 0:
            self._cursor = CursorPosition(line - 1, len(self._lines[line - 1]))

    def _move_right(self) -> None:
        line, col = self._cursor.line, self._cursor.col
        if col < len(self._lines[line]):
            self._cursor = CursorPosition(line, col + 1)
        elif line < len(self._lines) - 1:
            self._cursor = CursorPosition(line + 1, 0)

    def _move_word_left(self) -> None:
        line, col = self._cursor.line, self._cursor.col
        if col == 0 and line > 0:
            self._cursor = CursorPosition(line - 1, len(self._lines[line - 1]))
            return
        self._cursor = CursorPosition(line, word_left_col(self._lines[line], col))

    def _move_word_right(self) -> None:
        line, col = self._cursor.line, self._cursor.col
        current = self._lines[line]
        if col >= len(current) and line < len(self._lines) - 1:
            self._cursor = CursorPosition(line + 1, 0)
            return
        self._cursor = CursorPosition(line, word_right_col(current, col))

    def _move_line_start(self) -> None:
        # Smart home: first non-whitespace column, then column 0.
        line, col = self._cursor.line, self._cursor.col
        indent = len(leading_indent(self._lines[line]))
        if indent == len(self._lines[line]):
            indent = 0
        target = indent if indent > 0 and col != indent else 0
        self._cursor = CursorPosition(line, target)

    def _move_line_end(self) -> None:
        self._cursor = CursorPosition(self._cursor.line, len(self.current_line))

    def _move_doc_start(self) -> None:
        self._cursor = CursorPosition(0, 0)

    def _move_doc_end(self) -> None:
        self._cursor = self.end

    def _move_page_up(self, page_size: int) -> None:
        self.cursor = CursorPosition(max(0, self._cursor.line - page_size), self._cursor.col)

    def _move_page_down(self, page_size: int) -> None:
        self.cursor = CursorPosition(
            min(len(self._lines) - 1, self._cursor.line + page_size), self._cursor.col
        )

    # -- Internal helpers ----------------------------------------------------

    def _join_with_next(self, line: int) -> None:
        """Append line ``line + 1`` to ``line``; the cursor lands at the seam."""
        seam = len(self._lines[line])
        self._lines[line] += self._lines[line + 1]
        del self._lines[line + 1]
        self._cursor = CursorPosition(line, seam)

    def _at_line_cap(self, extra: int) -> bool:
        return self.max_lines is not None and len(self._lines) + extra > self.max_lines


def _sanitize(lines: Iterable[str] | None) -> list[str]:
    """Copy *lines*, splitting any embedded newlines; never returns an empty list."""
    result: list[str] = []
    for line in lines or ():
        result.extend(split_lines(str(line)))
    return result or [""]
