"""Multi-line chat input: editing, selection, undo, history recall and rendering.

``MultilineInput`` owns one ``TextBuffer`` and the collaborators around it.
Key events are classified through ``ACTION_PRECEDENCE``; printable keys that
no action claims are inserted as text. After every handled key the viewport
is brought back over the cursor, and ``snapshot()``/``render()`` project the
current state without changing it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import grapheme as _grapheme

from evna.tui.clipboard import ClipboardBridge, MemoryClipboard, SafeClipboard
from evna.tui.config import MultilineInputOptions
from evna.tui.history_store import HistoryStore
from evna.tui.input_history import HistoryNavigator
from evna.tui.keybindings import InputAction, InputKeybindingsManager, get_input_keybindings
from evna.tui.keys import KeyEvent, parse_key_event
from evna.tui.selection import SelectionModel
from evna.tui.text_buffer import CursorPosition, Motion, TextBuffer
from evna.tui.undo_stack import UndoEngine
from evna.tui.utils import split_lines, take_columns, visible_width
from evna.tui.viewport import RenderSnapshot, SelectionRange, ViewportScroller, build_snapshot

logger = logging.getLogger(__name__)

PASTE_START = "\x1b[200~"
PASTE_END = "\x1b[201~"

_CURSOR_MOTIONS: dict[InputAction, Motion] = {
    "cursorUp": "up",
    "cursorDown": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "cursorWordLeft": "word_left",
    "cursorWordRight": "word_right",
    "cursorLineStart": "line_start",
    "cursorLineEnd": "line_end",
    "cursorDocStart": "doc_start",
    "cursorDocEnd": "doc_end",
    "pageUp": "page_up",
    "pageDown": "page_down",
}

_SELECT_MOTIONS: dict[InputAction, Motion] = {
    "selectUp": "up",
    "selectDown": "down",
    "selectLeft": "left",
    "selectRight": "right",
    "selectWordLeft": "word_left",
    "selectWordRight": "word_right",
    "selectLineStart": "line_start",
    "selectLineEnd": "line_end",
    "selectDocStart": "doc_start",
    "selectDocEnd": "doc_end",
    "selectPageUp": "page_up",
    "selectPageDown": "page_down",
}


def _plain(text: str) -> str:
    return text


def _dim(text: str) -> str:
    return f"\x1b[2m{text}\x1b[22m"


def _highlight(text: str) -> str:
    return f"\x1b[48;5;24m{text}\x1b[49m"


@dataclass
class MultilineInputTheme:
    border_color: Callable[[str], str] = _plain
    placeholder: Callable[[str], str] = _dim
    selection: Callable[[str], str] = _highlight


# ---------------------------------------------------------------------------
# MultilineInput
# ---------------------------------------------------------------------------


class MultilineInput:
    """Multi-line text input for the chat prompt.

    Keys are ignored while ``focused`` is ``False``. Callbacks:

    - ``on_submit(value)``: trimmed, non-empty value on submission.
    - ``on_copy(value)``: text placed on the clipboard by copy or cut.
    - ``on_change(value)``: full text after any change to the document.
    """

    def __init__(
        self,
        options: MultilineInputOptions | None = None,
        *,
        clipboard: ClipboardBridge | None = None,
        history_store: HistoryStore | None = None,
        keybindings: InputKeybindingsManager | None = None,
        theme: MultilineInputTheme | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.options = (options or MultilineInputOptions()).normalized()
        opts = self.options

        self._buffer = TextBuffer(max_lines=opts.max_lines)
        self._selection = SelectionModel(self._buffer)
        self._undo = UndoEngine(
            self._buffer.lines,
            interval_ms=opts.undo_interval_ms,
            limit=opts.undo_limit,
            clock=clock,
        )
        self._history = HistoryNavigator(opts.history_size)
        self._scroller = ViewportScroller(opts.height)
        self._clipboard = SafeClipboard(clipboard if clipboard is not None else MemoryClipboard())
        self._history_store = history_store

        if keybindings is None:
            keybindings = (
                InputKeybindingsManager(opts.keybindings)
                if opts.keybindings
                else get_input_keybindings()
            )
        self._keybindings = keybindings
        self.theme = theme or MultilineInputTheme()

        # Bracketed paste mode buffering
        self._paste_buffer: str = ""
        self._is_in_paste: bool = False

        self.focused: bool = False

        # Public callbacks
        self.on_submit: Callable[[str], None] | None = None
        self.on_copy: Callable[[str], None] | None = None
        self.on_change: Callable[[str], None] | None = None

        self._load_history()

    # -- Focus ---------------------------------------------------------------

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False
        self._paste_buffer = ""
        self._is_in_paste = False

    # -- Value access --------------------------------------------------------

    def get_value(self) -> str:
        return self._buffer.get_text()

    def get_lines(self) -> list[str]:
        return list(self._buffer.lines)

    def get_cursor(self) -> CursorPosition:
        return self._buffer.cursor

    def get_line_count(self) -> int:
        return self._buffer.line_count

    @property
    def selection_active(self) -> bool:
        return self._selection.is_active

    @property
    def history_browsing(self) -> bool:
        return self._history.is_browsing

    @property
    def history(self) -> tuple[str, ...]:
        return self._history.entries

    @property
    def scroll_offset(self) -> int:
        return self._scroller.offset

    @property
    def can_undo(self) -> bool:
        return self._undo.can_undo

    @property
    def can_redo(self) -> bool:
        return self._undo.can_redo

    def get_selected_text(self) -> str:
        return self._selection.get_selected_text()

    def set_value(self, value: str) -> None:
        """Replace the whole document. Undoable; not subject to ``max_lines``."""
        if value == self.get_value():
            return
        self._undo.record(self._buffer.lines, force=True)
        self._buffer.set_text(value)
        self._buffer.cursor = self._buffer.end
        self._selection.clear()
        self._history.stop_browsing()
        self._sync_viewport()
        self._emit_change()

    def clear(self) -> None:
        self.set_value("")

    def insert_text(self, text: str) -> bool:
        """Insert *text* at the cursor, replacing any selection."""
        return self._insert(text)

    # -- Submission ----------------------------------------------------------

    def submit(self) -> str | None:
        """Emit the trimmed value, store it in history and reset the input.

        Returns the submitted value, or ``None`` when the input was blank.
        """
        value = self.get_value().strip()
        if not value:
            return None

        self._history.add(value)
        self._history.stop_browsing()
        self._buffer.set_lines([""], CursorPosition(0, 0))
        self._selection.clear()
        self._undo.reset(self._buffer.lines)
        self._scroller.reset()
        self._save_history()

        logger.debug("Submitted %d characters (%d history entries)", len(value), len(self._history.entries))
        self._emit_change()
        if self.on_submit:
            self.on_submit(value)
        return value

    # -- Undo ----------------------------------------------------------------

    def undo(self) -> bool:
        restored = self._undo.undo(self._buffer.lines)
        if restored is None:
            return False
        self._restore(restored)
        return True

    def redo(self) -> bool:
        restored = self._undo.redo(self._buffer.lines)
        if restored is None:
            return False
        self._restore(restored)
        return True

    def _restore(self, lines: tuple[str, ...]) -> None:
        self._buffer.set_lines(lines, CursorPosition(0, 0))
        self._selection.clear()
        self._history.stop_browsing()
        self._sync_viewport()
        self._emit_change()

    # -- Clipboard -----------------------------------------------------------

    def copy(self) -> bool:
        """Copy the selection. Returns ``False`` when nothing is selected."""
        if not self._has_selection():
            return False
        text = self._selection.get_selected_text()
        self._clipboard.set(text)
        if self.on_copy:
            self.on_copy(text)
        return True

    def cut(self) -> bool:
        if not self.copy():
            return False
        return self._apply_edit(self._selection.delete_if_active)

    def paste(self) -> bool:
        text = self._clipboard.get()
        if not text:
            return False
        return self._insert(_clean_paste(text))

    # -- History -------------------------------------------------------------

    def navigate_history(self, direction: int) -> bool:
        """Recall an older (``-1``) or newer (``+1``) submitted value."""
        value = self._history.navigate(direction, self.get_value())
        if value is None:
            return False
        logger.debug("History index %d", self._history.cursor_index)
        self._buffer.set_text(value)
        self._buffer.cursor = self._buffer.end
        self._selection.clear()
        self._sync_viewport()
        self._emit_change()
        return True

    def add_to_history(self, value: str) -> bool:
        return self._history.add(value)

    # -- Input handling ------------------------------------------------------

    def handle_input(self, data: str) -> None:
        """Handle raw terminal input (key sequences and bracketed paste)."""
        if not self.focused:
            return

        # Handle bracketed paste mode
        if PASTE_START in data:
            self._is_in_paste = True
            self._paste_buffer = ""
            data = data.replace(PASTE_START, "")

        if self._is_in_paste:
            self._paste_buffer += data
            end_index = self._paste_buffer.find(PASTE_END)
            if end_index != -1:
                paste_content = self._paste_buffer[:end_index]
                if paste_content:
                    self._insert(_clean_paste(paste_content))
                    self._sync_viewport()
                self._is_in_paste = False
                remaining = self._paste_buffer[end_index + len(PASTE_END) :]
                self._paste_buffer = ""
                if remaining:
                    self.handle_input(remaining)
            return

        event = parse_key_event(data)
        if event is not None:
            self.handle_key(event)

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply one key event. Returns ``True`` if the input consumed it."""
        if not self.focused:
            return False

        handled = False
        for action in self._keybindings.resolve(event):
            if self._dispatch(action):
                handled = True
                break

        if not handled and event.is_printable and not event.alt and event.sequence:
            handled = self._insert(event.sequence)

        if handled:
            self._sync_viewport()
        return handled

    def _dispatch(self, action: InputAction) -> bool:  # noqa: C901
        """Run *action*. ``False`` lets the next bound action have a go."""
        # Submission
        if action == "submit":
            return self.submit() is not None

        # History recall
        if action == "historyPrevious":
            self.navigate_history(-1)
            return True
        if action == "historyNext":
            self.navigate_history(1)
            return True

        # Undo
        if action == "undo":
            self.undo()
            return True
        if action == "redo":
            self.redo()
            return True

        # Selection
        if action in _SELECT_MOTIONS:
            self._selection.extend(_SELECT_MOTIONS[action], self.options.height)
            return True
        if action == "selectAll":
            self._selection.select_all()
            return True

        # Clipboard
        if action == "copy":
            return self.copy()
        if action == "cut":
            return self.cut()
        if action == "paste":
            self.paste()
            return True

        # Line kill / word deletion
        if action == "killLine":
            self._selection.clear()
            self._apply_edit(self._buffer.kill_line)
            return True
        if action == "killFullLine":
            self._selection.clear()
            self._apply_edit(self._buffer.kill_full_line)
            return True
        if action == "deleteWordBackward":
            self._selection.clear()
            self._apply_edit(self._buffer.delete_word_backward)
            return True
        if action == "deleteWordForward":
            self._selection.clear()
            self._apply_edit(self._buffer.delete_word_forward)
            return True

        # Cursor movement
        if action in _CURSOR_MOTIONS:
            self._selection.clear()
            self._buffer.move(_CURSOR_MOTIONS[action], self.options.height)
            return True

        # Editing
        if action == "newLine":
            self._apply_edit(lambda: self._replace_selection(self._buffer.insert_newline))
            return True
        if action == "tab":
            indent = self.options.indent
            self._apply_edit(lambda: self._replace_selection(lambda: self._buffer.insert_char(indent)))
            return True
        if action == "outdent":
            self._selection.clear()
            self._apply_edit(self._buffer.outdent_line)
            return True
        if action == "deleteCharBackward":
            self._apply_edit(lambda: self._delete_selection() or self._buffer.backspace())
            return True
        if action == "deleteCharForward":
            self._apply_edit(lambda: self._delete_selection() or self._buffer.delete())
            return True

        return False

    # -- Rendering -----------------------------------------------------------

    def snapshot(self) -> RenderSnapshot:
        return build_snapshot(
            self._buffer.lines,
            self._buffer.cursor,
            self._selection.line_spans(),
            self._scroller,
            focused=self.focused,
            placeholder=self.options.placeholder,
            tab_width=self.options.tab_width,
        )

    def render(self, width: int) -> list[str]:
        width = max(1, width)
        snapshot = self.snapshot()
        horizontal = self.theme.border_color("─")

        result: list[str] = []

        # Top border (with scroll indicator if scrolled down)
        if snapshot.lines_above > 0:
            indicator = f"─── ↑ {snapshot.lines_above} more "
            remaining = width - visible_width(indicator)
            result.append(self.theme.border_color(indicator + "─" * max(0, remaining)))
        else:
            result.append(horizontal * width)

        if snapshot.showing_placeholder:
            text = take_columns(snapshot.lines[0], width)
            padding = " " * max(0, width - visible_width(text))
            result.append(self.theme.placeholder(text) + padding)
        else:
            # Reserve one column so the cursor can sit after the last character.
            content_width = max(1, width - 1)
            for row, line in enumerate(snapshot.lines):
                cursor_col = None
                if snapshot.cursor is not None and snapshot.cursor[0] == row:
                    cursor_col = snapshot.cursor[1]
                ranges = [r for r in snapshot.selections if r.row == row]
                result.append(self._render_row(line, content_width, width, cursor_col, ranges))

        # Bottom border (with scroll indicator if more content below)
        if snapshot.lines_below > 0:
            indicator = f"─── ↓ {snapshot.lines_below} more "
            remaining = width - visible_width(indicator)
            result.append(self.theme.border_color(indicator + "─" * max(0, remaining)))
        else:
            result.append(horizontal * width)

        return result

    def _render_row(
        self,
        line: str,
        content_width: int,
        width: int,
        cursor_col: int | None,
        ranges: list[SelectionRange],
    ) -> str:
        parts: list[str] = []
        col = 0
        cursor_drawn = False
        for g in _grapheme.graphemes(line):
            w = visible_width(g)
            if col + w > content_width:
                break
            if cursor_col == col and not cursor_drawn:
                parts.append(f"\x1b[7m{g}\x1b[0m")
                cursor_drawn = True
            elif any(r.col_start <= col < r.col_end for r in ranges):
                parts.append(self.theme.selection(g))
            else:
                parts.append(g)
            col += w

        if cursor_col is not None and not cursor_drawn and cursor_col == col:
            # Cursor is at the end - add highlighted space
            parts.append("\x1b[7m \x1b[0m")
            col += 1

        return "".join(parts) + " " * max(0, width - col)

    # -- Internal helpers ----------------------------------------------------

    def _apply_edit(self, edit: Callable[[], object]) -> bool:
        """Run *edit* against the buffer and record it if the text changed."""
        before = self._buffer.lines
        edit()
        if self._buffer.lines == before:
            return False
        self._undo.record(before)
        self._history.stop_browsing()
        self._sync_viewport()
        self._emit_change()
        return True

    def _has_selection(self) -> bool:
        if not self._selection.is_active:
            return False
        start, end = self._selection.normalize()
        return start != end

    def _delete_selection(self) -> bool:
        """Delete a non-empty selection; an empty one is just dropped."""
        if self._has_selection():
            return self._selection.delete_if_active()
        self._selection.clear()
        return False

    def _replace_selection(self, insert: Callable[[], bool]) -> bool:
        deleted = self._delete_selection()
        inserted = insert()
        return deleted or inserted

    def _insert(self, text: str) -> bool:
        if "\n" in text or "\r" in text:
            return self._apply_edit(lambda: self._replace_selection(lambda: self._buffer.insert_text(text)))
        return self._apply_edit(lambda: self._replace_selection(lambda: self._buffer.insert_char(text)))

    def _sync_viewport(self) -> None:
        self._scroller.update(self._buffer.cursor.line, self._buffer.line_count)

    def _emit_change(self) -> None:
        if self.on_change:
            self.on_change(self.get_value())

    def _load_history(self) -> None:
        if self._history_store is None:
            return
        try:
            entries = self._history_store.load()
        except Exception:
            logger.exception("Failed to load input history")
            return
        if not isinstance(entries, (list, tuple)):
            logger.warning("Ignoring input history of type %s", type(entries).__name__)
            return
        kept = self._history.load(entries)
        logger.debug("Loaded %d history entries", kept)

    def _save_history(self) -> None:
        if self._history_store is None:
            return
        try:
            self._history_store.save(self._history.entries)
        except Exception:
            logger.exception("Failed to save input history")


def _clean_paste(text: str) -> str:
    """Normalise line endings and drop control characters other than tab."""
    lines = split_lines(text)
    return "\n".join("".join(ch for ch in line if ch == "\t" or ord(ch) >= 32) for line in lines)
