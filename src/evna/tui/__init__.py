"""evna-tui: multi-line text input engine for the evna chat terminal."""

# Clipboard
from evna.tui.clipboard import ClipboardBridge, MemoryClipboard, SafeClipboard

# Components (re-exported from components package)
from evna.tui.components import MultilineInput, MultilineInputTheme

# Configuration
from evna.tui.config import DEFAULT_PLACEHOLDER, MultilineInputOptions

# History
from evna.tui.history_store import HistoryStore, JsonHistoryStore, MemoryHistoryStore
from evna.tui.input_history import HistoryNavigator

# Keybindings
from evna.tui.keybindings import (
    ACTION_PRECEDENCE,
    DEFAULT_INPUT_KEYBINDINGS,
    InputAction,
    InputKeybindingsManager,
    get_input_keybindings,
    set_input_keybindings,
)

# Keyboard input handling
from evna.tui.keys import KeyEvent, KeyId, matches_key, parse_key_event

# Editing state
from evna.tui.selection import LineSpan, Selection, SelectionModel
from evna.tui.text_buffer import CursorPosition, Motion, TextBuffer
from evna.tui.undo_stack import UndoEngine, UndoEntry, UndoStack

# Utilities
from evna.tui.utils import expand_tabs, take_columns, visible_width

# Rendering projection
from evna.tui.viewport import RenderSnapshot, SelectionRange, ViewportScroller, build_snapshot

__all__ = [
    "ACTION_PRECEDENCE",
    "DEFAULT_INPUT_KEYBINDINGS",
    "DEFAULT_PLACEHOLDER",
    "ClipboardBridge",
    "CursorPosition",
    "HistoryNavigator",
    "HistoryStore",
    "InputAction",
    "InputKeybindingsManager",
    "JsonHistoryStore",
    "KeyEvent",
    "KeyId",
    "LineSpan",
    "MemoryClipboard",
    "MemoryHistoryStore",
    "Motion",
    "MultilineInput",
    "MultilineInputOptions",
    "MultilineInputTheme",
    "RenderSnapshot",
    "SafeClipboard",
    "Selection",
    "SelectionModel",
    "SelectionRange",
    "TextBuffer",
    "UndoEngine",
    "UndoEntry",
    "UndoStack",
    "ViewportScroller",
    "build_snapshot",
    "expand_tabs",
    "get_input_keybindings",
    "matches_key",
    "parse_key_event",
    "set_input_keybindings",
    "take_columns",
    "visible_width",
]
