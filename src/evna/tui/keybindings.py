"""Input keybindings and dispatch precedence."""

from __future__ import annotations

from typing import Literal

from evna.tui.keys import KeyEvent, KeyId, matches_key

InputAction = Literal[
    # Submission
    "submit",
    # History recall
    "historyPrevious",
    "historyNext",
    # Undo
    "undo",
    "redo",
    # Selection
    "selectUp",
    "selectDown",
    "selectLeft",
    "selectRight",
    "selectWordLeft",
    "selectWordRight",
    "selectLineStart",
    "selectLineEnd",
    "selectDocStart",
    "selectDocEnd",
    "selectPageUp",
    "selectPageDown",
    "selectAll",
    # Clipboard
    "copy",
    "cut",
    "paste",
    # Line kill / word deletion
    "killLine",
    "killFullLine",
    "deleteWordBackward",
    "deleteWordForward",
    # Cursor movement
    "cursorWordLeft",
    "cursorWordRight",
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "cursorDocStart",
    "cursorDocEnd",
    "pageUp",
    "pageDown",
    # Editing
    "newLine",
    "tab",
    "outdent",
    "deleteCharBackward",
    "deleteCharForward",
]

InputKeybindingsConfig = dict[InputAction, KeyId | list[KeyId]]

DEFAULT_INPUT_KEYBINDINGS: dict[InputAction, KeyId | list[KeyId]] = {
    # Submission (escape and ctrl+d do nothing on an empty input)
    "submit": ["escape", "ctrl+enter", "alt+enter", "meta+enter", "ctrl+d"],
    # History recall
    "historyPrevious": "ctrl+up",
    "historyNext": "ctrl+down",
    # Undo
    "undo": "ctrl+z",
    "redo": ["ctrl+shift+z", "ctrl+y"],
    # Selection
    "selectUp": "shift+up",
    "selectDown": "shift+down",
    "selectLeft": "shift+left",
    "selectRight": "shift+right",
    "selectWordLeft": "ctrl+shift+left",
    "selectWordRight": "ctrl+shift+right",
    "selectLineStart": "shift+home",
    "selectLineEnd": "shift+end",
    "selectDocStart": "ctrl+shift+home",
    "selectDocEnd": "ctrl+shift+end",
    "selectPageUp": "shift+pageup",
    "selectPageDown": "shift+pagedown",
    "selectAll": "ctrl+a",
    # Clipboard (copy and cut need a selection)
    "copy": "ctrl+c",
    "cut": "ctrl+x",
    "paste": "ctrl+v",
    # Line kill / word deletion
    "killLine": "ctrl+k",
    "killFullLine": "ctrl+u",
    "deleteWordBackward": ["ctrl+w", "ctrl+backspace", "alt+backspace"],
    "deleteWordForward": ["ctrl+delete", "alt+d", "alt+delete"],
    # Cursor movement
    "cursorWordLeft": ["ctrl+left", "alt+left", "alt+b"],
    "cursorWordRight": ["ctrl+right", "alt+right", "alt+f"],
    "cursorUp": "up",
    "cursorDown": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "cursorLineStart": "home",
    "cursorLineEnd": ["end", "ctrl+e"],
    "cursorDocStart": "ctrl+home",
    "cursorDocEnd": "ctrl+end",
    "pageUp": "pageup",
    "pageDown": "pagedown",
    # Editing
    "newLine": ["enter", "shift+enter"],
    "tab": "tab",
    "outdent": "shift+tab",
    "deleteCharBackward": ["backspace", "shift+backspace"],
    "deleteCharForward": ["delete", "shift+delete"],
}

# Dispatch order. When a chord is bound in several groups the earlier group
# wins; plain character insertion comes after all of them.
ACTION_PRECEDENCE: tuple[tuple[str, tuple[InputAction, ...]], ...] = (
    ("submission", ("submit",)),
    ("history", ("historyPrevious", "historyNext")),
    ("undo", ("undo", "redo")),
    (
        "selection",
        (
            "selectUp",
            "selectDown",
            "selectLeft",
            "selectRight",
            "selectWordLeft",
            "selectWordRight",
            "selectLineStart",
            "selectLineEnd",
            "selectDocStart",
            "selectDocEnd",
            "selectPageUp",
            "selectPageDown",
            "selectAll",
        ),
    ),
    ("clipboard", ("copy", "cut", "paste")),
    ("kill", ("killLine", "killFullLine", "deleteWordBackward", "deleteWordForward")),
    (
        "navigation",
        (
            "cursorWordLeft",
            "cursorWordRight",
            "cursorUp",
            "cursorDown",
            "cursorLeft",
            "cursorRight",
            "cursorLineStart",
            "cursorLineEnd",
            "cursorDocStart",
            "cursorDocEnd",
            "pageUp",
            "pageDown",
        ),
    ),
    ("editing", ("newLine", "tab", "outdent", "deleteCharBackward", "deleteCharForward")),
)


class InputKeybindingsManager:
    """Maps key events to input actions."""

    def __init__(self, config: InputKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[InputAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: InputKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_INPUT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, event: KeyEvent, action: InputAction) -> bool:
        """Check if an event triggers a specific action."""
        return any(matches_key(event, key) for key in self._action_to_keys.get(action, []))

    def resolve(self, event: KeyEvent) -> list[InputAction]:
        """All actions bound to *event*, in dispatch order."""
        return [
            action
            for _group, actions in ACTION_PRECEDENCE
            for action in actions
            if self.matches(event, action)
        ]

    def get_keys(self, action: InputAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: InputKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)


_global_input_keybindings: InputKeybindingsManager | None = None


def get_input_keybindings() -> InputKeybindingsManager:
    global _global_input_keybindings
    if _global_input_keybindings is None:
        _global_input_keybindings = InputKeybindingsManager()
    return _global_input_keybindings


def set_input_keybindings(manager: InputKeybindingsManager) -> None:
    global _global_input_keybindings
    _global_input_keybindings = manager
