"""TUI components."""

from evna.tui.components.multiline_input import MultilineInput, MultilineInputTheme

__all__ = [
    "MultilineInput",
    "MultilineInputTheme",
]
