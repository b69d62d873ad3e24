"""Construction-time options for the multi-line input."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from evna.tui.keybindings import InputKeybindingsConfig

DEFAULT_PLACEHOLDER = "Type your message... (ESC or Ctrl+Enter to submit)"


@dataclass
class MultilineInputOptions:
    """Options for ``MultilineInput``.

    ``max_lines`` is a soft cap: newlines and pastes that would exceed it
    keep only the lines that fit, while ``set_value`` is never truncated.
    ``height`` is the number of text rows in the viewport.
    """

    placeholder: str = DEFAULT_PLACEHOLDER
    max_lines: int = 1000
    history_size: int = 100
    height: int = 8
    undo_interval_ms: float = 500
    undo_limit: int = 100
    tab_width: int = 2
    indent: str = "  "
    keybindings: InputKeybindingsConfig | None = None

    def normalized(self) -> MultilineInputOptions:
        """Return a copy with every number clamped into a usable range."""
        return replace(
            self,
            placeholder=self.placeholder if isinstance(self.placeholder, str) else "",
            max_lines=_clamp_int(self.max_lines, 1, default=1000),
            history_size=_clamp_int(self.history_size, 1, default=100),
            height=_clamp_int(self.height, 1, default=8),
            undo_interval_ms=_clamp_float(self.undo_interval_ms, 0.0, default=500.0),
            undo_limit=_clamp_int(self.undo_limit, 1, default=100),
            tab_width=_clamp_int(self.tab_width, 0, maximum=16, default=2),
            indent=self.indent if isinstance(self.indent, str) and "\n" not in self.indent else "  ",
        )


def _clamp_int(value: object, minimum: int, *, maximum: int | None = None, default: int) -> int:
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return default
    result = max(minimum, int(value))
    if maximum is not None:
        result = min(maximum, result)
    return result


def _clamp_float(value: object, minimum: float, *, default: float) -> float:
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return default
    return max(minimum, float(value))
