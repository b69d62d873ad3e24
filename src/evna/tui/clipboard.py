"""Clipboard collaborator for cut, copy and paste.

The input never talks to an OS clipboard itself. Hosts inject an object that
satisfies ``ClipboardBridge``; tests and headless hosts use
``MemoryClipboard``. ``SafeClipboard`` wraps any bridge so that a failing
backend degrades to "nothing on the clipboard" instead of breaking an edit.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ClipboardBridge(Protocol):
    def get(self) -> str | None:
        """Return the clipboard text, or ``None`` when it is empty."""
        ...

    def set(self, value: str) -> None:
        """Replace the clipboard text."""
        ...


class MemoryClipboard:
    """Per-instance in-memory clipboard."""

    def __init__(self, value: str | None = None) -> None:
        self._value = value

    def get(self) -> str | None:
        return self._value

    def set(self, value: str) -> None:
        self._value = value


class SafeClipboard:
    """Guards calls into a host clipboard."""

    def __init__(self, bridge: ClipboardBridge) -> None:
        self._bridge = bridge

    def get(self) -> str | None:
        try:
            value = self._bridge.get()
        except Exception:
            logger.exception("Clipboard read failed")
            return None
        return value if isinstance(value, str) else None

    def set(self, value: str) -> bool:
        try:
            self._bridge.set(value)
        except Exception:
            logger.exception("Clipboard write failed")
            return False
        return True
