"""Shell-style recall of previously submitted input."""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger(__name__)

NOT_BROWSING = -1


class HistoryNavigator:
    """Capped list of submitted values with up/down recall.

    Entries are stored oldest first. ``cursor_index`` counts back from the
    most recent entry (0 is the newest) and is ``-1`` while not browsing.
    The in-progress text is saved in ``temp_entry`` when browsing starts so
    it can be restored when the user walks back past the newest entry.
    """

    def __init__(self, capacity: int = 100, entries: Iterable[object] | None = None) -> None:
        self.capacity = max(1, capacity)
        self._entries: list[str] = []
        self.cursor_index: int = NOT_BROWSING
        self.temp_entry: str = ""
        if entries is not None:
            self.load(entries)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def is_browsing(self) -> bool:
        return self.cursor_index != NOT_BROWSING

    def add(self, value: str) -> bool:
        """Store *value* unless it is blank or repeats the most recent entry."""
        value = value.strip()
        if not value:
            return False
        if self._entries and self._entries[-1] == value:
            return False
        self._entries.append(value)
        if len(self._entries) > self.capacity:
            del self._entries[: len(self._entries) - self.capacity]
        return True

    def load(self, entries: Iterable[object]) -> int:
        """Merge entries from an external source, dropping anything malformed.

        Non-string and blank entries are skipped; the rest go through the
        same dedup and capacity rules as ``add``. Returns the number kept.
        """
        kept = 0
        dropped = 0
        for entry in entries:
            if not isinstance(entry, str):
                dropped += 1
                continue
            if self.add(entry):
                kept += 1
            else:
                dropped += 1
        if dropped:
            logger.debug("Dropped %d history entries while loading", dropped)
        return kept

    def stop_browsing(self) -> None:
        self.cursor_index = NOT_BROWSING
        self.temp_entry = ""

    def navigate(self, direction: int, current: str) -> str | None:
        """Step through history and return the text to show.

        ``direction`` is ``-1`` for older and ``+1`` for newer. Returns
        ``None`` when the step does not change anything (no entries, or
        already at either end).
        """
        if not self._entries or direction == 0:
            return None

        step = -1 if direction > 0 else 1
        new_index = max(NOT_BROWSING, min(self.cursor_index + step, len(self._entries) - 1))
        if new_index == self.cursor_index:
            return None

        if self.cursor_index == NOT_BROWSING:
            self.temp_entry = current
        self.cursor_index = new_index

        if new_index == NOT_BROWSING:
            restored = self.temp_entry
            self.temp_entry = ""
            return restored
        return self._entries[len(self._entries) - 1 - new_index]
