"""Persistence collaborators for submitted input history.

The input calls ``load`` once at construction and ``save`` after each
submit. Both calls are guarded by the caller; a store may raise freely.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class HistoryStore(Protocol):
    def load(self) -> list[object]:
        """Return previously saved entries, oldest first."""
        ...

    def save(self, entries: Sequence[str]) -> None:
        """Persist the full entry list, oldest first."""
        ...


class JsonHistoryStore:
    """Stores history as a JSON document ``{"entries": [...]}``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[object]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("entries", [])
        if not isinstance(data, list):
            return []
        return list(data)

    def save(self, entries: Sequence[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"entries": list(entries)}, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )


class MemoryHistoryStore:
    """In-memory store, mainly for tests and ephemeral sessions."""

    def __init__(self, entries: Sequence[object] | None = None) -> None:
        self.entries: list[object] = list(entries or [])
        self.save_count = 0

    def load(self) -> list[object]:
        return list(self.entries)

    def save(self, entries: Sequence[str]) -> None:
        self.entries = list(entries)
        self.save_count += 1
