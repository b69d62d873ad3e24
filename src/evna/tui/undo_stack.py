"""Snapshot undo/redo with time-windowed coalescing."""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

S = TypeVar("S")


class UndoStack(Generic[S]):
    """Bounded stack of deep-cloned snapshots.

    When a push goes over ``limit`` the oldest snapshot is dropped. Popped
    snapshots are returned directly since they are already detached.
    """

    def __init__(self, limit: int | None = None) -> None:
        self._stack: list[S] = []
        self.limit = limit

    def push(self, state: S) -> None:
        """Push a deep clone of the given state onto the stack."""
        self._stack.append(copy.deepcopy(state))
        if self.limit is not None and len(self._stack) > self.limit:
            del self._stack[: len(self._stack) - self.limit]

    def pop(self) -> S | None:
        """Pop and return the most recent snapshot, or None if empty."""
        return self._stack.pop() if self._stack else None

    def peek(self) -> S | None:
        return self._stack[-1] if self._stack else None

    def clear(self) -> None:
        """Remove all snapshots."""
        self._stack.clear()

    @property
    def length(self) -> int:
        return len(self._stack)


@dataclass(frozen=True)
class UndoEntry:
    lines: tuple[str, ...]
    timestamp: float


class UndoEngine:
    """Undo and redo over full copies of the buffer lines.

    ``record`` is called with the lines as they were *before* an edit. A new
    checkpoint is only stored when more than ``interval_ms`` has passed since
    the previous one, so a burst of keystrokes undoes as one step. The first
    edit after construction or ``reset`` is always stored.

    The undo stack always holds a bottom entry for the initial document; it
    is never popped, which keeps ``undo`` a no-op once history is exhausted.
    Every recorded edit clears the redo stack.
    """

    def __init__(
        self,
        initial: Iterable[str] = ("",),
        *,
        interval_ms: float = 500,
        limit: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_ms = interval_ms
        self._clock = clock
        # One extra slot so the bottom entry does not count against the limit.
        self._undo: UndoStack[UndoEntry] = UndoStack(limit=max(1, limit) + 1)
        self._redo: UndoStack[UndoEntry] = UndoStack(limit=max(1, limit))
        self._last_save: float | None = None
        self.reset(initial)

    def reset(self, initial: Iterable[str] = ("",)) -> None:
        """Forget all history; *initial* becomes the new bottom entry."""
        self._undo.clear()
        self._redo.clear()
        self._undo.push(UndoEntry(tuple(initial), self._clock()))
        self._last_save = None

    def record(self, before: Iterable[str], *, force: bool = False) -> bool:
        """Note that an edit happened. Returns ``True`` if a checkpoint was stored."""
        self._redo.clear()
        now = self._clock()
        elapsed_ms = None if self._last_save is None else (now - self._last_save) * 1000
        if not force and elapsed_ms is not None and elapsed_ms <= self.interval_ms:
            return False
        self._undo.push(UndoEntry(tuple(before), now))
        self._last_save = now
        return True

    def undo(self, current: Iterable[str]) -> tuple[str, ...] | None:
        """Return the lines to restore, or ``None`` when nothing can be undone."""
        if self._undo.length <= 1:
            return None
        entry = self._undo.pop()
        if entry is None:
            return None
        self._redo.push(UndoEntry(tuple(current), self._clock()))
        self._last_save = None
        return entry.lines

    def redo(self, current: Iterable[str]) -> tuple[str, ...] | None:
        """Return the lines to restore, or ``None`` when nothing can be redone."""
        entry = self._redo.pop()
        if entry is None:
            return None
        self._undo.push(UndoEntry(tuple(current), self._clock()))
        self._last_save = None
        return entry.lines

    @property
    def can_undo(self) -> bool:
        return self._undo.length > 1

    @property
    def can_redo(self) -> bool:
        return self._redo.length > 0

    @property
    def undo_depth(self) -> int:
        """Number of checkpoints that can be undone."""
        return self._undo.length - 1

    @property
    def redo_depth(self) -> int:
        return self._redo.length
