"""Tests for evna.tui.history_store."""

from __future__ import annotations

import json
from pathlib import Path

from evna.tui.history_store import HistoryStore, JsonHistoryStore, MemoryHistoryStore


class TestJsonHistoryStore:
    """JSON file persistence."""

    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        store = JsonHistoryStore(tmp_path / "history.json")
        assert store.load() == []

    def test_save_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "history.json"
        JsonHistoryStore(path).save(["a", "b"])
        assert json.loads(path.read_text(encoding="utf-8")) == {"entries": ["a", "b"]}

    def test_round_trip_keeps_unicode(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        store = JsonHistoryStore(path)
        store.save(["héllo", "日本"])
        assert store.load() == ["héllo", "日本"]
        assert "日本" in path.read_text(encoding="utf-8")

    def test_bare_list_document_is_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text('["x", 1]', encoding="utf-8")
        assert JsonHistoryStore(path).load() == ["x", 1]

    def test_unexpected_document_loads_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text('{"entries": "nope"}', encoding="utf-8")
        assert JsonHistoryStore(path).load() == []

    def test_satisfies_protocol(self, tmp_path: Path) -> None:
        assert isinstance(JsonHistoryStore(tmp_path / "h.json"), HistoryStore)


class TestMemoryHistoryStore:
    """In-memory store used by tests and ephemeral sessions."""

    def test_save_and_load(self) -> None:
        store = MemoryHistoryStore(["a"])
        store.save(["a", "b"])
        assert store.load() == ["a", "b"]
        assert store.save_count == 1

    def test_load_returns_copy(self) -> None:
        store = MemoryHistoryStore(["a"])
        store.load().append("b")
        assert store.load() == ["a"]
