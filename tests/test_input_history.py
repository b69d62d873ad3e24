"""Tests for evna.tui.input_history.HistoryNavigator."""

from __future__ import annotations

import logging

import pytest

from evna.tui.input_history import NOT_BROWSING, HistoryNavigator


class TestAdd:
    """Entries are trimmed, deduplicated against the newest, and capped."""

    def test_add_trims(self) -> None:
        nav = HistoryNavigator()
        assert nav.add("  hello \n")
        assert nav.entries == ("hello",)

    def test_blank_is_ignored(self) -> None:
        nav = HistoryNavigator()
        assert nav.add("   ") is False
        assert nav.entries == ()

    def test_consecutive_duplicate_is_ignored(self) -> None:
        nav = HistoryNavigator()
        nav.add("a")
        assert nav.add("a") is False
        assert nav.entries == ("a",)

    def test_non_consecutive_duplicate_is_kept(self) -> None:
        nav = HistoryNavigator()
        for value in ("a", "b", "a"):
            nav.add(value)
        assert nav.entries == ("a", "b", "a")

    def test_capacity_evicts_oldest(self) -> None:
        nav = HistoryNavigator(capacity=2)
        for value in ("a", "b", "c"):
            nav.add(value)
        assert nav.entries == ("b", "c")


class TestLoad:
    """Loaded data is validated at the boundary."""

    def test_drops_malformed_entries(self, caplog: pytest.LogCaptureFixture) -> None:
        nav = HistoryNavigator()
        with caplog.at_level(logging.DEBUG, logger="evna.tui.input_history"):
            kept = nav.load(["ok", 3, None, "  ", "fine"])
        assert kept == 2
        assert nav.entries == ("ok", "fine")
        assert "Dropped 3 history entries" in caplog.text

    def test_constructor_loads_entries(self) -> None:
        assert HistoryNavigator(entries=["a", "b"]).entries == ("a", "b")


class TestNavigate:
    """Up/down recall with a saved in-progress buffer."""

    def test_empty_history_is_noop(self) -> None:
        nav = HistoryNavigator()
        assert nav.navigate(-1, "draft") is None
        assert nav.is_browsing is False

    def test_walks_older_then_restores_draft(self) -> None:
        nav = HistoryNavigator(entries=["first", "second"])
        assert nav.navigate(-1, "draft") == "second"
        assert nav.navigate(-1, "second") == "first"
        assert nav.navigate(1, "first") == "second"
        assert nav.navigate(1, "second") == "draft"
        assert nav.cursor_index == NOT_BROWSING
        assert nav.temp_entry == ""

    def test_clamped_at_oldest(self) -> None:
        nav = HistoryNavigator(entries=["only"])
        nav.navigate(-1, "")
        assert nav.navigate(-1, "only") is None
        assert nav.cursor_index == 0

    def test_newer_while_not_browsing_is_noop(self) -> None:
        nav = HistoryNavigator(entries=["a"])
        assert nav.navigate(1, "draft") is None

    def test_draft_snapshot_taken_once(self) -> None:
        nav = HistoryNavigator(entries=["a", "b"])
        nav.navigate(-1, "draft")
        nav.navigate(-1, "edited b")
        assert nav.temp_entry == "draft"

    def test_stop_browsing_resets(self) -> None:
        nav = HistoryNavigator(entries=["a"])
        nav.navigate(-1, "draft")
        nav.stop_browsing()
        assert nav.is_browsing is False
        assert nav.temp_entry == ""
