"""
Tests for calculation history ordering, persistence and search
"""
import sqlite3
from datetime import datetime

import pytest

from conftest import MemoryStore, StepClock
from database import Database
from errors import HistoryEntryNotFound
from history_manager import HistoryManager


class FailingStore(MemoryStore):
    def save_history_blob(self, data):
        raise sqlite3.OperationalError("disk I/O error")


class BrokenLoadStore(MemoryStore):
    def load_history_blob(self):
        raise sqlite3.OperationalError("unable to open database file")


class TestOrdering:
    def test_newest_first(self, history):
        e1 = history.record("1 + 1", 2)
        e2 = history.record("2 + 2", 4)
        assert [e.id for e in history.entries] == [e2.id, e1.id]

    def test_pinned_entries_come_first(self, history):
        e1 = history.record("1 + 1", 2)
        e2 = history.record("2 + 2", 4)
        history.toggle_pin(e1.id)
        assert [e.id for e in history.entries] == [e1.id, e2.id]

    def test_unpin_restores_timestamp_order(self, history):
        e1 = history.record("1 + 1", 2)
        e2 = history.record("2 + 2", 4)
        history.toggle_pin(e1.id)
        history.toggle_pin(e1.id)
        assert [e.id for e in history.entries] == [e2.id, e1.id]

    def test_pinned_partition_is_newest_first(self, history):
        e1 = history.record("1", 1)
        e2 = history.record("2", 2)
        e3 = history.record("3", 3)
        history.toggle_pin(e1.id)
        history.toggle_pin(e2.id)
        assert [e.id for e in history.entries] == [e2.id, e1.id, e3.id]

    def test_equal_timestamps_keep_newest_first(self, store):
        same = datetime(2026, 1, 1)
        history = HistoryManager(store, clock=lambda: same)
        e1 = history.record("1", 1)
        e2 = history.record("2", 2)
        assert [e.id for e in history.entries] == [e2.id, e1.id]

    def test_entries_is_a_copy(self, history):
        history.record("1", 1)
        history.entries.clear()
        assert len(history.entries) == 1


class TestOperations:
    def test_record_defaults(self, history):
        entry = history.record("2 + 3", 5)
        assert entry.is_pinned is False
        assert entry.result == 5.0
        assert entry.timestamp == datetime(2026, 1, 1, 12, 0, 1)

    def test_reuse_returns_result_without_mutation(self, history):
        entry = history.record("6 × 7", 42)
        before = [e.to_record() for e in history.entries]
        assert history.reuse(entry.id) == 42
        assert [e.to_record() for e in history.entries] == before

    def test_unknown_ids(self, history):
        with pytest.raises(HistoryEntryNotFound):
            history.reuse("nope")
        with pytest.raises(HistoryEntryNotFound):
            history.toggle_pin("nope")

    def test_delete(self, history):
        e1 = history.record("1", 1)
        e2 = history.record("2", 2)
        assert history.delete([e1.id, "unknown"]) == 1
        assert [e.id for e in history.entries] == [e2.id]

    def test_clear(self, history, store):
        history.record("1", 1)
        history.clear()
        assert history.entries == []
        assert HistoryManager(store).entries == []

    def test_search(self, history):
        history.record("12 + 30", 42)
        history.record("2 × 2", 4)
        history.record("1 ÷ 3", 1 / 3)
        assert [e.expression_text for e in history.search("42")] == ["12 + 30"]
        assert [e.expression_text for e in history.search("0.333")] == ["1 ÷ 3"]
        assert len(history.search("")) == 3

    def test_search_is_case_insensitive(self, history):
        history.record("1e+20 × 1", 1e20)
        assert len(history.search("1E+20")) == 1

    def test_cap_drops_oldest_unpinned(self, store, clock):
        history = HistoryManager(store, clock=clock, max_items=2)
        e1 = history.record("1", 1)
        history.toggle_pin(e1.id)
        e2 = history.record("2", 2)
        e3 = history.record("3", 3)
        e4 = history.record("4", 4)
        assert [e.id for e in history.entries] == [e1.id, e4.id, e3.id]
        assert e2.id not in {e.id for e in history.entries}


class TestPersistence:
    def test_every_mutation_is_saved(self, history, store):
        entry = history.record("1", 1)
        history.toggle_pin(entry.id)
        history.delete([entry.id])
        assert store.saves == 3

    def test_round_trip_through_blob(self, history, store):
        e1 = history.record("2 + 3", 5)
        history.record("1 ÷ 3", 1 / 3)
        history.toggle_pin(e1.id)

        reloaded = HistoryManager(MemoryStore(store.blob))
        assert [e.to_record() for e in reloaded.entries] == [e.to_record() for e in history.entries]

    def test_round_trip_through_sqlite(self, tmp_path):
        db = Database(str(tmp_path / "history.db"))
        history = HistoryManager(db, clock=StepClock())
        e1 = history.record("2 + 3", 5)
        history.record("10 ÷ 4", 2.5)
        history.toggle_pin(e1.id)

        reloaded = HistoryManager(Database(str(tmp_path / "history.db")))
        assert [e.to_record() for e in reloaded.entries] == [e.to_record() for e in history.entries]

    def test_save_failure_keeps_memory_state(self, clock):
        history = HistoryManager(FailingStore(), clock=clock)
        entry = history.record("1 + 1", 2)
        assert [e.id for e in history.entries] == [entry.id]
        history.toggle_pin(entry.id)
        assert history.entries[0].is_pinned is True

    def test_load_failure_starts_empty(self):
        assert HistoryManager(BrokenLoadStore()).entries == []

    def test_corrupt_blob_starts_empty(self):
        assert HistoryManager(MemoryStore(b"not json")).entries == []
        assert HistoryManager(MemoryStore(b'[{"id": "x"}]')).entries == []
