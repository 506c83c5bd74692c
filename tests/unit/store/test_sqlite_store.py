"""Tests for focusflow/store/sqlite_store.py

The SQLite backend must behave like the hosted tables: equality filters,
single-field ordering, generated ids and echoed records.
"""

import sqlite3
from unittest.mock import patch

import pytest

from focusflow.store import BRAIN_DUMPS, STREAKS, TASK_BREAKDOWNS, StoreError


def _dump(content: str, created_at: str, user_id: str = "u1") -> dict:
    return {"content": content, "createdAt": created_at, "userId": user_id}


class TestInsertAndSelect:
    """Tests for insert and select."""

    def test_insert_returns_record_with_id(self, store):
        row = store.insert(BRAIN_DUMPS, _dump("hello", "2026-03-10T09:00:00"))

        assert isinstance(row["id"], int)
        assert row["content"] == "hello"
        assert row["userId"] == "u1"

    def test_insert_ignores_supplied_id(self, store):
        row = store.insert(BRAIN_DUMPS, {"id": 999, **_dump("x", "2026-03-10T09:00:00")})

        assert row["id"] != 999

    def test_select_filters_by_equality(self, store):
        store.insert(BRAIN_DUMPS, _dump("mine", "2026-03-10T09:00:00", "u1"))
        store.insert(BRAIN_DUMPS, _dump("theirs", "2026-03-10T09:00:00", "u2"))

        rows = store.select(BRAIN_DUMPS, {"userId": "u1"})

        assert [r["content"] for r in rows] == ["mine"]

    def test_select_orders_descending(self, store):
        store.insert(BRAIN_DUMPS, _dump("a", "2026-03-10T09:00:00"))
        store.insert(BRAIN_DUMPS, _dump("b", "2026-03-12T09:00:00"))
        store.insert(BRAIN_DUMPS, _dump("c", "2026-03-11T09:00:00"))

        rows = store.select(BRAIN_DUMPS, {"userId": "u1"}, order_by="createdAt", ascending=False)

        assert [r["content"] for r in rows] == ["b", "c", "a"]

    def test_booleans_round_trip(self, store):
        row = store.insert(
            TASK_BREAKDOWNS, {"taskId": 1, "stepTitle": "s", "stepDescription": None, "isCompleted": False}
        )

        assert row["isCompleted"] is False
        updated = store.update(TASK_BREAKDOWNS, {"isCompleted": True}, {"id": row["id"]})
        assert updated[0]["isCompleted"] is True

    def test_none_filter_matches_null(self, store):
        store.insert(TASK_BREAKDOWNS, {"taskId": 1, "stepTitle": "a", "stepDescription": None})
        store.insert(TASK_BREAKDOWNS, {"taskId": 1, "stepTitle": "b", "stepDescription": "d"})

        rows = store.select(TASK_BREAKDOWNS, {"stepDescription": None})

        assert [r["stepTitle"] for r in rows] == ["a"]


class TestUpdateAndDelete:
    """Tests for update and delete."""

    def test_update_returns_updated_rows(self, store):
        row = store.insert(BRAIN_DUMPS, _dump("old", "2026-03-10T09:00:00"))

        rows = store.update(BRAIN_DUMPS, {"content": "new"}, {"id": row["id"]})

        assert rows == [{**row, "content": "new"}]

    def test_update_no_match_returns_empty(self, store):
        assert store.update(BRAIN_DUMPS, {"content": "x"}, {"id": 42}) == []

    def test_update_on_filtered_column(self, store):
        """Rows are found by id even when the filtered column changes."""
        store.insert(BRAIN_DUMPS, _dump("x", "2026-03-10T09:00:00", "u1"))

        rows = store.update(BRAIN_DUMPS, {"userId": "u2"}, {"userId": "u1"})

        assert rows[0]["userId"] == "u2"

    def test_update_and_delete_require_filters(self, store):
        with pytest.raises(StoreError):
            store.update(BRAIN_DUMPS, {"content": "x"}, {})
        with pytest.raises(StoreError):
            store.delete(BRAIN_DUMPS, {})

    def test_delete_matching(self, store):
        keep = store.insert(BRAIN_DUMPS, _dump("keep", "2026-03-10T09:00:00"))
        drop = store.insert(BRAIN_DUMPS, _dump("drop", "2026-03-10T09:00:00"))

        store.delete(BRAIN_DUMPS, {"id": drop["id"]})

        assert [r["id"] for r in store.select(BRAIN_DUMPS)] == [keep["id"]]


class TestErrors:
    """Tests for error mapping."""

    def test_unknown_table(self, store):
        with pytest.raises(StoreError, match="Unknown table"):
            store.select("widgets")

    def test_unknown_field(self, store):
        with pytest.raises(StoreError, match="Unknown field"):
            store.select(BRAIN_DUMPS, {"owner": "u1"})

    def test_sqlite_errors_become_store_errors(self, store):
        with pytest.raises(StoreError) as exc_info:
            store.insert(STREAKS, {"count": 1, "userId": "u1"})  # lastCompletedAt is NOT NULL

        assert exc_info.value.table == STREAKS
        assert exc_info.value.operation == "insert"

    def test_connection_failure(self, store):
        with patch.object(store, "get_connection", side_effect=sqlite3.OperationalError("locked")):
            with pytest.raises(StoreError, match="locked"):
                store.select(BRAIN_DUMPS)

    def test_health_check(self, store):
        assert store.health_check() is True
