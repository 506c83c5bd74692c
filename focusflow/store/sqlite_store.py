"""
SQLite Table Store

Local backend for the table store interface. Mirrors the hosted tables
one-to-one so the rest of the application cannot tell the two apart.
Used for development and as the default backend.

Dependencies:
    - sqlite3 (stdlib)
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from focusflow import PROJECT_ROOT
from focusflow.store.base import (
    ACHIEVEMENTS,
    BRAIN_DUMPS,
    STREAKS,
    TASK_BREAKDOWNS,
    TASKS,
    Record,
    StoreError,
    TableStore,
    check_fields,
    check_table,
)

logger = logging.getLogger(__name__)

DB_PATH = PROJECT_ROOT / "data" / "focusflow.db"

# Columns stored as INTEGER 0/1 and returned as bool
BOOLEAN_COLUMNS = {"isCompleted"}


def _create_tables(conn: sqlite3.Connection) -> None:
    cursor = conn.cursor()

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS {TASKS} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            priority TEXT NOT NULL,
            energyLevel INTEGER NOT NULL,
            emotionalImportance INTEGER NOT NULL,
            estimatedTime INTEGER,
            actualTime INTEGER,
            context TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'active',
            dueDate TEXT,
            createdAt TEXT NOT NULL,
            completedAt TEXT,
            userId TEXT NOT NULL
        )
    """)

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS {TASK_BREAKDOWNS} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            taskId INTEGER NOT NULL,
            stepTitle TEXT NOT NULL,
            stepDescription TEXT,
            isCompleted INTEGER NOT NULL DEFAULT 0
        )
    """)

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS {BRAIN_DUMPS} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            content TEXT NOT NULL,
            createdAt TEXT NOT NULL,
            userId TEXT NOT NULL
        )
    """)

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS {ACHIEVEMENTS} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            createdAt TEXT NOT NULL,
            userId TEXT NOT NULL
        )
    """)

    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS {STREAKS} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            count INTEGER NOT NULL DEFAULT 0,
            lastCompletedAt TEXT NOT NULL,
            userId TEXT NOT NULL
        )
    """)

    # Indexes for the user-scoped reads every page does
    cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_tasks_user ON {TASKS}(userId)")
    cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_tasks_created ON {TASKS}(createdAt)")
    cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_steps_task ON {TASK_BREAKDOWNS}(taskId)")
    cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_dumps_user ON {BRAIN_DUMPS}(userId)")
    cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_achievements_user ON {ACHIEVEMENTS}(userId)")
    cursor.execute(f"CREATE UNIQUE INDEX IF NOT EXISTS idx_streaks_user ON {STREAKS}(userId)")

    conn.commit()


def _where(filters: dict[str, Any]) -> tuple[str, list[Any]]:
    if not filters:
        return "1=1", []
    conditions = []
    params: list[Any] = []
    for field, value in filters.items():
        if value is None:
            conditions.append(f"{field} IS NULL")
        else:
            conditions.append(f"{field} = ?")
            params.append(value)
    return " AND ".join(conditions), params


def _to_record(row: sqlite3.Row) -> Record:
    record = dict(row)
    for column in BOOLEAN_COLUMNS & record.keys():
        record[column] = bool(record[column])
    return record


class SQLiteTableStore(TableStore):
    """Table store backed by a single SQLite file."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path else DB_PATH
        self._initialized = False

    @property
    def name(self) -> str:
        return "sqlite"

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        if not self._initialized:
            _create_tables(conn)
            self._initialized = True
        return conn

    def _run(self, table: str, operation: str, fn):
        conn = None
        try:
            conn = self.get_connection()
            return fn(conn)
        except sqlite3.Error as e:
            logger.error(f"SQLite {operation} on {table} failed: {e}")
            raise StoreError(f"Database error: {e}", table=table, operation=operation) from e
        finally:
            if conn is not None:
                conn.close()

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
    ) -> list[Record]:
        filters = filters or {}
        check_fields(table, filters)
        if order_by is not None:
            check_fields(table, [order_by])

        where_clause, params = _where(filters)
        query = f"SELECT * FROM {table} WHERE {where_clause}"
        if order_by:
            # id breaks ties so equal timestamps keep insertion order
            direction = "ASC" if ascending else "DESC"
            query += f" ORDER BY {order_by} {direction}, id {direction}"
        else:
            query += " ORDER BY id ASC"

        def fn(conn: sqlite3.Connection) -> list[Record]:
            cursor = conn.execute(query, params)
            return [_to_record(row) for row in cursor.fetchall()]

        return self._run(table, "select", fn)

    def insert(self, table: str, record: Record) -> Record:
        columns = check_table(table)
        values = {k: v for k, v in record.items() if k != "id"}
        check_fields(table, values)
        if not values:
            raise StoreError(f"Nothing to insert into {table}", table=table, operation="insert")

        names = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)

        def fn(conn: sqlite3.Connection) -> Record:
            cursor = conn.execute(
                f"INSERT INTO {table} ({names}) VALUES ({placeholders})",
                list(values.values()),
            )
            conn.commit()
            row = conn.execute(
                f"SELECT {', '.join(columns)} FROM {table} WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
            return _to_record(row)

        return self._run(table, "insert", fn)

    def update(self, table: str, values: Record, filters: dict[str, Any]) -> list[Record]:
        if not filters:
            raise StoreError("Refusing to update without filters", table=table, operation="update")
        values = {k: v for k, v in values.items() if k != "id"}
        check_fields(table, values)
        check_fields(table, filters)
        if not values:
            raise StoreError("No fields to update", table=table, operation="update")

        where_clause, params = _where(filters)
        assignments = ", ".join(f"{k} = ?" for k in values)

        def fn(conn: sqlite3.Connection) -> list[Record]:
            # Resolve ids first: the update may change a filtered column
            ids = [
                row["id"]
                for row in conn.execute(f"SELECT id FROM {table} WHERE {where_clause}", params)
            ]
            if not ids:
                return []
            id_marks = ", ".join("?" for _ in ids)
            conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id IN ({id_marks})",
                list(values.values()) + ids,
            )
            conn.commit()
            cursor = conn.execute(
                f"SELECT * FROM {table} WHERE id IN ({id_marks}) ORDER BY id ASC", ids
            )
            return [_to_record(row) for row in cursor.fetchall()]

        return self._run(table, "update", fn)

    def delete(self, table: str, filters: dict[str, Any]) -> None:
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table, operation="delete")
        check_fields(table, filters)
        where_clause, params = _where(filters)

        def fn(conn: sqlite3.Connection) -> None:
            conn.execute(f"DELETE FROM {table} WHERE {where_clause}", params)
            conn.commit()

        self._run(table, "delete", fn)
