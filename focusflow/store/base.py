"""
Table Store Base Classes

Abstract interface for the hosted-table data API. Every backend (local
SQLite, remote REST) implements the same four operations over named tables:

- select: equality filters plus an optional single-field ordering
- insert: returns the stored record including its generated id
- update: partial values applied to every record matching the filters
- delete: removes every record matching the filters

Records are plain dicts keyed by the table's camelCase field names.
Validation into typed records happens one layer up (focusflow.tasks.models).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

# Table names as exposed by the hosted API
TASKS = "tasks"
TASK_BREAKDOWNS = "taskBreakdowns"
BRAIN_DUMPS = "brainDumps"
ACHIEVEMENTS = "achievements"
STREAKS = "streaks"

# Known columns per table (id is generated by the store)
TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    TASKS: (
        "id",
        "title",
        "description",
        "priority",
        "energyLevel",
        "emotionalImportance",
        "estimatedTime",
        "actualTime",
        "context",
        "status",
        "dueDate",
        "createdAt",
        "completedAt",
        "userId",
    ),
    TASK_BREAKDOWNS: (
        "id",
        "taskId",
        "stepTitle",
        "stepDescription",
        "isCompleted",
    ),
    BRAIN_DUMPS: ("id", "content", "createdAt", "userId"),
    ACHIEVEMENTS: ("id", "title", "description", "createdAt", "userId"),
    STREAKS: ("id", "count", "lastCompletedAt", "userId"),
}

Record = dict[str, Any]


class StoreError(Exception):
    """A store call failed (network, HTTP status, or database error)."""

    def __init__(self, message: str, table: str | None = None, operation: str | None = None):
        super().__init__(message)
        self.table = table
        self.operation = operation


def check_table(table: str) -> tuple[str, ...]:
    """Return the column names for a table, rejecting unknown tables."""
    try:
        return TABLE_COLUMNS[table]
    except KeyError:
        raise StoreError(f"Unknown table: {table}", table=table) from None


def check_fields(table: str, fields: Any) -> None:
    """Reject field names the table does not have."""
    columns = check_table(table)
    unknown = [f for f in fields if f not in columns]
    if unknown:
        raise StoreError(f"Unknown field(s) for {table}: {', '.join(unknown)}", table=table)


class TableStore(ABC):
    """Interface every table backend implements."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier used in logs and health output."""
        pass

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
    ) -> list[Record]:
        """Return all records matching every equality filter."""
        pass

    @abstractmethod
    def insert(self, table: str, record: Record) -> Record:
        """Insert a record and return it as stored (with its id)."""
        pass

    @abstractmethod
    def update(self, table: str, values: Record, filters: dict[str, Any]) -> list[Record]:
        """Apply values to matching records and return them as stored."""
        pass

    @abstractmethod
    def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete matching records."""
        pass

    def health_check(self) -> bool:
        """Cheap connectivity probe; raises StoreError on failure."""
        self.select(STREAKS, {"userId": "__health__"})
        return True

    def close(self) -> None:
        """Release backend resources."""
        return None
