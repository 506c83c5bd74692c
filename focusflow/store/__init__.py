"""Table store access

One interface, two backends:
    sqlite_store.py: local SQLite file (default)
    remote_store.py: hosted-table REST API over httpx

Usage:
    from focusflow.store import get_store
    store = get_store()
    store.select("tasks", {"userId": "single-user"}, order_by="createdAt", ascending=False)
"""

from __future__ import annotations

import logging

from focusflow import PROJECT_ROOT
from focusflow.store.base import (
    ACHIEVEMENTS,
    BRAIN_DUMPS,
    STREAKS,
    TABLE_COLUMNS,
    TASK_BREAKDOWNS,
    TASKS,
    Record,
    StoreError,
    TableStore,
)

logger = logging.getLogger(__name__)

_store: TableStore | None = None


def create_store(config=None) -> TableStore:
    """Build the backend named in the store configuration."""
    if config is None:
        from focusflow.config_models import get_config

        config = get_config().store

    if config.backend == "remote":
        from focusflow.store.remote_store import RemoteTableStore

        if not config.api_base:
            raise ValueError("store.api_base must be set when store.backend is 'remote'")
        return RemoteTableStore.from_env(
            api_base=config.api_base,
            api_key_env=config.api_key_env,
            timeout=config.timeout_seconds,
        )

    from focusflow.store.sqlite_store import SQLiteTableStore

    return SQLiteTableStore(PROJECT_ROOT / config.sqlite_path)


def get_store() -> TableStore:
    """Process-wide store instance."""
    global _store
    if _store is None:
        _store = create_store()
        logger.info(f"Table store initialized ({_store.name})")
    return _store


def reset_store() -> None:
    """Close and forget the process-wide store."""
    global _store
    if _store is not None:
        _store.close()
    _store = None


__all__ = [
    "ACHIEVEMENTS",
    "BRAIN_DUMPS",
    "STREAKS",
    "TABLE_COLUMNS",
    "TASK_BREAKDOWNS",
    "TASKS",
    "Record",
    "StoreError",
    "TableStore",
    "create_store",
    "get_store",
    "reset_store",
]
