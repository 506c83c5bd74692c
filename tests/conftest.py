"""Shared test fixtures for FocusFlow tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A table store on that database
- Standard test user/task data
- Config reset between tests

Usage:
    def test_something(store, mock_user_id):
        # store is a SQLiteTableStore on a throwaway file
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest

from focusflow.config_models import get_config
from focusflow.store.sqlite_store import SQLiteTableStore


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_DIR = PROJECT_ROOT / "focusflow"


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def store(temp_db: Path) -> Generator[SQLiteTableStore, None, None]:
    """SQLite table store on the temporary database."""
    table_store = SQLiteTableStore(temp_db)

    yield table_store

    table_store.close()


@pytest.fixture(autouse=True)
def fresh_config() -> Generator[None, None, None]:
    """Drop the cached config so monkeypatched settings never leak."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


# ─────────────────────────────────────────────────────────────────────────────
# User Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_user_id() -> str:
    """Standard test user ID."""
    return "test_user_123"


@pytest.fixture
def other_user_id() -> str:
    """A second user, for ownership checks."""
    return "someone_else_456"


# ─────────────────────────────────────────────────────────────────────────────
# Task Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_task() -> dict:
    """Sample task fields for testing.

    Returns:
        dict with task fields (snake_case, as create_task accepts them)
    """
    return {
        "title": "File taxes",
        "description": "Complete tax filing for this year",
        "priority": "important",
        "energy_level": 4,
        "emotional_importance": 80,
        "estimated_time": 120,
        "context": "finances",
    }


@pytest.fixture
def t0() -> datetime:
    """A fixed mid-month timestamp."""
    return datetime(2026, 3, 10, 9, 0, 0)
