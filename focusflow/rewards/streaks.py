"""
Tool: Streak Engine
Purpose: Count consecutive days with at least one completed task

Rules for a new completion at `now` against the stored streak:
- no streak yet: start at 1
- same calendar day as the last completion: +1 (every completion counts)
- the next day: +1
- anything else: back to 1

"The next day" is decided by the configured adjacency mode:
- day_of_month: today's day-of-month minus the last one equals 1, month and
  year ignored (so the 31st -> the 1st resets, and the 5th of one month ->
  the 6th of a later month continues)
- calendar: the dates are exactly one calendar day apart

A streak is never shortened by reopening a task.

Usage:
    python -m focusflow.rewards.streaks --user single-user
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

from focusflow.logging_config import get_logger
from focusflow.store import STREAKS, StoreError, TableStore
from focusflow.tasks import ERROR_STORE
from focusflow.tasks.models import Streak, align_datetimes

logger = get_logger(__name__)

ADJACENCY_MODES = ("day_of_month", "calendar")
DEFAULT_MILESTONES = (7, 30, 100)
DEFAULT_ACTIVE_WINDOW = timedelta(hours=24)


def _same_day(last: datetime, now: datetime) -> bool:
    return (last.year, last.month, last.day) == (now.year, now.month, now.day)


def is_consecutive(last: datetime, now: datetime, adjacency: str = "day_of_month") -> bool:
    """Whether a completion at `now` continues a streak last extended at `last`."""
    if adjacency not in ADJACENCY_MODES:
        raise ValueError(f"Invalid adjacency mode. Must be one of: {ADJACENCY_MODES}")

    last, now = align_datetimes(last, now)
    if _same_day(last, now):
        return True
    if adjacency == "calendar":
        return (now.date() - last.date()).days == 1
    return now.day - last.day == 1


def record_completion(
    existing_streak: Optional[Streak],
    now: datetime,
    user_id: str,
    adjacency: str = "day_of_month",
) -> Streak:
    """Compute the streak after a completion at `now`. Pure; nothing is stored."""
    if existing_streak is None:
        return Streak(count=1, last_completed_at=now, user_id=user_id)

    if is_consecutive(existing_streak.last_completed_at, now, adjacency):
        count = existing_streak.count + 1
    else:
        count = 1

    return existing_streak.model_copy(update={"count": count, "last_completed_at": now})


def is_streak_active(
    streak: Optional[Streak],
    now: datetime | None = None,
    window: timedelta = DEFAULT_ACTIVE_WINDOW,
) -> bool:
    """A streak is live while the last completion is less than a day old."""
    if streak is None:
        return False
    last, current = align_datetimes(streak.last_completed_at, now or datetime.now())
    return current - last < window


def next_milestone(count: int, milestones: Sequence[int] = DEFAULT_MILESTONES) -> int:
    """First milestone above the count; the largest once all are passed."""
    for milestone in milestones:
        if count < milestone:
            return milestone
    return milestones[-1]


def milestone_progress(count: int, milestones: Sequence[int] = DEFAULT_MILESTONES) -> dict[str, Any]:
    target = next_milestone(count, milestones)
    return {
        "count": count,
        "next_milestone": target,
        "percentage": round(count / target * 100),
    }


# =============================================================================
# Store operations
# =============================================================================


def get_streak(store: TableStore, user_id: str) -> Optional[Streak]:
    """The user's streak record, or None before the first completion.

    Raises:
        StoreError: the store call failed
    """
    rows = store.select(STREAKS, {"userId": user_id})
    if not rows:
        return None
    if len(rows) > 1:
        logger.warning("multiple_streaks_found", user_id=user_id, count=len(rows))
    return Streak.model_validate(rows[0])


def update_streak(
    store: TableStore,
    user_id: str,
    now: datetime | None = None,
    adjacency: str | None = None,
) -> Streak:
    """Record a completion: read the singleton, compute, insert or update.

    Raises:
        StoreError: a store call failed
    """
    if adjacency is None:
        from focusflow.config_models import get_config

        adjacency = get_config().streaks.adjacency

    now = now or datetime.now()
    existing = get_streak(store, user_id)
    streak = record_completion(existing, now, user_id, adjacency)
    values = streak.to_record(exclude={"id"})

    if existing is None:
        row = store.insert(STREAKS, values)
    else:
        rows = store.update(STREAKS, values, {"id": existing.id})
        if not rows:
            raise StoreError("Streak disappeared during update", table=STREAKS, operation="update")
        row = rows[0]

    saved = Streak.model_validate(row)
    logger.info("streak_updated", user_id=user_id, count=saved.count, reset=saved.count == 1)
    return saved


def get_streak_status(store: TableStore, user_id: str, now: datetime | None = None) -> dict[str, Any]:
    """Streak plus active flag and milestone progress, as a result dict."""
    from focusflow.config_models import get_config

    config = get_config().streaks
    now = now or datetime.now()

    try:
        streak = get_streak(store, user_id)
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    count = streak.count if streak else 0
    return {
        "success": True,
        "data": {
            "streak": streak,
            "count": count,
            "is_active": is_streak_active(
                streak, now, timedelta(hours=config.active_window_hours)
            ),
            "milestone": milestone_progress(count, config.milestones) if count > 0 else None,
        },
    }


def main():
    from pydantic_core import to_jsonable_python

    from focusflow.store import get_store

    parser = argparse.ArgumentParser(description="Streak Engine - show the current streak")
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument(
        "--record", action="store_true", help="Record a completion now before showing"
    )
    args = parser.parse_args()

    store = get_store()
    if args.record:
        try:
            update_streak(store, args.user)
        except StoreError as e:
            print(json.dumps({"success": False, "error": str(e), "code": ERROR_STORE}))
            sys.exit(1)

    result = get_streak_status(store, args.user)
    print(json.dumps(result, indent=2, default=to_jsonable_python))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
