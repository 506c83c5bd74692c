"""
Tool: Achievement Recorder
Purpose: Append-only log of wins, plus the stats shown on the achievements page

An achievement is written once per task moving from active to completed.
Reopening a task leaves its achievement in place; completing it again
writes a second one.

Usage:
    python -m focusflow.rewards.achievements --action list --user single-user
    python -m focusflow.rewards.achievements --action stats --user single-user
    python -m focusflow.rewards.achievements --action delete --user single-user --id 12
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from typing import Any, Iterable

from focusflow.store import ACHIEVEMENTS, TASKS, StoreError, TableStore
from focusflow.tasks import ERROR_NOT_FOUND, ERROR_STORE
from focusflow.tasks.models import Achievement, TaskStatus
from focusflow.rewards.streaks import get_streak, is_streak_active, milestone_progress

logger = logging.getLogger(__name__)


def build_achievement(title: str, description: str, user_id: str, now: datetime | None = None) -> Achievement:
    """Construct an achievement record. Pure."""
    return Achievement(
        title=title,
        description=description,
        created_at=now or datetime.now(),
        user_id=user_id,
    )


def record_achievement(
    store: TableStore,
    title: str,
    description: str,
    user_id: str,
    now: datetime | None = None,
) -> Achievement:
    """Append an achievement to the store.

    Raises:
        StoreError: the insert failed
    """
    achievement = build_achievement(title, description, user_id, now)
    row = store.insert(ACHIEVEMENTS, achievement.to_record(exclude={"id"}))
    saved = Achievement.model_validate(row)
    logger.info(f"Achievement {saved.id} recorded for {user_id}: {title}")
    return saved


def completion_achievement_text(task_title: str) -> tuple[str, str]:
    """Title and description for a completed-task achievement."""
    from focusflow.config_models import get_config

    config = get_config().achievements
    return config.completion_title, config.completion_description.format(title=task_title)


def group_by_date(achievements: Iterable[Achievement]) -> dict[str, list[Achievement]]:
    """Group by YYYY-MM-DD of createdAt, keeping input order within and across days."""
    groups: dict[str, list[Achievement]] = {}
    for achievement in achievements:
        key = achievement.created_at.strftime("%Y-%m-%d")
        groups.setdefault(key, []).append(achievement)
    return groups


def list_achievements(store: TableStore, user_id: str) -> dict[str, Any]:
    """
    List a user's achievements, newest first, with a per-day timeline.

    Args:
        store: Table store
        user_id: Owner

    Returns:
        dict with achievements and timeline
    """
    try:
        rows = store.select(ACHIEVEMENTS, {"userId": user_id}, order_by="createdAt", ascending=False)
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    achievements = [Achievement.model_validate(row) for row in rows]
    return {
        "success": True,
        "data": {
            "achievements": achievements,
            "timeline": group_by_date(achievements),
            "total": len(achievements),
        },
    }


def delete_achievement(store: TableStore, user_id: str, achievement_id: int) -> dict[str, Any]:
    """Remove one achievement owned by the user."""
    try:
        rows = store.select(ACHIEVEMENTS, {"id": achievement_id, "userId": user_id})
        if not rows:
            return {
                "success": False,
                "error": f"Achievement not found: {achievement_id}",
                "code": ERROR_NOT_FOUND,
            }
        store.delete(ACHIEVEMENTS, {"id": achievement_id, "userId": user_id})
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    return {"success": True, "message": f"Achievement {achievement_id} deleted"}


def get_stats(store: TableStore, user_id: str, now: datetime | None = None) -> dict[str, Any]:
    """
    Headline numbers for the achievements page.

    Returns:
        dict with tasks_completed, total_tasks, completion_rate (rounded
        percent), current_streak, streak_active, total_achievements and
        milestone progress
    """
    from focusflow.config_models import get_config

    config = get_config().streaks
    now = now or datetime.now()

    try:
        tasks = store.select(TASKS, {"userId": user_id})
        achievements = store.select(ACHIEVEMENTS, {"userId": user_id})
        streak = get_streak(store, user_id)
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    total = len(tasks)
    completed = sum(1 for t in tasks if t.get("status") == TaskStatus.COMPLETED.value)
    current_streak = streak.count if streak else 0

    return {
        "success": True,
        "data": {
            "tasks_completed": completed,
            "total_tasks": total,
            "completion_rate": round(completed / total * 100) if total > 0 else 0,
            "current_streak": current_streak,
            "streak_active": is_streak_active(
                streak, now, timedelta(hours=config.active_window_hours)
            ),
            "total_achievements": len(achievements),
            "milestone": milestone_progress(current_streak, config.milestones)
            if current_streak > 0
            else None,
        },
    }


def main():
    from pydantic_core import to_jsonable_python

    from focusflow.store import get_store

    parser = argparse.ArgumentParser(description="Achievement Recorder - list, stats, delete")
    parser.add_argument("--action", required=True, choices=["list", "stats", "delete"])
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--id", type=int, help="Achievement ID for delete")
    args = parser.parse_args()

    store = get_store()
    result = None

    if args.action == "list":
        result = list_achievements(store, args.user)
    elif args.action == "stats":
        result = get_stats(store, args.user)
    elif args.action == "delete":
        if args.id is None:
            print(json.dumps({"success": False, "error": "--id required for delete"}))
            sys.exit(1)
        result = delete_achievement(store, args.user, args.id)

    if result:
        print(json.dumps(result, indent=2, default=to_jsonable_python))
        if not result.get("success"):
            sys.exit(1)


if __name__ == "__main__":
    main()
