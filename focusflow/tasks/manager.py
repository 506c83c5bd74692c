"""
Tool: Task Manager
Purpose: CRUD operations for tasks and the completion toggle

This provides task lifecycle management for ADHD-friendly task tracking:
- Create tasks with sensible defaults (medium priority, energy 3, 30 minutes)
- Edit, list and delete tasks (steps go with their task)
- Toggle completion, celebrating each win with an achievement and a streak
- Build the dashboard: energy-matched, urgent and quick-win suggestions

Every operation takes the store and the owning user explicitly. A task that
belongs to another user is reported as not found.

Usage:
    python -m focusflow.tasks.manager --action create --user single-user --title "Call the bank" --priority quick-win
    python -m focusflow.tasks.manager --action list --user single-user --status active
    python -m focusflow.tasks.manager --action get --user single-user --task-id 4
    python -m focusflow.tasks.manager --action toggle --user single-user --task-id 4
    python -m focusflow.tasks.manager --action dashboard --user single-user --energy 2

Output:
    JSON result with success status and data
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any, Optional

from pydantic import ValidationError

from focusflow.store import TASK_BREAKDOWNS, TASKS, StoreError, TableStore
from focusflow.tasks import (
    ENERGY_LEVELS,
    ERROR_INVALID,
    ERROR_NOT_FOUND,
    ERROR_STORE,
    PRIORITIES,
    TASK_STATUSES,
)
from focusflow.tasks.derive import derive_view, filter_options, progress_variant
from focusflow.tasks.models import Task, TaskCreate, TaskFilters, TaskStatus, TaskUpdate

logger = logging.getLogger(__name__)


def _invalid(e: ValidationError) -> dict[str, Any]:
    first = e.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "task"
    return {"success": False, "error": f"Invalid {field}: {first['msg']}", "code": ERROR_INVALID}


def _not_found() -> dict[str, Any]:
    return {"success": False, "error": "Task not found", "code": ERROR_NOT_FOUND}


def _store_failed(e: StoreError) -> dict[str, Any]:
    return {"success": False, "error": str(e), "code": ERROR_STORE}


def fetch_task(store: TableStore, user_id: str, task_id: int) -> Optional[Task]:
    """The task if it exists and belongs to the user.

    Raises:
        StoreError: the store call failed
    """
    rows = store.select(TASKS, {"id": task_id, "userId": user_id})
    if not rows:
        return None
    return Task.model_validate(rows[0])


def fetch_tasks(store: TableStore, user_id: str) -> list[Task]:
    """All of a user's tasks, newest first.

    Raises:
        StoreError: the store call failed
    """
    rows = store.select(TASKS, {"userId": user_id}, order_by="createdAt", ascending=False)
    return [Task.model_validate(row) for row in rows]


# =============================================================================
# CRUD
# =============================================================================


def create_task(
    store: TableStore,
    user_id: str,
    now: datetime | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """
    Create a new task.

    Args:
        store: Table store
        user_id: User who owns the task
        now: Creation time (defaults to now)
        **fields: title (required), description, priority, energy_level,
            emotional_importance, estimated_time, actual_time, context,
            due_date. camelCase names are accepted too.

    Returns:
        dict with success status and the stored task
    """
    try:
        payload = TaskCreate(**fields)
    except ValidationError as e:
        return _invalid(e)

    record = payload.model_dump(by_alias=True, mode="json")
    record.update(
        {
            "status": TaskStatus.ACTIVE.value,
            "createdAt": (now or datetime.now()).isoformat(),
            "completedAt": None,
            "userId": user_id,
        }
    )

    try:
        row = store.insert(TASKS, record)
    except StoreError as e:
        return _store_failed(e)

    task = Task.model_validate(row)
    logger.info(f"Task {task.id} created for {user_id}: {task.title}")
    return {"success": True, "data": task, "message": f"Task created with ID {task.id}"}


def list_tasks(
    store: TableStore,
    user_id: str,
    status: Optional[str] = None,
    context: Optional[str] = None,
    priority: Optional[str] = None,
) -> dict[str, Any]:
    """
    List tasks, newest first.

    Args:
        store: Table store
        user_id: Owner
        status: Filter by status (active/completed)
        context: Filter by exact context label
        priority: Filter by priority tier

    Returns:
        dict with tasks and count
    """
    if status and status not in TASK_STATUSES:
        return {
            "success": False,
            "error": f"Invalid status. Must be one of: {TASK_STATUSES}",
            "code": ERROR_INVALID,
        }
    if priority and priority not in PRIORITIES:
        return {
            "success": False,
            "error": f"Invalid priority. Must be one of: {PRIORITIES}",
            "code": ERROR_INVALID,
        }

    filters: dict[str, Any] = {"userId": user_id}
    if status:
        filters["status"] = status
    if context:
        filters["context"] = context
    if priority:
        filters["priority"] = priority

    try:
        rows = store.select(TASKS, filters, order_by="createdAt", ascending=False)
    except StoreError as e:
        return _store_failed(e)

    tasks = [Task.model_validate(row) for row in rows]
    return {"success": True, "data": {"tasks": tasks, "count": len(tasks)}}


def get_task(
    store: TableStore,
    user_id: str,
    task_id: int,
    include_steps: bool = True,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Get task details by ID.

    Returns:
        dict with the task, whether it is overdue and, when include_steps is
        set, its steps and step progress
    """
    from focusflow.tasks.breakdown import fetch_steps, step_progress

    try:
        task = fetch_task(store, user_id, task_id)
        if task is None:
            return _not_found()
        steps = fetch_steps(store, task_id) if include_steps else []
    except StoreError as e:
        return _store_failed(e)

    data: dict[str, Any] = {"task": task, "overdue": task.is_overdue(now)}
    if include_steps:
        data["steps"] = steps
        data["progress"] = step_progress(steps)
    return {"success": True, "data": data}


def update_task(store: TableStore, user_id: str, task_id: int, **fields: Any) -> dict[str, Any]:
    """
    Edit a task. Only the given fields change.

    status and completedAt are not accepted here; use toggle_task_completion.
    """
    try:
        changes = TaskUpdate(**fields).changes()
    except ValidationError as e:
        return _invalid(e)
    if not changes:
        return {"success": False, "error": "No fields to update", "code": ERROR_INVALID}

    try:
        rows = store.update(TASKS, changes, {"id": task_id, "userId": user_id})
    except StoreError as e:
        return _store_failed(e)

    if not rows:
        return _not_found()
    return {"success": True, "data": Task.model_validate(rows[0]), "message": f"Task {task_id} updated"}


def delete_task(store: TableStore, user_id: str, task_id: int) -> dict[str, Any]:
    """Delete a task and its breakdown steps.

    The task row goes first: if that fails nothing has changed. Steps left
    behind by a failed second call are unreachable, since every step
    operation goes through the owning task.
    """
    try:
        if fetch_task(store, user_id, task_id) is None:
            return _not_found()
        store.delete(TASKS, {"id": task_id, "userId": user_id})
    except StoreError as e:
        return _store_failed(e)

    try:
        store.delete(TASK_BREAKDOWNS, {"taskId": task_id})
    except StoreError as e:
        logger.warning(f"Task {task_id} deleted but its steps were not: {e}")

    logger.info(f"Task {task_id} deleted for {user_id}")
    return {"success": True, "message": f"Task {task_id} deleted"}


# =============================================================================
# Completion
# =============================================================================


def toggle_task_completion(
    store: TableStore,
    user_id: str,
    task_id: int,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Flip a task between active and completed.

    Completing a task records a "Task Completed" achievement and extends the
    streak. Reopening only clears completedAt: the achievement and the streak
    stay. If the rewards step fails the status change still stands and the
    failure is reported in warnings.

    Returns:
        dict with the updated task, completed flag, notification (on
        completion), achievement, streak and warnings
    """
    from focusflow.config_models import get_config
    from focusflow.rewards.achievements import completion_achievement_text, record_achievement
    from focusflow.rewards.streaks import update_streak

    now = now or datetime.now()

    try:
        task = fetch_task(store, user_id, task_id)
        if task is None:
            return _not_found()

        completing = not task.is_completed
        values = {
            "status": (TaskStatus.COMPLETED if completing else TaskStatus.ACTIVE).value,
            "completedAt": now.isoformat() if completing else None,
        }
        rows = store.update(TASKS, values, {"id": task_id, "userId": user_id})
    except StoreError as e:
        return _store_failed(e)

    if not rows:
        return _not_found()
    updated = Task.model_validate(rows[0])

    data: dict[str, Any] = {
        "task": updated,
        "completed": completing,
        "notification": None,
        "achievement": None,
        "streak": None,
        "warnings": [],
    }

    if not completing:
        logger.info(f"Task {task_id} reopened for {user_id}")
        return {"success": True, "data": data, "message": f"Task {task_id} reopened"}

    config = get_config().achievements
    data["notification"] = {
        "title": config.notification_title,
        "description": config.notification_description.format(title=updated.title),
    }

    try:
        title, description = completion_achievement_text(updated.title)
        data["achievement"] = record_achievement(store, title, description, user_id, now)
    except StoreError as e:
        logger.warning(f"Task {task_id} completed but achievement was not recorded: {e}")
        data["warnings"].append(f"Achievement not recorded: {e}")

    try:
        data["streak"] = update_streak(store, user_id, now)
    except StoreError as e:
        logger.warning(f"Task {task_id} completed but streak was not updated: {e}")
        data["warnings"].append(f"Streak not updated: {e}")

    logger.info(f"Task {task_id} completed for {user_id}")
    return {"success": True, "data": data, "message": data["notification"]["description"]}


# =============================================================================
# Dashboard
# =============================================================================


def get_dashboard(
    store: TableStore,
    user_id: str,
    energy_level: Optional[int] = None,
    context: Optional[str] = None,
    priority: Optional[str] = None,
) -> dict[str, Any]:
    """
    Build the dashboard view.

    Args:
        store: Table store
        user_id: Owner
        energy_level: Current energy 1-5 (defaults to app.default_energy_level)
        context: Only tasks with this context
        priority: Only tasks with this priority

    Returns:
        dict with view (TaskBuckets), filter_options over all tasks and
        progress (rate, percentage, variant)
    """
    from focusflow.config_models import get_config

    config = get_config()
    if energy_level is None:
        energy_level = config.app.default_energy_level
    if energy_level not in ENERGY_LEVELS:
        return {
            "success": False,
            "error": f"Invalid energy level. Must be one of: {ENERGY_LEVELS}",
            "code": ERROR_INVALID,
        }

    try:
        filters = TaskFilters(context=context or None, priority=priority or None)
    except ValidationError as e:
        return _invalid(e)

    try:
        tasks = fetch_tasks(store, user_id)
    except StoreError as e:
        return _store_failed(e)

    view = derive_view(tasks, filters, energy_level, config.derivation.bucket_size)
    return {
        "success": True,
        "data": {
            "view": view,
            "has_suggestions": view.has_suggestions,
            "filter_options": filter_options(tasks),
            "progress": {
                "rate": view.completion_rate,
                "percentage": round(view.completion_rate * 100),
                "variant": progress_variant(view.completion_rate),
            },
        },
    }


def main():
    from pydantic_core import to_jsonable_python

    from focusflow.store import get_store

    parser = argparse.ArgumentParser(
        description="Task Manager - ADHD-friendly task CRUD operations"
    )
    parser.add_argument(
        "--action",
        required=True,
        choices=["create", "list", "get", "update", "delete", "toggle", "dashboard"],
        help="Action to perform",
    )

    # Task identification
    parser.add_argument("--task-id", type=int, help="Task ID for operations")
    parser.add_argument("--user", required=True, help="User ID")

    # Task creation/update
    parser.add_argument("--title", help="Task title")
    parser.add_argument("--description", help="Task description")
    parser.add_argument("--priority", choices=PRIORITIES, help="Priority tier")
    parser.add_argument("--energy", type=int, choices=ENERGY_LEVELS, help="Energy level (1-5)")
    parser.add_argument("--importance", type=int, help="Emotional importance (0-100)")
    parser.add_argument("--minutes", type=int, help="Estimated minutes")
    parser.add_argument("--context", help="Context label (work, personal, ...)")
    parser.add_argument("--due", help="Due date (ISO 8601)")

    # List filters
    parser.add_argument("--status", choices=TASK_STATUSES, help="Task status")

    args = parser.parse_args()

    fields = {
        "title": args.title,
        "description": args.description,
        "priority": args.priority,
        "energy_level": args.energy,
        "emotional_importance": args.importance,
        "estimated_time": args.minutes,
        "context": args.context,
        "due_date": args.due,
    }
    fields = {k: v for k, v in fields.items() if v is not None}

    if args.action in ("get", "update", "delete", "toggle") and args.task_id is None:
        print(json.dumps({"success": False, "error": f"--task-id required for {args.action}"}))
        sys.exit(1)

    store = get_store()

    if args.action == "create":
        if not args.title:
            print(json.dumps({"success": False, "error": "--title required for create"}))
            sys.exit(1)
        result = create_task(store, args.user, **fields)
    elif args.action == "list":
        result = list_tasks(store, args.user, args.status, args.context, args.priority)
    elif args.action == "get":
        result = get_task(store, args.user, args.task_id)
    elif args.action == "update":
        result = update_task(store, args.user, args.task_id, **fields)
    elif args.action == "delete":
        result = delete_task(store, args.user, args.task_id)
    elif args.action == "toggle":
        result = toggle_task_completion(store, args.user, args.task_id)
    else:
        result = get_dashboard(store, args.user, args.energy, args.context, args.priority)

    print(json.dumps(result, indent=2, default=to_jsonable_python))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
