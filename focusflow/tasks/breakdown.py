"""
Tool: Task Breakdown
Purpose: Split a task into small checkable steps

A big task is a wall. A list of steps is a staircase. Steps belong to a
task and are reached through it: every operation first checks that the
parent task belongs to the caller.

Ticking a step never completes the task. When the last open step is ticked
on an open task, the result carries an all_steps_completed prompt and the
caller decides.

Usage:
    python -m focusflow.tasks.breakdown --action list --user single-user --task-id 4
    python -m focusflow.tasks.breakdown --action add --user single-user --task-id 4 --title "Find the form"
    python -m focusflow.tasks.breakdown --action toggle --user single-user --step-id 9

Output:
    JSON result with success status and data
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from focusflow.store import TASK_BREAKDOWNS, StoreError, TableStore
from focusflow.tasks import ERROR_INVALID, ERROR_NOT_FOUND, ERROR_STORE
from focusflow.tasks.manager import fetch_task
from focusflow.tasks.models import StepCreate, StepUpdate, Task, TaskBreakdownStep

logger = logging.getLogger(__name__)


def _invalid(e: ValidationError) -> dict[str, Any]:
    first = e.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "step"
    return {"success": False, "error": f"Invalid {field}: {first['msg']}", "code": ERROR_INVALID}


def _task_not_found() -> dict[str, Any]:
    return {"success": False, "error": "Task not found", "code": ERROR_NOT_FOUND}


def _step_not_found(step_id: int) -> dict[str, Any]:
    return {"success": False, "error": f"Step not found: {step_id}", "code": ERROR_NOT_FOUND}


def step_progress(steps: Sequence[TaskBreakdownStep]) -> dict[str, int]:
    """Completed count, total and rounded percentage (0 with no steps)."""
    total = len(steps)
    completed = sum(1 for step in steps if step.is_completed)
    return {
        "completed": completed,
        "total": total,
        "percentage": round(completed / total * 100) if total else 0,
    }


def fetch_steps(store: TableStore, task_id: int) -> list[TaskBreakdownStep]:
    """Steps of a task in creation order.

    Raises:
        StoreError: the store call failed
    """
    rows = store.select(TASK_BREAKDOWNS, {"taskId": task_id})
    return [TaskBreakdownStep.model_validate(row) for row in rows]


def _fetch_owned_step(
    store: TableStore, user_id: str, step_id: int
) -> Optional[tuple[TaskBreakdownStep, Task]]:
    rows = store.select(TASK_BREAKDOWNS, {"id": step_id})
    if not rows:
        return None
    step = TaskBreakdownStep.model_validate(rows[0])
    task = fetch_task(store, user_id, step.task_id)
    if task is None:
        # Step exists but its task belongs to someone else
        return None
    return step, task


# =============================================================================
# Operations
# =============================================================================


def list_steps(store: TableStore, user_id: str, task_id: int) -> dict[str, Any]:
    """
    List the steps of a task.

    Returns:
        dict with steps and progress
    """
    try:
        if fetch_task(store, user_id, task_id) is None:
            return _task_not_found()
        steps = fetch_steps(store, task_id)
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    return {"success": True, "data": {"steps": steps, "progress": step_progress(steps)}}


def add_step(
    store: TableStore,
    user_id: str,
    task_id: int,
    step_title: str,
    step_description: Optional[str] = None,
) -> dict[str, Any]:
    """
    Append a step to a task.

    Args:
        store: Table store
        user_id: Owner of the parent task
        task_id: Parent task
        step_title: Short action, must not be blank
        step_description: Optional detail

    Returns:
        dict with success status and the stored step
    """
    try:
        payload = StepCreate(step_title=step_title, step_description=step_description)
    except ValidationError as e:
        return _invalid(e)

    record = payload.model_dump(by_alias=True)
    record.update({"taskId": task_id, "isCompleted": False})

    try:
        if fetch_task(store, user_id, task_id) is None:
            return _task_not_found()
        row = store.insert(TASK_BREAKDOWNS, record)
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    step = TaskBreakdownStep.model_validate(row)
    logger.info(f"Step {step.id} added to task {task_id}")
    return {"success": True, "data": step, "message": f"Step added with ID {step.id}"}


def update_step(store: TableStore, user_id: str, step_id: int, **fields: Any) -> dict[str, Any]:
    """Edit a step's title or description. Completion goes through toggle_step."""
    try:
        changes = StepUpdate(**fields).changes()
    except ValidationError as e:
        return _invalid(e)
    if not changes:
        return {"success": False, "error": "No fields to update", "code": ERROR_INVALID}

    try:
        if _fetch_owned_step(store, user_id, step_id) is None:
            return _step_not_found(step_id)
        rows = store.update(TASK_BREAKDOWNS, changes, {"id": step_id})
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    if not rows:
        return _step_not_found(step_id)
    return {
        "success": True,
        "data": TaskBreakdownStep.model_validate(rows[0]),
        "message": f"Step {step_id} updated",
    }


def delete_step(store: TableStore, user_id: str, step_id: int) -> dict[str, Any]:
    try:
        if _fetch_owned_step(store, user_id, step_id) is None:
            return _step_not_found(step_id)
        store.delete(TASK_BREAKDOWNS, {"id": step_id})
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    return {"success": True, "message": f"Step {step_id} deleted"}


def toggle_step(store: TableStore, user_id: str, step_id: int) -> dict[str, Any]:
    """
    Flip a step between done and not done.

    Returns:
        dict with the updated step, the task's step progress and
        all_steps_completed, which is True only when this toggle ticked the
        last open step of a task that is still open
    """
    try:
        owned = _fetch_owned_step(store, user_id, step_id)
        if owned is None:
            return _step_not_found(step_id)
        step, task = owned

        becoming_completed = not step.is_completed
        siblings = [s for s in fetch_steps(store, task.id) if s.id != step.id]

        rows = store.update(TASK_BREAKDOWNS, {"isCompleted": becoming_completed}, {"id": step_id})
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    if not rows:
        return _step_not_found(step_id)

    updated = TaskBreakdownStep.model_validate(rows[0])
    all_steps_completed = (
        becoming_completed
        and all(s.is_completed for s in siblings)
        and not task.is_completed
    )

    return {
        "success": True,
        "data": {
            "step": updated,
            "progress": step_progress(siblings + [updated]),
            "all_steps_completed": all_steps_completed,
        },
        "message": "All steps done. Mark the task complete?" if all_steps_completed else None,
    }


def main():
    from pydantic_core import to_jsonable_python

    from focusflow.store import get_store

    parser = argparse.ArgumentParser(description="Task Breakdown - manage the steps of a task")
    parser.add_argument(
        "--action",
        required=True,
        choices=["list", "add", "update", "delete", "toggle"],
        help="Action to perform",
    )
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--task-id", type=int, help="Parent task ID for list/add")
    parser.add_argument("--step-id", type=int, help="Step ID for update/delete/toggle")
    parser.add_argument("--title", help="Step title")
    parser.add_argument("--description", help="Step description")
    args = parser.parse_args()

    if args.action in ("list", "add") and args.task_id is None:
        print(json.dumps({"success": False, "error": f"--task-id required for {args.action}"}))
        sys.exit(1)
    if args.action in ("update", "delete", "toggle") and args.step_id is None:
        print(json.dumps({"success": False, "error": f"--step-id required for {args.action}"}))
        sys.exit(1)

    store = get_store()

    if args.action == "list":
        result = list_steps(store, args.user, args.task_id)
    elif args.action == "add":
        result = add_step(store, args.user, args.task_id, args.title or "", args.description)
    elif args.action == "update":
        fields = {}
        if args.title is not None:
            fields["step_title"] = args.title
        if args.description is not None:
            fields["step_description"] = args.description
        result = update_step(store, args.user, args.step_id, **fields)
    elif args.action == "delete":
        result = delete_step(store, args.user, args.step_id)
    else:
        result = toggle_step(store, args.user, args.step_id)

    print(json.dumps(result, indent=2, default=to_jsonable_python))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
