"""
Tasks Route - Task CRUD, Completion and Dashboard

Provides endpoints for the task views:
- Dashboard: energy-matched, urgent and quick-win suggestions
- List tasks with filters (status, context, priority)
- Get task detail with its steps
- Create, edit, delete tasks
- Toggle completion
- List and add breakdown steps
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from focusflow.dashboard.backend.dependencies import (
    acknowledge,
    get_current_user,
    get_store_dep,
    unwrap,
)
from focusflow.dashboard.backend.models import (
    DashboardResponse,
    MessageResponse,
    StepListResponse,
    TaskDetailResponse,
    TaskListResponse,
    ToggleResponse,
)
from focusflow.store import TableStore
from focusflow.tasks import breakdown, manager
from focusflow.tasks.models import StepCreate, Task, TaskBreakdownStep, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


router = APIRouter()


# =============================================================================
# Dashboard Endpoint (must be before /{task_id} to avoid route conflict)
# =============================================================================


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    energy_level: Optional[int] = Query(None, ge=1, le=5, description="Current energy 1-5"),
    context: Optional[str] = Query(None, description="Only this context"),
    priority: Optional[str] = Query(None, description="Only this priority"),
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """
    Suggest what to do next.

    Returns up to three tasks per bucket (matching energy, urgent, quick
    wins), the full active and completed lists, filter options and progress.
    """
    return unwrap(manager.get_dashboard(store, user_id, energy_level, context, priority))


# =============================================================================
# Task CRUD
# =============================================================================


@router.get("", response_model=TaskListResponse)
def list_tasks(
    task_status: Optional[str] = Query(None, alias="status", description="active or completed"),
    context: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """List tasks, newest first."""
    return unwrap(manager.list_tasks(store, user_id, task_status, context, priority))


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """Create a task. Unset fields take the usual defaults."""
    return unwrap(manager.create_task(store, user_id, **payload.model_dump(exclude_unset=True)))


@router.get("/{task_id}", response_model=TaskDetailResponse)
def get_task(
    task_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """Task detail with steps and step progress."""
    return unwrap(manager.get_task(store, user_id, task_id))


@router.patch("/{task_id}", response_model=Task)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """Edit a task. Completion is changed through /toggle only."""
    return unwrap(manager.update_task(store, user_id, task_id, **payload.model_dump(exclude_unset=True)))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """Delete a task and its steps."""
    return acknowledge(manager.delete_task(store, user_id, task_id))


@router.post("/{task_id}/toggle", response_model=ToggleResponse)
def toggle_task(
    task_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """
    Complete or reopen a task.

    Completing records an achievement, extends the streak and returns a
    notification to show.
    """
    return unwrap(manager.toggle_task_completion(store, user_id, task_id))


# =============================================================================
# Steps of a task
# =============================================================================


@router.get("/{task_id}/steps", response_model=StepListResponse)
def list_steps(
    task_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return unwrap(breakdown.list_steps(store, user_id, task_id))


@router.post("/{task_id}/steps", response_model=TaskBreakdownStep, status_code=status.HTTP_201_CREATED)
def add_step(
    task_id: int,
    payload: StepCreate,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return unwrap(
        breakdown.add_step(store, user_id, task_id, payload.step_title, payload.step_description)
    )
