"""
Steps Route - edit, delete and tick breakdown steps

Steps are listed and added under /api/tasks/{task_id}/steps.
"""

from fastapi import APIRouter, Depends

from focusflow.dashboard.backend.dependencies import (
    acknowledge,
    get_current_user,
    get_store_dep,
    unwrap,
)
from focusflow.dashboard.backend.models import MessageResponse, StepToggleResponse
from focusflow.store import TableStore
from focusflow.tasks import breakdown
from focusflow.tasks.models import StepUpdate, TaskBreakdownStep

router = APIRouter()


@router.patch("/{step_id}", response_model=TaskBreakdownStep)
def update_step(
    step_id: int,
    payload: StepUpdate,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return unwrap(
        breakdown.update_step(store, user_id, step_id, **payload.model_dump(exclude_unset=True))
    )


@router.delete("/{step_id}", response_model=MessageResponse)
def delete_step(
    step_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return acknowledge(breakdown.delete_step(store, user_id, step_id))


@router.post("/{step_id}/toggle", response_model=StepToggleResponse)
def toggle_step(
    step_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """
    Tick or untick a step.

    allStepsCompleted is set when this ticked the last open step of an open
    task; the task itself is left alone.
    """
    result = breakdown.toggle_step(store, user_id, step_id)
    data = unwrap(result)
    return {**data, "message": result.get("message")}
