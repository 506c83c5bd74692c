"""
Brain Dumps Route - quick free-text capture
"""

from fastapi import APIRouter, Depends, status

from focusflow.capture import brain_dump
from focusflow.dashboard.backend.dependencies import (
    acknowledge,
    get_current_user,
    get_store_dep,
    unwrap,
)
from focusflow.dashboard.backend.models import BrainDumpListResponse, MessageResponse
from focusflow.store import TableStore
from focusflow.tasks.models import BrainDump, BrainDumpInput

router = APIRouter()


@router.get("", response_model=BrainDumpListResponse)
def list_brain_dumps(
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """All notes, newest first."""
    return unwrap(brain_dump.list_brain_dumps(store, user_id))


@router.post("", response_model=BrainDump, status_code=status.HTTP_201_CREATED)
def create_brain_dump(
    payload: BrainDumpInput,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return unwrap(brain_dump.create_brain_dump(store, user_id, payload.content))


@router.get("/{dump_id}", response_model=BrainDump)
def get_brain_dump(
    dump_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return unwrap(brain_dump.get_brain_dump(store, user_id, dump_id))


@router.patch("/{dump_id}", response_model=BrainDump)
def update_brain_dump(
    dump_id: int,
    payload: BrainDumpInput,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """Replace the note's content; the capture time is kept."""
    return unwrap(brain_dump.update_brain_dump(store, user_id, dump_id, payload.content))


@router.delete("/{dump_id}", response_model=MessageResponse)
def delete_brain_dump(
    dump_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return acknowledge(brain_dump.delete_brain_dump(store, user_id, dump_id))
