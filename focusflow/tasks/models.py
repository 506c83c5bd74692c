"""
Pydantic records for every stored entity.

Attributes are snake_case; the hosted tables use camelCase, so every record
carries camelCase aliases. Dump with ``to_record()`` before writing and
validate with ``Model.model_validate(row)`` after reading.

Input models (``TaskCreate``, ``StepUpdate``...) forbid unknown fields, so a
task's status can only change through the completion toggle.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from focusflow.tasks import (
    DEFAULT_CONTEXT,
    DEFAULT_EMOTIONAL_IMPORTANCE,
    DEFAULT_ENERGY_LEVEL,
    DEFAULT_ESTIMATED_MINUTES,
)


# =============================================================================
# Enums
# =============================================================================


class Priority(str, Enum):
    """Task priority tiers."""

    URGENT = "urgent"
    IMPORTANT = "important"
    MEDIUM = "medium"
    LOW = "low"
    QUICK_WIN = "quick-win"


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"


# =============================================================================
# Helpers
# =============================================================================


def align_datetimes(first: datetime, second: datetime) -> tuple[datetime, datetime]:
    """Make two datetimes comparable.

    Aware values are converted into the other value's zone; when only one
    side is aware it is converted to local time and made naive.
    """
    if (first.tzinfo is None) == (second.tzinfo is None):
        if first.tzinfo is not None:
            first = first.astimezone(second.tzinfo)
        return first, second
    if first.tzinfo is not None:
        first = first.astimezone().replace(tzinfo=None)
    else:
        second = second.astimezone().replace(tzinfo=None)
    return first, second


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be empty")
    return value


class Record(BaseModel):
    """Base for models that map to a table row."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self, **kwargs: Any) -> dict[str, Any]:
        """Dump with table field names and JSON-safe values."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


class InputModel(BaseModel):
    """Base for request payloads: camelCase or snake_case, nothing extra."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# =============================================================================
# Task
# =============================================================================


class Task(Record):
    """A stored task."""

    id: int
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    energy_level: int = Field(DEFAULT_ENERGY_LEVEL, ge=1, le=5)
    emotional_importance: int = Field(DEFAULT_EMOTIONAL_IMPORTANCE, ge=0, le=100)
    estimated_time: Optional[int] = Field(None, ge=0)
    actual_time: Optional[int] = Field(None, ge=0)
    context: str = Field(..., min_length=1)
    status: TaskStatus = TaskStatus.ACTIVE
    due_date: Optional[datetime] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    user_id: str

    @model_validator(mode="after")
    def _completed_at_matches_status(self) -> Task:
        if self.status == TaskStatus.COMPLETED and self.completed_at is None:
            raise ValueError("completed task must have completedAt")
        if self.status == TaskStatus.ACTIVE and self.completed_at is not None:
            raise ValueError("active task must not have completedAt")
        return self

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Due date has passed and the task is still open."""
        if self.due_date is None or self.is_completed:
            return False
        due, current = align_datetimes(self.due_date, now or datetime.now())
        return due < current


class TaskCreate(InputModel):
    """Fields accepted when creating a task."""

    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    energy_level: int = Field(DEFAULT_ENERGY_LEVEL, ge=1, le=5)
    emotional_importance: int = Field(DEFAULT_EMOTIONAL_IMPORTANCE, ge=0, le=100)
    estimated_time: Optional[int] = Field(DEFAULT_ESTIMATED_MINUTES, ge=0)
    actual_time: Optional[int] = Field(None, ge=0)
    context: str = Field(DEFAULT_CONTEXT, min_length=1, max_length=100)
    due_date: Optional[datetime] = None

    @field_validator("title", "context")
    @classmethod
    def _check_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)


class TaskUpdate(InputModel):
    """Partial edit of a task. Only fields that are set get written."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    energy_level: Optional[int] = Field(None, ge=1, le=5)
    emotional_importance: Optional[int] = Field(None, ge=0, le=100)
    estimated_time: Optional[int] = Field(None, ge=0)
    actual_time: Optional[int] = Field(None, ge=0)
    context: Optional[str] = Field(None, min_length=1, max_length=100)
    due_date: Optional[datetime] = None

    @field_validator("title", "context")
    @classmethod
    def _check_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)

    @model_validator(mode="after")
    def _required_fields_not_cleared(self) -> TaskUpdate:
        for name in ("title", "priority", "energy_level", "emotional_importance", "context"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self

    def changes(self) -> dict[str, Any]:
        """Table values for the fields that were set."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


class TaskFilters(BaseModel):
    """Dashboard filters; None passes everything."""

    context: Optional[str] = None
    priority: Optional[Priority] = None


# =============================================================================
# Breakdown steps
# =============================================================================


class TaskBreakdownStep(Record):
    """One checkable step of a task."""

    id: int
    task_id: int
    step_title: str = Field(..., min_length=1)
    step_description: Optional[str] = None
    is_completed: bool = False


class StepCreate(InputModel):
    step_title: str = Field(..., min_length=1, max_length=500)
    step_description: Optional[str] = None

    @field_validator("step_title")
    @classmethod
    def _check_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)


class StepUpdate(InputModel):
    step_title: Optional[str] = Field(None, min_length=1, max_length=500)
    step_description: Optional[str] = None

    @field_validator("step_title")
    @classmethod
    def _check_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)

    @model_validator(mode="after")
    def _title_not_cleared(self) -> StepUpdate:
        if "step_title" in self.model_fields_set and self.step_title is None:
            raise ValueError("step_title cannot be cleared")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


# =============================================================================
# Brain dumps
# =============================================================================


class BrainDump(Record):
    """Free-text note, unrelated to any task."""

    id: int
    content: str
    created_at: datetime
    user_id: str


class BrainDumpInput(InputModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        return _not_blank(value)


# =============================================================================
# Rewards
# =============================================================================


class Achievement(Record):
    """Append-only record of something worth celebrating."""

    id: Optional[int] = None
    title: str
    description: str
    created_at: datetime
    user_id: str


class Streak(Record):
    """Consecutive-day completion count; one per user."""

    id: Optional[int] = None
    count: int = Field(0, ge=0)
    last_completed_at: datetime
    user_id: str
