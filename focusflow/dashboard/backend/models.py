"""
Pydantic models for Dashboard API response types.

Stored records (Task, TaskBreakdownStep, ...) live in focusflow.tasks.models
and are reused as-is. The models here wrap them into response envelopes.
All fields serialize in camelCase.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from focusflow.tasks.derive import TaskBuckets
from focusflow.tasks.models import (
    Achievement,
    BrainDump,
    Streak,
    Task,
    TaskBreakdownStep,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# System Models
# =============================================================================


class HealthCheck(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy", description="Overall system status")
    version: str = Field(default="0.1.0", description="API version")
    timestamp: datetime = Field(default_factory=datetime.now, description="Check timestamp")
    services: dict[str, str] = Field(
        default_factory=dict, description="Individual service statuses"
    )


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    code: str = Field(default="INTERNAL_ERROR", description="Error code")
    details: dict[str, Any] | None = Field(None, description="Additional details")


class MessageResponse(ApiModel):
    """Acknowledgement for operations with no payload (deletes)."""

    success: bool = True
    message: str


# =============================================================================
# Task Models
# =============================================================================


class StepProgress(ApiModel):
    completed: int = 0
    total: int = 0
    percentage: int = 0


class TaskListResponse(ApiModel):
    tasks: list[Task]
    count: int


class TaskDetailResponse(ApiModel):
    task: Task
    overdue: bool = False
    steps: list[TaskBreakdownStep] = Field(default_factory=list)
    progress: StepProgress = Field(default_factory=StepProgress)


class Notification(ApiModel):
    title: str
    description: str


class ToggleResponse(ApiModel):
    """Result of the completion toggle."""

    task: Task
    completed: bool
    notification: Optional[Notification] = None
    achievement: Optional[Achievement] = None
    streak: Optional[Streak] = None
    warnings: list[str] = Field(default_factory=list)


class FilterOptions(ApiModel):
    contexts: list[str] = Field(default_factory=list)
    priorities: list[str] = Field(default_factory=list)


class DashboardProgress(ApiModel):
    rate: float = 0.0
    percentage: int = 0
    variant: str = "default"


class DashboardResponse(ApiModel):
    """Suggestion buckets plus everything the filter bar needs."""

    view: TaskBuckets
    has_suggestions: bool
    filter_options: FilterOptions
    progress: DashboardProgress


# =============================================================================
# Step Models
# =============================================================================


class StepListResponse(ApiModel):
    steps: list[TaskBreakdownStep]
    progress: StepProgress


class StepToggleResponse(ApiModel):
    step: TaskBreakdownStep
    progress: StepProgress
    all_steps_completed: bool = False
    message: Optional[str] = None


# =============================================================================
# Brain Dump Models
# =============================================================================


class BrainDumpListResponse(ApiModel):
    brain_dumps: list[BrainDump]
    total: int


# =============================================================================
# Reward Models
# =============================================================================


class MilestoneProgress(ApiModel):
    count: int
    next_milestone: int
    percentage: int


class AchievementListResponse(ApiModel):
    achievements: list[Achievement]
    timeline: dict[str, list[Achievement]] = Field(
        default_factory=dict, description="Achievements grouped by YYYY-MM-DD, newest day first"
    )
    total: int


class AchievementStats(ApiModel):
    tasks_completed: int = 0
    total_tasks: int = 0
    completion_rate: int = Field(0, description="Rounded percentage")
    current_streak: int = 0
    streak_active: bool = False
    total_achievements: int = 0
    milestone: Optional[MilestoneProgress] = None


class StreakResponse(ApiModel):
    streak: Optional[Streak] = None
    count: int = 0
    is_active: bool = False
    milestone: Optional[MilestoneProgress] = None
