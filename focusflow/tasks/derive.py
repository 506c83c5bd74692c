"""
Tool: Task Derivation
Purpose: Turn the full task list into the dashboard's suggestion buckets

Given every task the user has (already fetched, newest first), the current
energy level and the active filters, produce:
- energy_matched: open tasks needing exactly the current energy (first 3)
- urgent: open urgent tasks (first 3)
- quick_wins: open quick-win tasks (first 3)
- active: every open task that passes the filters
- completed: every completed task that passes the filters
- completion_rate: completed / filtered, 0 when nothing passes

Buckets are computed independently; one task can sit in several.

Core ADHD Principle:
    A list of twenty things is zero things. Three is the ceiling.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from focusflow.tasks.models import Priority, Task, TaskFilters

DEFAULT_BUCKET_SIZE = 3
# Suggestion buckets never show more than this many tasks
MAX_BUCKET_SIZE = 3


class TaskBuckets(BaseModel):
    """Derived dashboard view."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    energy_level: int
    filters: TaskFilters = Field(default_factory=TaskFilters)
    energy_matched: list[Task] = Field(default_factory=list)
    urgent: list[Task] = Field(default_factory=list)
    quick_wins: list[Task] = Field(default_factory=list)
    active: list[Task] = Field(default_factory=list)
    completed: list[Task] = Field(default_factory=list)
    total_count: int = 0
    completed_count: int = 0
    completion_rate: float = 0.0

    @property
    def has_suggestions(self) -> bool:
        return bool(self.energy_matched or self.urgent or self.quick_wins)


def apply_filters(tasks: Iterable[Task], filters: Optional[TaskFilters] = None) -> list[Task]:
    """Exact-match context and priority filters, combined with AND."""
    if filters is None:
        return list(tasks)

    result = []
    for task in tasks:
        if filters.context and task.context != filters.context:
            continue
        if filters.priority and task.priority != filters.priority:
            continue
        result.append(task)
    return result


def completion_rate(completed_count: int, total_count: int) -> float:
    """Fraction of tasks completed; 0 for an empty set."""
    if total_count <= 0:
        return 0.0
    return completed_count / total_count


def progress_variant(rate: float) -> str:
    """Progress bar style for a completion fraction."""
    percent = rate * 100
    if percent > 75:
        return "success"
    if percent > 25:
        return "warning"
    return "default"


def derive_view(
    tasks: Sequence[Task],
    filters: Optional[TaskFilters] = None,
    energy_level: int = 3,
    bucket_size: int = DEFAULT_BUCKET_SIZE,
) -> TaskBuckets:
    """Build the dashboard buckets from the already-loaded task list."""
    bucket_size = min(bucket_size, MAX_BUCKET_SIZE)
    filtered = apply_filters(tasks, filters)
    active = [t for t in filtered if not t.is_completed]
    completed = [t for t in filtered if t.is_completed]

    energy_matched = [t for t in active if t.energy_level == energy_level]
    urgent = [t for t in active if t.priority == Priority.URGENT]
    quick_wins = [t for t in active if t.priority == Priority.QUICK_WIN]

    return TaskBuckets(
        energy_level=energy_level,
        filters=filters or TaskFilters(),
        energy_matched=energy_matched[:bucket_size],
        urgent=urgent[:bucket_size],
        quick_wins=quick_wins[:bucket_size],
        active=active,
        completed=completed,
        total_count=len(filtered),
        completed_count=len(completed),
        completion_rate=completion_rate(len(completed), len(filtered)),
    )


def filter_options(tasks: Iterable[Task]) -> dict[str, list[str]]:
    """Distinct contexts and priorities present, in first-seen order."""
    contexts: dict[str, None] = {}
    priorities: dict[str, None] = {}
    for task in tasks:
        contexts.setdefault(task.context, None)
        priorities.setdefault(task.priority.value, None)
    return {"contexts": list(contexts), "priorities": list(priorities)}
