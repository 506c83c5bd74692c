"""Rewards - streaks and achievements

Philosophy:
    Celebrate completions. Never count down, never shame a gap:
    a broken streak quietly restarts at 1.

Components:
    streaks.py: Consecutive-day counter, milestones (7, 30, 100 days)
    achievements.py: Append-only log of completions, timeline, stats

Both are driven from focusflow.tasks.manager.toggle_task_completion.
"""

from focusflow.rewards.achievements import (
    build_achievement,
    group_by_date,
    record_achievement,
)
from focusflow.rewards.streaks import (
    is_consecutive,
    is_streak_active,
    next_milestone,
    record_completion,
    update_streak,
)

__all__ = [
    "build_achievement",
    "group_by_date",
    "record_achievement",
    "is_consecutive",
    "is_streak_active",
    "next_milestone",
    "record_completion",
    "update_streak",
]
