"""
Rewards Route - achievements timeline, stats and the streak
"""

from fastapi import APIRouter, Depends

from focusflow.dashboard.backend.dependencies import (
    acknowledge,
    get_current_user,
    get_store_dep,
    unwrap,
)
from focusflow.dashboard.backend.models import (
    AchievementListResponse,
    AchievementStats,
    MessageResponse,
    StreakResponse,
)
from focusflow.rewards import achievements, streaks
from focusflow.store import TableStore

router = APIRouter()


@router.get("/achievements", response_model=AchievementListResponse)
def list_achievements(
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """All achievements newest first, plus the same list grouped by day."""
    return unwrap(achievements.list_achievements(store, user_id))


@router.get("/achievements/stats", response_model=AchievementStats)
def get_achievement_stats(
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return unwrap(achievements.get_stats(store, user_id))


@router.delete("/achievements/{achievement_id}", response_model=MessageResponse)
def delete_achievement(
    achievement_id: int,
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    return acknowledge(achievements.delete_achievement(store, user_id, achievement_id))


@router.get("/streak", response_model=StreakResponse)
def get_streak(
    store: TableStore = Depends(get_store_dep),
    user_id: str = Depends(get_current_user),
):
    """Current streak, whether it is still alive today, and the next milestone."""
    return unwrap(streaks.get_streak_status(store, user_id))
