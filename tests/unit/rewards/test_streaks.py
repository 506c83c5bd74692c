"""Tests for focusflow/rewards/streaks.py

The streak engine counts consecutive days with at least one completion.
Key rules:
- First completion starts at 1
- Same day or the next day increments
- Any gap resets to 1
- Reopening a task never shortens a streak
"""

from datetime import datetime, timedelta

import pytest

from focusflow.rewards import streaks
from focusflow.store import STREAKS
from focusflow.tasks.models import Streak


def _streak(count: int, last: datetime, user_id: str = "u1") -> Streak:
    return Streak(id=1, count=count, last_completed_at=last, user_id=user_id)


# ─────────────────────────────────────────────────────────────────────────────
# Pure streak computation
# ─────────────────────────────────────────────────────────────────────────────


class TestRecordCompletion:
    """Tests for record_completion."""

    def test_first_completion_starts_at_one(self, t0):
        """No existing streak should start a streak of 1."""
        result = streaks.record_completion(None, t0, "u1")

        assert result.count == 1
        assert result.last_completed_at == t0
        assert result.user_id == "u1"
        assert result.id is None

    def test_same_day_increments(self, t0):
        """Every completion on the same day counts."""
        result = streaks.record_completion(_streak(3, t0), t0 + timedelta(hours=5), "u1")

        assert result.count == 4
        assert result.last_completed_at == t0 + timedelta(hours=5)

    def test_next_day_increments(self, t0):
        """A completion the following day continues the streak."""
        result = streaks.record_completion(_streak(3, t0), t0 + timedelta(days=1), "u1")

        assert result.count == 4

    def test_gap_resets_to_one(self, t0):
        """Two or more days later the streak restarts."""
        later = t0 + timedelta(days=2)
        result = streaks.record_completion(_streak(9, t0), later, "u1")

        assert result.count == 1
        assert result.last_completed_at == later

    def test_keeps_record_identity(self, t0):
        """The existing record is updated, not replaced."""
        result = streaks.record_completion(_streak(2, t0), t0 + timedelta(days=1), "u1")

        assert result.id == 1

    def test_scenario_25h_then_100h(self, t0):
        """T0 -> 1, T0+25h -> 2, T0+100h -> 1."""
        first = streaks.record_completion(None, t0, "u1")
        second = streaks.record_completion(first, t0 + timedelta(hours=25), "u1")
        third = streaks.record_completion(second, t0 + timedelta(hours=100), "u1")

        assert [first.count, second.count, third.count] == [1, 2, 1]
        assert third.last_completed_at == t0 + timedelta(hours=100)


class TestAdjacency:
    """Tests for is_consecutive and the two adjacency modes."""

    def test_month_boundary_resets_in_day_of_month_mode(self):
        """31st -> 1st is not one day-of-month apart."""
        last = datetime(2026, 3, 31, 20, 0)
        now = datetime(2026, 4, 1, 8, 0)

        assert streaks.is_consecutive(last, now, "day_of_month") is False
        assert streaks.record_completion(_streak(5, last), now, "u1", "day_of_month").count == 1

    def test_month_boundary_continues_in_calendar_mode(self):
        """31st -> 1st is exactly one calendar day."""
        last = datetime(2026, 3, 31, 20, 0)
        now = datetime(2026, 4, 1, 8, 0)

        assert streaks.is_consecutive(last, now, "calendar") is True
        assert streaks.record_completion(_streak(5, last), now, "u1", "calendar").count == 6

    def test_day_of_month_ignores_month(self):
        """5th of one month -> 6th of a later month counts in day_of_month mode."""
        last = datetime(2026, 1, 5, 12, 0)
        now = datetime(2026, 3, 6, 12, 0)

        assert streaks.is_consecutive(last, now, "day_of_month") is True
        assert streaks.is_consecutive(last, now, "calendar") is False

    def test_same_day_is_consecutive_in_both_modes(self, t0):
        for mode in streaks.ADJACENCY_MODES:
            assert streaks.is_consecutive(t0, t0 + timedelta(hours=1), mode) is True

    def test_rejects_unknown_mode(self, t0):
        with pytest.raises(ValueError, match="Invalid adjacency mode"):
            streaks.is_consecutive(t0, t0, "weekly")


# ─────────────────────────────────────────────────────────────────────────────
# Active flag and milestones
# ─────────────────────────────────────────────────────────────────────────────


class TestStreakActive:
    """Tests for is_streak_active."""

    def test_no_streak_is_inactive(self, t0):
        assert streaks.is_streak_active(None, t0) is False

    def test_within_24h_is_active(self, t0):
        assert streaks.is_streak_active(_streak(2, t0), t0 + timedelta(hours=23)) is True

    def test_at_24h_is_inactive(self, t0):
        assert streaks.is_streak_active(_streak(2, t0), t0 + timedelta(hours=24)) is False

    def test_custom_window(self, t0):
        streak = _streak(2, t0)

        assert streaks.is_streak_active(streak, t0 + timedelta(hours=30), timedelta(hours=36)) is True


class TestMilestones:
    """Tests for milestone banding."""

    @pytest.mark.parametrize(
        "count,expected",
        [(0, 7), (6, 7), (7, 30), (29, 30), (30, 100), (99, 100), (100, 100), (250, 100)],
    )
    def test_next_milestone(self, count, expected):
        assert streaks.next_milestone(count) == expected

    def test_progress_percentage(self):
        progress = streaks.milestone_progress(3)

        assert progress == {"count": 3, "next_milestone": 7, "percentage": 43}

    def test_progress_past_last_milestone(self):
        """Beyond the last milestone the percentage keeps growing."""
        assert streaks.milestone_progress(150)["percentage"] == 150


# ─────────────────────────────────────────────────────────────────────────────
# Store-backed operations
# ─────────────────────────────────────────────────────────────────────────────


class TestUpdateStreak:
    """Tests for update_streak against a real SQLite store."""

    def test_inserts_then_updates_single_record(self, store, mock_user_id, t0):
        """The streak is a singleton per user."""
        first = streaks.update_streak(store, mock_user_id, t0)
        second = streaks.update_streak(store, mock_user_id, t0 + timedelta(days=1))

        rows = store.select(STREAKS, {"userId": mock_user_id})
        assert len(rows) == 1
        assert first.id == second.id
        assert second.count == 2
        assert rows[0]["count"] == 2

    def test_streaks_are_per_user(self, store, mock_user_id, other_user_id, t0):
        streaks.update_streak(store, mock_user_id, t0)
        streaks.update_streak(store, mock_user_id, t0 + timedelta(hours=1))
        streaks.update_streak(store, other_user_id, t0)

        assert streaks.get_streak(store, mock_user_id).count == 2
        assert streaks.get_streak(store, other_user_id).count == 1

    def test_uses_configured_adjacency(self, store, mock_user_id, monkeypatch):
        """Without an explicit mode the config decides."""
        from focusflow.config_models import get_config

        monkeypatch.setattr(get_config().streaks, "adjacency", "calendar")
        streaks.update_streak(store, mock_user_id, datetime(2026, 3, 31, 9, 0))
        result = streaks.update_streak(store, mock_user_id, datetime(2026, 4, 1, 9, 0))

        assert result.count == 2

    def test_get_streak_none_before_first_completion(self, store, mock_user_id):
        assert streaks.get_streak(store, mock_user_id) is None


class TestGetStreakStatus:
    """Tests for get_streak_status."""

    def test_empty_status(self, store, mock_user_id, t0):
        result = streaks.get_streak_status(store, mock_user_id, t0)

        assert result["success"] is True
        assert result["data"]["count"] == 0
        assert result["data"]["is_active"] is False
        assert result["data"]["milestone"] is None

    def test_active_status_with_milestone(self, store, mock_user_id, t0):
        streaks.update_streak(store, mock_user_id, t0)

        result = streaks.get_streak_status(store, mock_user_id, t0 + timedelta(hours=2))

        assert result["data"]["count"] == 1
        assert result["data"]["is_active"] is True
        assert result["data"]["milestone"]["next_milestone"] == 7
