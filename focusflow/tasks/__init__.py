"""Task Engine - energy-aware task tracking

Philosophy:
    A long list is paralysing. Show three things that fit right now:
    what matches today's energy, what is urgent, and what is a quick win.

Components:
    models.py: Validated records for tasks, steps, brain dumps, rewards
    manager.py: Task CRUD and the completion toggle
    breakdown.py: Break a task into checkable steps
    derive.py: Dashboard buckets and progress

Usage:
    from focusflow.store import get_store
    from focusflow.tasks.manager import create_task, get_dashboard

    store = get_store()
    create_task(store, "single-user", title="Call the bank", priority="quick-win", energy_level=2)
    view = get_dashboard(store, "single-user", energy_level=2)
    print(view["data"]["view"].energy_matched)
"""

# Priority tiers
PRIORITIES = ("urgent", "important", "medium", "low", "quick-win")

PRIORITY_LABELS = {
    "urgent": "Urgent",
    "important": "Important",
    "medium": "Medium",
    "low": "Low",
    "quick-win": "Quick Win",
}

# Valid statuses
TASK_STATUSES = ("active", "completed")

# Energy scale, 1 (very low) to 5 (very high)
ENERGY_LEVELS = (1, 2, 3, 4, 5)

ENERGY_LABELS = {
    1: "Very Low",
    2: "Low",
    3: "Medium",
    4: "High",
    5: "Very High",
}

# Suggested contexts; any non-empty label is accepted
SUGGESTED_CONTEXTS = ("work", "personal", "family", "finances", "health")

# Defaults for a new task
DEFAULT_PRIORITY = "medium"
DEFAULT_ENERGY_LEVEL = 3
DEFAULT_EMOTIONAL_IMPORTANCE = 50
DEFAULT_ESTIMATED_MINUTES = 30
DEFAULT_CONTEXT = "work"

# Result codes for failed operations
ERROR_NOT_FOUND = "not_found"
ERROR_INVALID = "invalid"
ERROR_STORE = "store_error"

__all__ = [
    "PRIORITIES",
    "PRIORITY_LABELS",
    "TASK_STATUSES",
    "ENERGY_LEVELS",
    "ENERGY_LABELS",
    "SUGGESTED_CONTEXTS",
    "DEFAULT_PRIORITY",
    "DEFAULT_ENERGY_LEVEL",
    "DEFAULT_EMOTIONAL_IMPORTANCE",
    "DEFAULT_ESTIMATED_MINUTES",
    "DEFAULT_CONTEXT",
    "ERROR_NOT_FOUND",
    "ERROR_INVALID",
    "ERROR_STORE",
]
