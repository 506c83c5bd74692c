"""FocusFlow - energy-aware task tracking with streaks and brain dumps

Philosophy:
    Pick the task that fits the energy you have right now.
    Capture stray thoughts before they derail you.
    Celebrate every completion, never punish a gap.

Components:
    store/: Hosted-table access (SQLite for local use, HTTP for the hosted API)
    tasks/: Task CRUD, breakdown steps, dashboard derivation
    rewards/: Streaks and achievements
    capture/: Brain dump notes
    dashboard/backend/: FastAPI application
    cli.py: `focusflow` command

Usage:
    from focusflow.store import get_store
    from focusflow.tasks.manager import create_task, toggle_task_completion

    store = get_store()
    result = create_task(store, user_id="single-user", title="Pay rent", priority="urgent")
    toggle_task_completion(store, "single-user", result["data"].id)
"""

import os
from pathlib import Path

PACKAGE_ROOT = Path(__file__).parent


def resolve_project_root() -> Path:
    """Directory that holds args/ and data/.

    FOCUSFLOW_HOME wins when set. Otherwise the source checkout the package
    lives in (running from source or an editable install), and failing that
    the current directory, so an installed package never writes into
    site-packages.
    """
    home = os.environ.get("FOCUSFLOW_HOME")
    if home:
        return Path(home).expanduser().resolve()
    checkout = PACKAGE_ROOT.parent
    if (checkout / "args").is_dir():
        return checkout
    return Path.cwd()


# Path constants
PROJECT_ROOT = resolve_project_root()
DATA_DIR = PROJECT_ROOT / "data"
ARGS_DIR = PROJECT_ROOT / "args"
CONFIG_PATH = ARGS_DIR / "focusflow.yaml"

__version__ = "0.1.0"

__all__ = [
    "PROJECT_ROOT",
    "resolve_project_root",
    "PACKAGE_ROOT",
    "DATA_DIR",
    "ARGS_DIR",
    "CONFIG_PATH",
    "__version__",
]
