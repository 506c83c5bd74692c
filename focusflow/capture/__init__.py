"""Capture - get thoughts out of working memory

Components:
    brain_dump.py: Free-text notes, newest first, editable and deletable
"""

from focusflow.capture.brain_dump import (
    create_brain_dump,
    delete_brain_dump,
    get_brain_dump,
    list_brain_dumps,
    update_brain_dump,
)

__all__ = [
    "create_brain_dump",
    "delete_brain_dump",
    "get_brain_dump",
    "list_brain_dumps",
    "update_brain_dump",
]
