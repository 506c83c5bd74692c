"""
Tool: Brain Dump
Purpose: Park a stray thought in one keystroke and get back to the task

Notes are free text, owned by a user, and unrelated to any task.
Editing a note changes its content only; the capture time is kept.

Usage:
    python -m focusflow.capture.brain_dump --action create --user single-user --content "buy stamps"
    python -m focusflow.capture.brain_dump --action list --user single-user
    python -m focusflow.capture.brain_dump --action update --user single-user --id 3 --content "buy stamps x10"
    python -m focusflow.capture.brain_dump --action delete --user single-user --id 3

Output:
    JSON result with success status and data
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from focusflow.store import BRAIN_DUMPS, StoreError, TableStore
from focusflow.tasks import ERROR_INVALID, ERROR_NOT_FOUND, ERROR_STORE
from focusflow.tasks.models import BrainDump, BrainDumpInput

logger = logging.getLogger(__name__)


def _not_found(dump_id: int) -> dict[str, Any]:
    return {"success": False, "error": f"Brain dump not found: {dump_id}", "code": ERROR_NOT_FOUND}


def create_brain_dump(
    store: TableStore, user_id: str, content: str, now: datetime | None = None
) -> dict[str, Any]:
    """
    Capture a note.

    Args:
        store: Table store
        user_id: Owner
        content: Note text, must not be blank
        now: Capture time (defaults to now)

    Returns:
        dict with success status and the stored note
    """
    try:
        payload = BrainDumpInput(content=content)
    except ValidationError as e:
        return {"success": False, "error": f"Invalid brain dump: {e.errors()[0]['msg']}", "code": ERROR_INVALID}

    record = {
        "content": payload.content,
        "createdAt": (now or datetime.now()).isoformat(),
        "userId": user_id,
    }
    try:
        row = store.insert(BRAIN_DUMPS, record)
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    dump = BrainDump.model_validate(row)
    logger.info(f"Brain dump {dump.id} captured for {user_id}")
    return {"success": True, "data": dump, "message": f"Brain dump saved with ID {dump.id}"}


def list_brain_dumps(store: TableStore, user_id: str) -> dict[str, Any]:
    """All of a user's notes, newest first."""
    try:
        rows = store.select(BRAIN_DUMPS, {"userId": user_id}, order_by="createdAt", ascending=False)
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    dumps = [BrainDump.model_validate(row) for row in rows]
    return {"success": True, "data": {"brain_dumps": dumps, "total": len(dumps)}}


def get_brain_dump(store: TableStore, user_id: str, dump_id: int) -> dict[str, Any]:
    try:
        rows = store.select(BRAIN_DUMPS, {"id": dump_id, "userId": user_id})
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    if not rows:
        return _not_found(dump_id)
    return {"success": True, "data": BrainDump.model_validate(rows[0])}


def update_brain_dump(store: TableStore, user_id: str, dump_id: int, content: str) -> dict[str, Any]:
    """Replace a note's content. createdAt is left as captured."""
    try:
        payload = BrainDumpInput(content=content)
    except ValidationError as e:
        return {"success": False, "error": f"Invalid brain dump: {e.errors()[0]['msg']}", "code": ERROR_INVALID}

    try:
        rows = store.update(BRAIN_DUMPS, {"content": payload.content}, {"id": dump_id, "userId": user_id})
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    if not rows:
        return _not_found(dump_id)
    return {
        "success": True,
        "data": BrainDump.model_validate(rows[0]),
        "message": f"Brain dump {dump_id} updated",
    }


def delete_brain_dump(store: TableStore, user_id: str, dump_id: int) -> dict[str, Any]:
    try:
        if not store.select(BRAIN_DUMPS, {"id": dump_id, "userId": user_id}):
            return _not_found(dump_id)
        store.delete(BRAIN_DUMPS, {"id": dump_id, "userId": user_id})
    except StoreError as e:
        return {"success": False, "error": str(e), "code": ERROR_STORE}

    logger.info(f"Brain dump {dump_id} deleted for {user_id}")
    return {"success": True, "message": f"Brain dump {dump_id} deleted"}


def main():
    from pydantic_core import to_jsonable_python

    from focusflow.store import get_store

    parser = argparse.ArgumentParser(description="Brain Dump - capture and manage quick notes")
    parser.add_argument(
        "--action",
        required=True,
        choices=["create", "list", "get", "update", "delete"],
        help="Action to perform",
    )
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--id", type=int, help="Brain dump ID")
    parser.add_argument("--content", help="Note text")
    args = parser.parse_args()

    if args.action in ("get", "update", "delete") and args.id is None:
        print(json.dumps({"success": False, "error": f"--id required for {args.action}"}))
        sys.exit(1)
    if args.action in ("create", "update") and args.content is None:
        print(json.dumps({"success": False, "error": f"--content required for {args.action}"}))
        sys.exit(1)

    store = get_store()

    if args.action == "create":
        result = create_brain_dump(store, args.user, args.content)
    elif args.action == "list":
        result = list_brain_dumps(store, args.user)
    elif args.action == "get":
        result = get_brain_dump(store, args.user, args.id)
    elif args.action == "update":
        result = update_brain_dump(store, args.user, args.id, args.content)
    else:
        result = delete_brain_dump(store, args.user, args.id)

    print(json.dumps(result, indent=2, default=to_jsonable_python))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
