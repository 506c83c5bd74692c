"""
Shared route dependencies: the table store, the current user, and the
translation of operation results into HTTP responses.
"""

import logging
from typing import Any

from fastapi import HTTPException, Request, status

from focusflow.config_models import get_config
from focusflow.logging_config import bind_request_context
from focusflow.store import TableStore, get_store
from focusflow.tasks import ERROR_INVALID, ERROR_NOT_FOUND, ERROR_STORE

logger = logging.getLogger(__name__)

# Result code -> HTTP status
STATUS_BY_CODE = {
    ERROR_NOT_FOUND: 404,
    ERROR_INVALID: 422,
    ERROR_STORE: 502,
}


class ApiError(HTTPException):
    """HTTPException that keeps the operation's result code."""

    def __init__(self, status_code: int, detail: str, code: str):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


def get_store_dep() -> TableStore:
    """Table store for the request. Overridden in tests."""
    return get_store()


async def get_current_user(request: Request) -> str:
    """
    Resolve the user every operation is scoped to.

    With dashboard.require_auth off, everyone is the configured default user.
    Otherwise the upstream auth provider must pass the user id in the
    configured header. The resolved user is bound into the log context for
    the request.
    """
    config = get_config()
    if not config.dashboard.require_auth:
        user_id = config.app.default_user_id
    else:
        user_id = request.headers.get(config.dashboard.user_header, "").strip()
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required"
            )

    bind_request_context(user_id, path=request.url.path)
    return user_id


def unwrap(result: dict[str, Any]) -> Any:
    """Return the data of a successful result, raise ApiError otherwise."""
    if result.get("success"):
        return result.get("data")

    code = result.get("code", ERROR_STORE)
    status_code = STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"Operation failed ({code}): {result.get('error')}")
    raise ApiError(status_code, result.get("error", "Operation failed"), code)


def acknowledge(result: dict[str, Any]) -> dict[str, Any]:
    """Message body for successful operations that return no data."""
    unwrap(result)
    return {"success": True, "message": result.get("message", "")}
