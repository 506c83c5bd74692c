"""Dashboard API Routes Package

This module aggregates all route handlers into a single router
that can be included in the main FastAPI application.
"""

from fastapi import APIRouter

from .brain_dumps import router as brain_dumps_router
from .rewards import router as rewards_router
from .steps import router as steps_router
from .tasks import router as tasks_router


# Create main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
api_router.include_router(steps_router, prefix="/steps", tags=["steps"])
api_router.include_router(brain_dumps_router, prefix="/brain-dumps", tags=["brain-dumps"])
api_router.include_router(rewards_router, tags=["rewards"])

__all__ = ["api_router"]
