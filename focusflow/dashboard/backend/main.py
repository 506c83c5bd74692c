"""
FocusFlow Dashboard Backend - FastAPI Application

This is the main entry point for the dashboard REST API.
It serves tasks, steps, brain dumps, achievements and the streak.

Usage:
    uvicorn focusflow.dashboard.backend.main:app --host 127.0.0.1 --port 8080 --reload

    Or run directly:
    python -m focusflow.dashboard.backend.main
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

# Load .env file before anything else
from dotenv import load_dotenv
load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from focusflow import __version__
from focusflow.config_models import get_config
from focusflow.dashboard.backend.dependencies import get_store_dep
from focusflow.dashboard.backend.models import ErrorResponse, HealthCheck
from focusflow.dashboard.backend.routes import api_router
from focusflow.logging_config import setup_logging
from focusflow.store import StoreError, TableStore, get_store, reset_store
from focusflow.tasks import ERROR_INVALID


# Configure structured logging
setup_logging()
logger = logging.getLogger(__name__)

config = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting FocusFlow Dashboard Backend...")

    store = get_store()
    try:
        store.health_check()
        logger.info(f"Table store ready ({store.name})")
    except StoreError as e:
        logger.warning(f"Table store not reachable at startup: {e}")

    yield

    # Shutdown
    logger.info("Shutting down FocusFlow Dashboard Backend...")
    reset_store()


# Create FastAPI application
app = FastAPI(
    title="FocusFlow API",
    description="Energy-aware tasks, brain dumps, streaks and achievements",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.dashboard.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check Endpoint
# =============================================================================


@app.get("/api/health", response_model=HealthCheck, tags=["health"])
def health_check(store: TableStore = Depends(get_store_dep)):
    """
    Check system health status.

    The store is the only dependency; the API is degraded without it.
    """
    services = {}

    try:
        store.health_check()
        services["store"] = "healthy"
    except StoreError as e:
        logger.error(f"Store health check failed: {e}")
        services["store"] = "unhealthy"
    services["store_backend"] = store.name

    overall = "healthy" if services["store"] == "healthy" else "degraded"
    return HealthCheck(
        status=overall,
        version=__version__,
        timestamp=datetime.now(),
        services=services,
    )


# =============================================================================
# Error Handlers
# =============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    code = getattr(exc, "code", None) or f"HTTP_{exc.status_code}"
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail), code=code).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body/query validation failures."""
    errors = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    first = errors[0] if errors else {"field": "request", "message": "invalid"}
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=f"Invalid {first['field']}: {first['message']}",
            code=ERROR_INVALID,
            details={"errors": errors},
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal server error", code="INTERNAL_ERROR").model_dump(),
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(api_router)


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "focusflow.dashboard.backend.main:app",
        host=config.dashboard.host,
        port=config.dashboard.api_port,
        reload=True,
        log_level="info",
    )
