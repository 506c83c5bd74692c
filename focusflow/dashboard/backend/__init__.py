"""FocusFlow Dashboard Backend

FastAPI application exposing tasks, steps, brain dumps, achievements and
the streak as a JSON API.

Usage:
    uvicorn focusflow.dashboard.backend.main:app --host 127.0.0.1 --port 8080
    focusflow dashboard
"""
