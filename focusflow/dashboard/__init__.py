"""FocusFlow Dashboard

backend/: FastAPI application serving the JSON API under /api
"""
