"""API route handlers."""

from .insights import router as insights_router
