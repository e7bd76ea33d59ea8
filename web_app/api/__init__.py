"""JSON API routes."""

from .routes import router as api_router, stats_router

__all__ = ["api_router", "stats_router"]
