"""API routes."""

from .enhancement import router as enhancement_router, get_dispatcher
from .health import router as health_router

__all__ = [
    "enhancement_router",
    "health_router",
    "get_dispatcher",
]
