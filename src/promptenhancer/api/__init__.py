"""REST API for prompt enhancement (plain and server-sent-event endpoints)."""

from .app import app, create_app, run_server
from .routes import get_dispatcher

__all__ = [
    "app",
    "create_app",
    "run_server",
    "get_dispatcher",
]
