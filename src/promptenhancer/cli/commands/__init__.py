"""CLI commands."""

from .enhance import enhance, show_config

__all__ = [
    "enhance",
    "show_config",
]
