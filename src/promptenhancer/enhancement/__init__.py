"""Prompt enhancement module."""

from .local import LocalEnhancer, summarize_one_liner, infer_domain, SECTION_HEADERS
from .dispatcher import EnhancementDispatcher, enhance, enhance_sync
from .command import run_enhance_command, acquire_input, choose_action

__all__ = [
    # Orchestrator
    "EnhancementDispatcher",
    # Convenience functions
    "enhance",
    "enhance_sync",
    # Local template
    "LocalEnhancer",
    "summarize_one_liner",
    "infer_domain",
    "SECTION_HEADERS",
    # Command flow
    "run_enhance_command",
    "acquire_input",
    "choose_action",
]
