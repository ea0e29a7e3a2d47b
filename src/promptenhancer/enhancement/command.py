"""The end-to-end "enhance selection" flow."""

import logging
from typing import Optional

from ..core.types import EnhancementConfig, EnhancementResult, PlacementAction, ResolvedAction
from ..core.credentials import CredentialStore, resolve_api_key
from ..host import Host, accept_input, clipboard_preview
from .dispatcher import EnhancementDispatcher


logger = logging.getLogger(__name__)


def acquire_input(host: Host, config: EnhancementConfig) -> Optional[str]:
    """
    Get the text to enhance from the host.

    Uses the active selection when it is long enough; otherwise asks for an
    input source (when configured) or prompts for input. Returns None when
    the user cancels or supplies too little text.
    """
    text = accept_input(host.get_active_selection())
    if text is not None:
        return text

    if config.ask_input_source_when_no_selection:
        clipboard = host.read_clipboard()
        source = host.choose_input_source(clipboard_preview(clipboard))
        if not source or source == "cancel":
            return None
        if source == "clipboard":
            text = accept_input(clipboard)
            if text is None:
                host.show_warning("Clipboard is empty or too short.")
            return text

    return accept_input(host.prompt_for_input())


def choose_action(host: Host, config: EnhancementConfig) -> Optional[ResolvedAction]:
    """Final placement and copy flag, asking the host when configured to."""
    if not config.post_action_prompt:
        return config.resolved_action

    choice = host.choose_post_action()
    if not choice:
        return None
    if choice == "copy":
        return ResolvedAction(action=PlacementAction.NONE.value, copy=True)
    return ResolvedAction(action=choice, copy=config.copy_to_clipboard)


async def run_enhance_command(
    host: Host,
    config: EnhancementConfig,
    dispatcher: Optional[EnhancementDispatcher] = None,
    credentials: Optional[CredentialStore] = None
) -> Optional[EnhancementResult]:
    """
    Enhance the host's selection and deliver the result.

    Args:
        host: Editor or terminal capabilities
        config: Resolved configuration
        dispatcher: Dispatcher to use (a default one otherwise)
        credentials: Secret store consulted before the configured key

    Returns:
        The enhancement result, or None if no input was acquired
    """
    text = acquire_input(host, config)
    if text is None:
        logger.info("No input to enhance")
        return None

    api_key = resolve_api_key(credentials, config.remote.api_key) if config.is_remote else None
    dispatcher = dispatcher or EnhancementDispatcher()

    result = await dispatcher.enhance(text, config, api_key, on_delta=host.write_preview)
    for warning in result.warnings:
        host.show_warning(warning)

    action = choose_action(host, config)
    if action is None:
        logger.info("No post action chosen; result not applied")
        return result

    host.apply_result(result.text, action.placement)
    if action.copy and host.copy_to_clipboard(result.text):
        host.show_info("Enhanced prompt copied to clipboard")
    return result
