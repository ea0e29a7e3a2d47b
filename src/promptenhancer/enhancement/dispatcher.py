"""Provider dispatch with guaranteed local fallback."""

import asyncio
import logging
import time
from typing import Any, Callable, List, Mapping, Optional

from ..core.types import EnhancementConfig, EnhancementResult, Provider
from ..core.exceptions import MissingCredential
from ..core.resolver import resolve_config
from ..providers import RemoteClient, StreamingRemoteClient, DeltaCallback
from .local import LocalEnhancer


logger = logging.getLogger(__name__)

WarningCallback = Callable[[str], None]

MISSING_KEY_WARNING = "API key not set. Using local enhancer instead."


class EnhancementDispatcher:
    """
    Chooses how a prompt gets enhanced.

    - local provider: the template enhancer
    - remote provider without a key: warn, then the template enhancer
    - remote provider with a key: streaming or single-shot client; any
      failure is reported as a warning and masked by the template enhancer

    ``enhance`` therefore always returns a usable result.
    """

    def __init__(
        self,
        local: Optional[LocalEnhancer] = None,
        remote_client: Optional[RemoteClient] = None,
        streaming_client: Optional[StreamingRemoteClient] = None,
        on_warning: Optional[WarningCallback] = None
    ):
        """
        Args:
            local: Template enhancer
            remote_client: Non-streaming remote client
            streaming_client: Streaming remote client
            on_warning: Receives each user-visible warning
        """
        self.local = local or LocalEnhancer()
        self.remote_client = remote_client or RemoteClient()
        self.streaming_client = streaming_client or StreamingRemoteClient()
        self.on_warning = on_warning

    @staticmethod
    def require_key(api_key: Optional[str]) -> str:
        if not api_key:
            raise MissingCredential(MISSING_KEY_WARNING)
        return api_key

    def _warn(self, message: str, warnings: List[str]) -> None:
        logger.warning(message)
        warnings.append(message)
        if self.on_warning is not None:
            self.on_warning(message)

    async def enhance(
        self,
        text: str,
        config: EnhancementConfig,
        api_key: Optional[str] = None,
        on_delta: Optional[DeltaCallback] = None
    ) -> EnhancementResult:
        """
        Enhance ``text`` according to ``config``.

        Args:
            text: Rough prompt
            config: Resolved configuration
            api_key: Credential for the remote provider, if any
            on_delta: Receives streamed fragments when streaming is used

        Returns:
            EnhancementResult; never raises for remote failures
        """
        start_time = time.time()
        warnings: List[str] = []
        result = EnhancementResult(original=text, text="", provider=config.provider, warnings=warnings)

        if not config.is_remote:
            result.provider = Provider.LOCAL.value
            result.text = self.local.enhance(text)
        else:
            try:
                api_key = self.require_key(api_key)
                if config.remote.streaming:
                    result.text = await self.streaming_client.enhance(text, config, api_key, on_delta)
                    result.streamed = True
                else:
                    result.text = await self.remote_client.enhance(text, config, api_key)
            except MissingCredential as e:
                self._warn(e.message, warnings)
                result.text = self.local.enhance(text)
                result.fell_back = True
            except Exception as e:
                logger.debug("Remote enhancement error", exc_info=True)
                self._warn(f"Enhancement failed: {e}", warnings)
                result.text = self.local.enhance(text)
                result.fell_back = True

        result.processing_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Enhanced via {result.provider}"
            f"{' (local fallback)' if result.fell_back else ''}: {len(result.text)} chars"
        )
        return result

    def enhance_sync(
        self,
        text: str,
        config: EnhancementConfig,
        api_key: Optional[str] = None,
        on_delta: Optional[DeltaCallback] = None
    ) -> EnhancementResult:
        """Synchronous version of enhance."""
        return asyncio.run(self.enhance(text, config, api_key, on_delta))


# Convenience functions

async def enhance(
    text: str,
    settings: Optional[Mapping[str, Any]] = None,
    api_key: Optional[str] = None,
    on_delta: Optional[DeltaCallback] = None
) -> EnhancementResult:
    """
    Convenience function to enhance a prompt.

    Args:
        text: The prompt to enhance
        settings: Raw settings mapping, resolved with ``resolve_config``
        api_key: Credential for the remote provider
        on_delta: Receives streamed fragments

    Returns:
        EnhancementResult with the enhanced prompt
    """
    config = resolve_config(settings)
    return await EnhancementDispatcher().enhance(text, config, api_key, on_delta)


def enhance_sync(
    text: str,
    settings: Optional[Mapping[str, Any]] = None,
    api_key: Optional[str] = None,
    on_delta: Optional[DeltaCallback] = None
) -> EnhancementResult:
    """Synchronous version of enhance."""
    return asyncio.run(enhance(text, settings, api_key, on_delta))
