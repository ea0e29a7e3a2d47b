"""Non-streaming chat-completion client."""

import logging

from ..core.types import EnhancementConfig
from ..core.exceptions import RemoteEmptyResponse
from .base import ChatCompletionClient, extract_content


logger = logging.getLogger(__name__)


class RemoteClient(ChatCompletionClient):
    """Sends one chat-completion request and returns the whole answer."""

    async def enhance(self, text: str, config: EnhancementConfig, api_key: str) -> str:
        """
        Enhance a prompt with a single request/response round trip.

        Args:
            text: Rough prompt to enhance
            config: Resolved configuration
            api_key: Bearer token for the provider

        Returns:
            The trimmed message content of the first choice

        Raises:
            RemoteUnavailable: The provider could not be reached
            RemoteHttpError: Non-success status after the temperature retry
            RemoteEmptyResponse: The success body had no usable content
        """
        body = self.build_request_body(text, config)
        url = config.remote.completions_url
        logger.info(f"Requesting completion from {url} (model={config.remote.model})")

        async with self._get_client() as client:
            response = await self.send(client, url, body, api_key)

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteEmptyResponse(
                "Response body is not valid JSON",
                provider=self.provider_name,
                status_code=response.status_code,
                cause=e
            ) from e

        content = extract_content(data, "choices", 0, "message", "content")
        if not content or not content.strip():
            raise RemoteEmptyResponse(
                "No content returned from provider",
                provider=self.provider_name,
                status_code=response.status_code
            )

        enhanced = content.strip()
        logger.info(f"Received {len(enhanced)} chars")
        return enhanced
