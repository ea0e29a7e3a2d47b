"""Shared plumbing for OpenAI-compatible chat-completion clients."""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

import httpx

from ..core.types import EnhancementConfig
from ..core.exceptions import RemoteHttpError, RemoteUnavailable
from .prompts import messages_payload


logger = logging.getLogger(__name__)

TEMPERATURE_REJECTION = re.compile(r"temperature", re.IGNORECASE)


def extract_content(payload: Any, *path: Any) -> Optional[str]:
    """Walk ``payload`` along ``path``; return the string found there, if any."""
    node = payload
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or len(node) <= key:
                return None
        elif not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node if isinstance(node, str) else None


def is_temperature_rejection(status: int, body: str, request_body: Dict[str, Any]) -> bool:
    """True when a 400 response blames the temperature the request actually sent."""
    return (
        status == 400
        and "temperature" in request_body
        and TEMPERATURE_REJECTION.search(body or "") is not None
    )


class ChatCompletionClient(ABC):
    """
    Base class for the remote enhancement clients.

    Builds the request, opens a fresh HTTP client per call and applies the
    temperature-rejection retry. Subclasses decide how the body is consumed.
    """

    provider_name = "remote"
    stream = False

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        """
        Args:
            transport: Optional httpx transport (used to fake the network in tests)
            timeout: Request timeout in seconds; None waits indefinitely
        """
        self.transport = transport
        self.timeout = timeout

    def build_request_body(self, text: str, config: EnhancementConfig) -> Dict[str, Any]:
        """JSON body for ``/chat/completions``."""
        body: Dict[str, Any] = {
            "model": config.remote.model,
            "messages": messages_payload(text, config.tone, config.system_prompt),
        }
        if self.stream:
            body["stream"] = True
        temperature = config.remote.effective_temperature
        if temperature is not None:
            body["temperature"] = temperature
        return body

    @staticmethod
    def build_headers(api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def _get_client(self) -> httpx.AsyncClient:
        """Create a new HTTP client for one call."""
        return httpx.AsyncClient(transport=self.transport, timeout=self.timeout)

    async def _post(
        self,
        client: httpx.AsyncClient,
        url: str,
        body: Dict[str, Any],
        api_key: str
    ) -> httpx.Response:
        request = client.build_request("POST", url, json=body, headers=self.build_headers(api_key))
        try:
            return await client.send(request, stream=self.stream)
        except httpx.TransportError as e:
            raise RemoteUnavailable(
                f"Could not reach {url}: {e}",
                provider=self.provider_name,
                cause=e
            ) from e

    @staticmethod
    async def _safe_text(response: httpx.Response) -> str:
        try:
            await response.aread()
            return response.text
        except httpx.HTTPError:
            return "<no body>"
        finally:
            await response.aclose()

    async def send(
        self,
        client: httpx.AsyncClient,
        url: str,
        body: Dict[str, Any],
        api_key: str
    ) -> httpx.Response:
        """
        POST the request and return a successful response.

        A 400 that mentions temperature is retried once without the
        temperature field. Every other failure raises RemoteHttpError.
        """
        response = await self._post(client, url, body, api_key)
        if response.is_success:
            return response

        error_body = await self._safe_text(response)
        if is_temperature_rejection(response.status_code, error_body, body):
            logger.info("Provider rejected temperature; retrying once without it")
            body.pop("temperature", None)
            response = await self._post(client, url, body, api_key)
            if response.is_success:
                return response
            error_body = await self._safe_text(response)

        logger.warning(f"Remote request failed with status {response.status_code}")
        raise RemoteHttpError(
            response.status_code,
            error_body,
            provider=self.provider_name
        )

    @abstractmethod
    async def enhance(self, text: str, config: EnhancementConfig, api_key: str, *args, **kwargs) -> str:
        """Enhance ``text`` remotely and return the final text."""
