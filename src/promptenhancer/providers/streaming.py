"""Streaming chat-completion client and its SSE decoder."""

import codecs
import inspect
import json
import logging
from typing import Awaitable, Callable, List, Optional, Union

import httpx

from ..core.types import EnhancementConfig
from ..core.exceptions import RemoteEmptyResponse, RemoteUnavailable
from .base import ChatCompletionClient, extract_content


logger = logging.getLogger(__name__)

DeltaCallback = Callable[[str], Union[None, Awaitable[None]]]

EVENT_SEPARATOR = "\n\n"
DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class SSEStreamDecoder:
    """
    Incremental decoder for a chat-completion SSE stream.

    State is the UTF-8 decoder, the unconsumed text buffer and the deltas seen
    so far. ``feed`` takes raw bytes in arrival order and returns the text
    deltas completed by that chunk; ``finish`` returns the accumulated answer.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.buffer = ""
        self.deltas: List[str] = []
        self.done = False

    @property
    def accumulated(self) -> str:
        return "".join(self.deltas)

    def feed(self, chunk: bytes) -> List[str]:
        """Consume one chunk and return the deltas it completed."""
        self.buffer += self._decoder.decode(chunk)
        *segments, self.buffer = self.buffer.split(EVENT_SEPARATOR)

        deltas: List[str] = []
        for segment in segments:
            deltas.extend(self._parse_event(segment))
        self.deltas.extend(deltas)
        return deltas

    def _parse_event(self, segment: str) -> List[str]:
        deltas = []
        for line in filter(None, segment.split("\n")):
            if not line.startswith(DATA_PREFIX):
                continue
            payload = line[len(DATA_PREFIX):].strip()
            if payload == DONE_SENTINEL:
                self.done = True
                break
            try:
                data = json.loads(payload)
            except ValueError:
                # keep-alives and comments
                logger.debug(f"Skipping undecodable stream payload: {payload[:80]!r}")
                continue

            fragment = (
                extract_content(data, "choices", 0, "delta", "content")
                or extract_content(data, "choices", 0, "message", "content")
            )
            if fragment:
                deltas.append(fragment)
        return deltas

    def finish(self) -> str:
        """Flush the byte decoder and return the trimmed answer.

        A trailing segment without its blank-line terminator is discarded.
        """
        self.buffer += self._decoder.decode(b"", final=True)
        return self.accumulated.strip()


class StreamingRemoteClient(ChatCompletionClient):
    """Requests a streamed completion and forwards deltas as they arrive."""

    stream = True

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        raise_on_empty: bool = True
    ):
        """
        Args:
            transport: Optional httpx transport
            timeout: Request timeout in seconds; None waits indefinitely
            raise_on_empty: Raise RemoteEmptyResponse when the stream yields no text
        """
        super().__init__(transport=transport, timeout=timeout)
        self.raise_on_empty = raise_on_empty

    async def enhance(
        self,
        text: str,
        config: EnhancementConfig,
        api_key: str,
        on_delta: Optional[DeltaCallback] = None
    ) -> str:
        """
        Enhance a prompt, streaming partial output to ``on_delta``.

        Args:
            text: Rough prompt to enhance
            config: Resolved configuration
            api_key: Bearer token for the provider
            on_delta: Called with each text fragment, in server order; may be async

        Returns:
            The accumulated answer, trimmed

        Raises:
            RemoteUnavailable: The provider could not be reached or the stream broke
            RemoteHttpError: Non-success status before streaming began
            RemoteEmptyResponse: No body, or (with ``raise_on_empty``) no text
        """
        body = self.build_request_body(text, config)
        url = config.remote.completions_url
        decoder = SSEStreamDecoder()
        logger.info(f"Streaming completion from {url} (model={config.remote.model})")

        async with self._get_client() as client:
            response = await self.send(client, url, body, api_key)
            try:
                if response.headers.get("content-length") == "0":
                    raise RemoteEmptyResponse(
                        "Streaming response has no body",
                        provider=self.provider_name,
                        status_code=response.status_code
                    )
                async for chunk in response.aiter_bytes():
                    for delta in decoder.feed(chunk):
                        if on_delta is not None:
                            outcome = on_delta(delta)
                            if inspect.isawaitable(outcome):
                                await outcome
            except httpx.TransportError as e:
                raise RemoteUnavailable(
                    f"Stream from {url} was interrupted: {e}",
                    provider=self.provider_name,
                    cause=e
                ) from e
            finally:
                await response.aclose()

        enhanced = decoder.finish()
        logger.info(f"Stream complete: {len(decoder.deltas)} deltas, {len(enhanced)} chars")
        if not enhanced and self.raise_on_empty:
            raise RemoteEmptyResponse(
                "Stream ended without any content",
                provider=self.provider_name,
                status_code=response.status_code
            )
        return enhanced
