"""Enhancement API routes."""

import asyncio
import json
import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..schemas import EnhanceRequest, EnhanceResponse, ErrorResponse
from ...core.config import get_settings, load_raw_settings, merge_raw
from ...core.credentials import EnvironmentCredentialStore, resolve_api_key
from ...core.resolver import resolve_config
from ...core.types import EnhancementConfig, EnhancementResult
from ...enhancement import EnhancementDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/enhance", tags=["enhancement"])


def get_dispatcher() -> EnhancementDispatcher:
    """Dispatcher dependency; a fresh one per request."""
    return EnhancementDispatcher()


def _resolve(request: EnhanceRequest) -> EnhancementConfig:
    return resolve_config(merge_raw(load_raw_settings(), request.to_raw()))


def _api_key(request: EnhanceRequest, config: EnhancementConfig) -> Optional[str]:
    if request.api_key:
        return request.api_key
    store = EnvironmentCredentialStore(get_settings().remote.api_key_env_var)
    return resolve_api_key(store, config.remote.api_key)


def _response(result: EnhancementResult) -> EnhanceResponse:
    return EnhanceResponse(
        success=True,
        original_prompt=result.original,
        enhanced_prompt=result.text,
        provider=result.provider,
        streamed=result.streamed,
        fell_back=result.fell_back,
        warnings=result.warnings,
        processing_time_ms=result.processing_time_ms,
    )


def _sse(payload) -> str:
    return f"data: {json.dumps(payload)}\n\n"


@router.post(
    "",
    response_model=EnhanceResponse,
    responses={422: {"model": ErrorResponse}}
)
async def enhance_prompt(
    request: EnhanceRequest,
    dispatcher: EnhancementDispatcher = Depends(get_dispatcher)
) -> EnhanceResponse:
    """
    Enhance a rough prompt into a structured one.

    Providers:
    - **local**: deterministic template, no network (default)
    - **remote**: OpenAI-compatible chat completion; falls back to the
      template (with a warning) when no key is set or the call fails
    """
    config = _resolve(request)
    result = await dispatcher.enhance(request.prompt, config, _api_key(request, config))
    return _response(result)


@router.post("/stream")
async def enhance_prompt_stream(
    request: EnhanceRequest,
    dispatcher: EnhancementDispatcher = Depends(get_dispatcher)
) -> StreamingResponse:
    """
    Enhance a prompt and stream partial output as server-sent events.

    Emits ``{"delta": ...}`` events while the remote answer arrives, then
    one ``{"result": ..., "warnings": [...]}`` event and ``[DONE]``.
    """
    config = _resolve(request)
    api_key = _api_key(request, config)
    queue: asyncio.Queue = asyncio.Queue()

    async def produce() -> None:
        try:
            result = await dispatcher.enhance(
                request.prompt,
                config,
                api_key,
                on_delta=lambda delta: queue.put_nowait(("delta", delta)),
            )
        except Exception as e:
            logger.exception("Streaming enhancement failed")
            await queue.put(("error", str(e)))
        else:
            await queue.put(("result", result))

    async def events() -> AsyncIterator[str]:
        task = asyncio.create_task(produce())
        try:
            while True:
                kind, payload = await queue.get()
                if kind == "delta":
                    yield _sse({"delta": payload})
                    continue
                if kind == "result":
                    yield _sse({
                        "result": payload.text,
                        "provider": payload.provider,
                        "fell_back": payload.fell_back,
                        "warnings": payload.warnings,
                    })
                else:
                    yield _sse({"error": payload})
                yield "data: [DONE]\n\n"
                break
        finally:
            if not task.done():
                task.cancel()

    return StreamingResponse(events(), media_type="text/event-stream")
