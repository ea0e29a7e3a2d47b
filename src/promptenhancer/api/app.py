"""FastAPI application factory."""

import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.config import get_settings
from ..core.exceptions import ConfigurationError, PromptEnhancerError
from ..core.resolver import DEFAULT_API_HOST, as_port, as_text
from ..logging_config import setup_logging
from .routes import enhancement_router, health_router
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


async def handle_enhancer_error(request: Request, exc: PromptEnhancerError) -> JSONResponse:
    """Render package errors as ErrorResponse bodies."""
    status_code = 400 if isinstance(exc, ConfigurationError) else 500
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    body = ErrorResponse(error=type(exc).__name__, detail=exc.message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app(
    enable_cors: bool = True,
    cors_origins: Optional[List[str]] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        enable_cors: Whether to enable CORS
        cors_origins: Allowed CORS origins (default: ["*"])

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="promptenhancer API",
        description="Turn rough prompts into structured, actionable ones",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins or ["*"],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.add_exception_handler(PromptEnhancerError, handle_enhancer_error)
    app.include_router(health_router)
    app.include_router(enhancement_router, prefix="/api/v1")

    return app


app = create_app()


def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False
) -> None:
    """
    Run the API server.

    Host and port default to ``PE_API_HOST`` / ``PE_API_PORT``; an unusable
    port falls back to 8000.
    """
    import uvicorn

    settings = get_settings()
    setup_logging(level=settings.logging.level, log_file=settings.logging.file)

    uvicorn.run(
        "promptenhancer.api.app:app",
        host=host or as_text(settings.api.host, DEFAULT_API_HOST),
        port=port or as_port(settings.api.port),
        reload=reload,
    )


if __name__ == "__main__":
    run_server()
