"""Health check routes."""

from fastapi import APIRouter

from ..schemas import HealthResponse
from ... import __version__
from ...core.config import get_settings, load_raw_settings
from ...core.credentials import EnvironmentCredentialStore, resolve_api_key
from ...core.resolver import resolve_config

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    The local enhancer is always available; the remote provider is reported
    as configured only when a credential can be resolved.
    """
    config = resolve_config(load_raw_settings())
    store = EnvironmentCredentialStore(get_settings().remote.api_key_env_var)
    has_key = resolve_api_key(store, config.remote.api_key) is not None

    components = {
        "local": "healthy",
        "remote": "configured" if has_key else "not_configured",
        "provider": config.provider,
    }

    return HealthResponse(
        status="healthy",
        version=__version__,
        components=components
    )


@router.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "promptenhancer API",
        "version": __version__,
        "description": "Turn rough prompts into structured, actionable ones",
        "docs": "/docs",
        "endpoints": {
            "enhance": "/api/v1/enhance",
            "enhance_stream": "/api/v1/enhance/stream",
            "health": "/health"
        }
    }
