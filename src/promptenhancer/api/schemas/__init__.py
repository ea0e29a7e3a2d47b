"""API schemas."""

from .requests import EnhanceRequest
from .responses import EnhanceResponse, HealthResponse, ErrorResponse

__all__ = [
    # Requests
    "EnhanceRequest",
    # Responses
    "EnhanceResponse",
    "HealthResponse",
    "ErrorResponse",
]
