"""API response schemas."""

from typing import Optional, List, Dict
from pydantic import BaseModel, Field


class EnhanceResponse(BaseModel):
    """Response for prompt enhancement."""
    success: bool
    original_prompt: str
    enhanced_prompt: str
    provider: str
    streamed: bool = False
    fell_back: bool = False
    warnings: List[str] = Field(default_factory=list)
    processing_time_ms: float = 0.0


class HealthResponse(BaseModel):
    """Response for health check."""
    status: str
    version: str
    components: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None
