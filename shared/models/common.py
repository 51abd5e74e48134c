"""
Common Models
=============

Base response models shared by the HTTP services.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = False
    error: str
    error_code: str | None = None
    details: dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = "healthy"
    service: str
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Component health
    components: dict[str, dict[str, Any]] = Field(default_factory=dict)
