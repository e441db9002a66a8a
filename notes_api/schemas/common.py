"""
Notes API — Shared Response Schemas
=====================================

What:  Envelope models used across routers: error body, status message,
       health report.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """
    Acknowledgement for operations that return no resource.

    Example:
        {"status": "success", "message": "note deleted successfully"}
    """

    status: str = Field(default="success")
    message: str


class ErrorResponse(BaseModel):
    """
    Body of every non-2xx response produced by the exception handlers.

    Example:
        {
            "error": "validation_error",
            "message": "Password must be at least 8 characters long",
            "details": {"field": "password", "min_length": 8},
            "request_id": "3f9a1c72"
        }
    """
    error: str = Field(description="Stable code: validation_error, unauthorized, forbidden, ...")
    message: str = Field(description="Safe to show to an end user")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Field name or limits, when relevant")
    request_id: Optional[str] = Field(default=None, description="Same value as the X-Request-ID header")


class HealthResponse(BaseModel):
    """Returned by GET /health; 503 carries the same shape with status=unhealthy."""
    status: str = Field(description="healthy | unhealthy")
    version: str
    database: str = Field(description="connected | disconnected")
    uptime_seconds: float = Field(description="Seconds since this process imported the health module")
