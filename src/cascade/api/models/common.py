"""
Common API models used across different endpoints.

These models represent shared concepts like errors and health status.
"""

from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional


class ErrorResponse(BaseModel):
    """Standard error response format."""
    error: str = Field(..., description="Short error category")
    message: str = Field(..., description="Human-readable error message")


class HealthStatus(BaseModel):
    """Health check response."""
    status: Literal["healthy", "unhealthy"] = Field(..., description="Service status")
    timestamp: str = Field(..., description="ISO-8601 time of the check")
    environment: Optional[str] = Field(None, description="Deployment mode")
    models: Optional[Dict[str, bool]] = Field(None, description="Which model identifiers are configured")
    error: Optional[str] = Field(None, description="Why the service is unhealthy")
