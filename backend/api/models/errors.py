"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format (QHubError.to_dict())."""

    error: str = Field(..., description="Stable error code")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
