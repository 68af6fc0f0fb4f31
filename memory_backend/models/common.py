"""
Common response models.

Shared response envelopes used across routers.

Dependencies: pydantic
System role: Cross-cutting API contracts
"""

from typing import Any

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Generic success response."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error body returned by the exception mapping layer."""

    error: str = Field(description="Human-readable error message")
    error_type: str = Field(description="Exception class name")
    details: dict[str, Any] = Field(default_factory=dict)
