"""Common API response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from athos.shared.datetime_utils import utc_now


class ErrorResponse(BaseModel):
    """Structured error response."""

    success: bool = False
    error: dict[str, Any] = Field(
        ...,
        description="Error details",
        examples=[{
            "code": "VALIDATION_ERROR",
            "message": "Invalid progress activity",
            "details": {"errors": [{"field": "module_id", "message": "Module ID is required"}]},
        }],
    )
    request_id: str = Field(
        ...,
        description="Unique request identifier for debugging",
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="Error timestamp",
    )


class CountResponse(BaseModel):
    """Number of affected items."""

    count: int = Field(
        ...,
        description="Number of items affected",
    )
