"""API schemas package."""

from athos.api.schemas.common import CountResponse, ErrorResponse

__all__ = [
    "CountResponse",
    "ErrorResponse",
]
