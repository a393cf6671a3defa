"""API middleware package."""

from athos.api.middleware.error_handler import create_error_response, setup_exception_handlers
from athos.api.middleware.logging import RequestLoggingMiddleware, setup_logging

__all__ = [
    "RequestLoggingMiddleware",
    "create_error_response",
    "setup_exception_handlers",
    "setup_logging",
]
