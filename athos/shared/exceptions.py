"""Shared exceptions for the explorer service.

This module defines a consistent exception hierarchy used across all modules
to standardize error handling and provide clear error semantics.
"""

from typing import Any
from uuid import UUID


class AthosError(Exception):
    """Base exception for all application errors.

    All domain-specific exceptions should inherit from this class
    to enable consistent error handling at the API layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# ===================
# Authentication Errors
# ===================

class AuthenticationError(AthosError):
    """Raised when a bearer token is missing, expired or malformed."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class PermissionDeniedError(AthosError):
    """Raised when the caller may not act on the requested resource."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


# ===================
# Resource Errors
# ===================

class ResourceNotFoundError(AthosError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str,
    ) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            {"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class ContentNotFoundError(ResourceNotFoundError):
    """Raised when content is not found."""

    def __init__(self, content_id: str) -> None:
        super().__init__("Content", content_id)


class QuizNotFoundError(ResourceNotFoundError):
    """Raised when a quiz is not found."""

    def __init__(self, quiz_id: str) -> None:
        super().__init__("Quiz", quiz_id)


class SectionNotFoundError(ResourceNotFoundError):
    """Raised when a module/section pair is not part of the curriculum."""

    def __init__(self, module_id: str, section_id: str | None = None) -> None:
        resource_id = f"{module_id}/{section_id}" if section_id else module_id
        super().__init__("Section" if section_id else "Module", resource_id)


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a user is not found."""

    def __init__(self, user_id: UUID) -> None:
        super().__init__("User", user_id)


class LearningPathNotFoundError(ResourceNotFoundError):
    """Raised when a learning path has not been created yet."""

    def __init__(self, user_id: UUID) -> None:
        super().__init__("LearningPath", user_id)


class SuggestionNotFoundError(ResourceNotFoundError):
    """Raised when an adaptive suggestion id is unknown."""

    def __init__(self, suggestion_id: str) -> None:
        super().__init__("Suggestion", suggestion_id)


# ===================
# Validation Errors
# ===================

class ValidationError(AthosError):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            f"Validation error for '{field}': {message}",
            {"field": field}
        )


class ActivityValidationError(ValidationError):
    """Raised when a progress activity has one or more invalid fields.

    Carries every field-level problem at once so the caller can show
    them together.
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        fields = ", ".join(error["field"] for error in errors)
        super().__init__(fields, "; ".join(error["message"] for error in errors))
        self.message = "Invalid progress activity"
        self.errors = errors
        self.details = {"errors": errors}


class InvalidPreferenceError(ValidationError):
    """Raised when a learning style or difficulty value is unknown."""

    def __init__(self, field: str, value: str, allowed: list[str]) -> None:
        super().__init__(
            field,
            f"'{value}' is not one of: {', '.join(allowed)}"
        )
        self.details["allowed"] = allowed


# ===================
# Transaction Errors
# ===================

class TransactionAbortedError(AthosError):
    """Raised when a multi-step write was rolled back.

    Nothing from the operation was persisted, so the caller may retry it.
    """

    retryable = True

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"{operation} was aborted: {reason}",
            {"operation": operation, "retryable": True}
        )


# ===================
# Configuration Errors
# ===================

class ConfigurationError(AthosError):
    """Raised when there's a configuration problem."""
    pass


class CatalogFormatError(ConfigurationError):
    """Raised when a catalog seed document cannot be parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Invalid catalog document {source}: {reason}",
            {"source": source}
        )
