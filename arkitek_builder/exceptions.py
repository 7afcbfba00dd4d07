"""
Custom exception classes for Arkitek Builder.

This module defines a hierarchy of custom exceptions that provide structured
error handling throughout the application.
"""

import logging
from typing import Optional, Dict, Any, List
from enum import Enum


logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for the application."""

    # General errors
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Persistence errors
    STORAGE_ERROR = "STORAGE_ERROR"


class ArkitekBuilderError(Exception):
    """Base exception class for all Arkitek Builder errors.

    It carries a standardized error code, a human-readable message and
    additional context details that end up in API error responses.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Standardized error code
            details: Additional error context and details
            cause: The underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        logger.debug(f"Exception created: {error_code.value} - {message}", exc_info=cause)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format for API responses."""
        result = {
            "error": self.error_code.value,
            "message": self.message,
            "details": dict(self.details)
        }

        if self.cause:
            result["details"]["cause"] = str(self.cause)
            result["details"]["cause_type"] = type(self.cause).__name__

        return result


# Validation Exceptions

class ValidationError(ArkitekBuilderError):
    """Raised when input validation fails."""

    def __init__(
        self,
        field: str,
        value: Any,
        reason: str,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            message=f"Validation failed for field '{field}': {reason}",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"field": field, "value": value, "reason": reason},
            cause=cause
        )
        self.field = field
        self.value = value
        self.reason = reason


class MissingFieldError(ValidationError):
    """Raised when one or more required fields are absent or empty."""

    def __init__(self, fields: List[str]):
        ArkitekBuilderError.__init__(
            self,
            message=f"Missing required field(s): {', '.join(fields)}",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"missing_fields": list(fields)}
        )
        self.field = ", ".join(fields)
        self.value = None
        self.reason = "field is required"
        self.fields = list(fields)


class InvalidServerCountError(ValidationError):
    """Raised when a boot script is requested for an unusable server count."""

    def __init__(self, value: Any, maximum: int):
        super().__init__(
            field="serverCount",
            value=value,
            reason=f"must be an integer between 1 and {maximum}"
        )
        self.details["maximum"] = maximum


# Persistence Exceptions

class PersistenceError(ArkitekBuilderError):
    """Raised when the link collection cannot be written to storage."""

    def __init__(
        self,
        message: str,
        backend_type: str,
        operation: str,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.STORAGE_ERROR,
            details={"backend_type": backend_type, "operation": operation},
            cause=cause
        )
        self.backend_type = backend_type
        self.operation = operation
