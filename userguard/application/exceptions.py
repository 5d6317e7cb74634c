"""Application layer exceptions."""

from typing import Any, Optional


class ApplicationError(Exception):
    """Base exception for all application layer errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of error."""
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"


class NotFoundError(ApplicationError):
    """Raised when a record expected to exist is missing from storage."""

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
    ):
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(message, "NOT_FOUND", details)


class ValidationError(ApplicationError):
    """
    Raised when input or configuration is malformed.

    Surfaces as a configuration error to the host, never as a
    user-facing authentication failure.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
    ):
        """
        Initialize validation error.

        Args:
            message: Human-readable error message
            field: Field that failed validation
            value: Invalid value
            constraint: Constraint that was violated
        """
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(message, "VALIDATION_ERROR", details)
