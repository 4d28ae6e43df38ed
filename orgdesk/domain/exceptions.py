"""Domain exceptions for orgdesk.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class OrgdeskException(Exception):
    """Base exception for all orgdesk application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error body."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(OrgdeskException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(OrgdeskException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'staff', 'organization').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ResourceAlreadyExistsException(OrgdeskException):
    """Raised when a write violates a unique key (slug, email, token...)."""

    def __init__(self, resource_type: str, field: str, value: str) -> None:
        super().__init__(
            f"{resource_type} with {field} '{value}' already exists",
            "RESOURCE_ALREADY_EXISTS",
            {"resource_type": resource_type, "field": field, "value": value},
        )


class InvalidStateTransitionException(OrgdeskException):
    """Raised when a lifecycle operation is not allowed from the current state."""

    def __init__(
        self, resource_type: str, resource_id: str, current: str, attempted: str
    ) -> None:
        super().__init__(
            f"Cannot {attempted} {resource_type} {resource_id} in state {current}",
            "INVALID_STATE_TRANSITION",
            {
                "resource_type": resource_type,
                "resource_id": resource_id,
                "current": current,
                "attempted": attempted,
            },
        )


class SqlNotConfiguredException(OrgdeskException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
