"""Domain exceptions for Help From Founder.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class HelpFromFounderException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

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
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(HelpFromFounderException):
    """Raised when input validation fails (e.g. missing name or bad status)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(HelpFromFounderException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(HelpFromFounderException):
    """Raised when the caller lacks permission for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "You do not have permission to perform this action",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'thread', 'project').
            action: Optional action that was attempted (e.g. 'delete', 'close').
            message: Human-readable message shown to the caller.
        """
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(HelpFromFounderException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'project', 'thread').
            resource_id: The ID (or slug) that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DocumentStoreError(HelpFromFounderException):
    """Raised when a document store read or write fails.

    The message is user-facing ("Failed to ... Please try again."); the
    underlying cause is kept in details and logged, never retried.
    """

    def __init__(self, message: str, reason: str | None = None) -> None:
        details = {"reason": reason} if reason else {}
        super().__init__(message, "DOCUMENT_STORE_ERROR", details)


class IdentityProviderError(HelpFromFounderException):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(self, message: str, provider_code: str | None = None) -> None:
        details = {"provider_code": provider_code} if provider_code else {}
        super().__init__(message, "IDENTITY_PROVIDER_ERROR", details)
