"""
Base exception classes for the QHub backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base family to exactly one HTTP status, so a module
exception only has to pick the right parent.
"""

from typing import Optional, Any


class QHubError(Exception):
    """
    Base exception for all QHub errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(QHubError):
    """Resource not found."""

    pass


class ValidationError(QHubError):
    """Input validation failed."""

    pass


class ConflictError(QHubError):
    """The resource already exists (duplicate identity)."""

    pass


class AuthenticationError(QHubError):
    """
    Authentication failed (invalid or missing credentials, token or session).

    The message and code are for server-side logs only. The API always
    renders these as one opaque 401.
    """

    pass


class AuthorizationError(QHubError):
    """
    The caller is authenticated but may not touch the resource.

    Rendered as 404 so the response does not confirm the resource exists.
    """

    pass


class QuotaExceededError(QHubError):
    """A metered action was denied because the principal is at its limit."""

    def __init__(
        self,
        resource: str,
        current: int,
        limit: int,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"Quota exceeded for {resource} ({current}/{limit})",
            code="QUOTA_EXCEEDED",
            details={"resource": resource, "current": current, "limit": limit},
        )
        self.resource = resource
        self.current = current
        self.limit = limit


class DependencyError(QHubError):
    """Error communicating with a backing service (storage)."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
