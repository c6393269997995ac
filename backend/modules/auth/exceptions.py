"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.

Everything deriving from AuthenticationError collapses into a single
opaque 401 at the API boundary; the specific class and ``reason`` only
reach server-side logs.
"""

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class DuplicateEmailError(ConflictError):
    """Raised when registering an email that already exists."""

    def __init__(self, email: str):
        super().__init__(
            "Email already registered",
            code="DUPLICATE_EMAIL",
            details={"field": "email"},
        )
        self.email = email


class DuplicateUsernameError(ConflictError):
    """Raised when registering a username that is already taken."""

    def __init__(self, username: str):
        super().__init__(
            "Username already taken",
            code="DUPLICATE_USERNAME",
            details={"field": "username"},
        )
        self.username = username


class WeakPasswordError(ValidationError):
    """Raised when a password does not meet the length policy."""

    def __init__(self, min_length: int):
        super().__init__(
            f"Password must be at least {min_length} characters",
            code="WEAK_PASSWORD",
            details={"min_length": min_length},
        )


class InvalidEmailError(ValidationError):
    """Raised when an email address is malformed."""

    def __init__(self):
        super().__init__("Invalid email format", code="INVALID_EMAIL")


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when email/password verification fails.

    The message is identical for every cause. ``reason`` is one of
    ``unknown_email``, ``wrong_password`` or ``inactive`` and is for logs.
    """

    def __init__(self, reason: str):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")
        self.reason = reason


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidTokenError(AuthenticationError):
    """Base class for tokens that fail stateless verification."""

    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when a token cannot be decoded or lacks required claims."""

    def __init__(self, message: str = "Malformed authentication token"):
        super().__init__(message, code="MALFORMED_TOKEN")


class BadSignatureError(InvalidTokenError):
    """Raised when a token's signature does not match the server secret."""

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message, code="BAD_SIGNATURE")


class ExpiredTokenError(InvalidTokenError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class RevokedSessionError(AuthenticationError):
    """Raised when a valid token's session has been revoked or expired."""

    def __init__(self):
        super().__init__("Session is no longer active", code="SESSION_REVOKED")


class InactivePrincipalError(AuthenticationError):
    """Raised when the token's principal is missing or deactivated."""

    def __init__(self, principal_id: str):
        super().__init__(
            "Principal is inactive",
            code="PRINCIPAL_INACTIVE",
            details={"principal_id": principal_id},
        )


class PrincipalNotFoundError(NotFoundError):
    """Raised by admin-style operations on an unknown principal."""

    def __init__(self, principal_id: str):
        super().__init__(
            f"Principal not found: {principal_id}",
            code="PRINCIPAL_NOT_FOUND",
            details={"principal_id": principal_id},
        )
