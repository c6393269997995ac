"""
Quota module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class UnknownResourceError(ValidationError):
    """Raised for a resource type with no limit table entry."""

    def __init__(self, resource: str):
        super().__init__(
            f"Unknown resource type: {resource}",
            code="UNKNOWN_RESOURCE",
            details={"resource": resource},
        )


class QuotaPrincipalNotFoundError(NotFoundError):
    """Raised when the principal whose tier sets the limit does not exist."""

    def __init__(self, principal_id: str):
        super().__init__(
            f"Principal not found: {principal_id}",
            code="PRINCIPAL_NOT_FOUND",
            details={"principal_id": principal_id},
        )
