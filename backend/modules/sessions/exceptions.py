"""
Session registry exceptions.
"""

from shared.exceptions import AuthorizationError


class SessionNotFoundError(AuthorizationError):
    """
    Raised when a session does not exist or belongs to someone else.

    Both cases deliberately share one error so callers cannot probe for
    other principals' session IDs.
    """

    def __init__(self, session_id: str):
        super().__init__(
            "Session not found",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id},
        )
