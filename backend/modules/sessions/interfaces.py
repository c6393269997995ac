"""
Session registry interfaces.

The registry is what makes a self-verifying token revocable: a token is
only honoured while its hash is still registered here.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import Session


@runtime_checkable
class IPrincipalLookup(Protocol):
    """
    Read access to principals, used for the liveness half of is_live.

    Satisfied by the auth module's principal repositories; declared here
    so the registry does not import the auth module.
    """

    def get_by_id(self, principal_id: str) -> Optional[Any]:
        """Object with an ``is_active`` attribute, or None."""
        ...


@runtime_checkable
class ISessionRepository(Protocol):
    """Durable session storage."""

    def insert(self, session: Session) -> Session:
        """Store a new session."""
        ...

    def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        """Get a session by token hash, expired or not."""
        ...

    def list_for_user(self, user_id: str, now: int) -> list[Session]:
        """Sessions of a principal with expires_at > now."""
        ...

    def touch(self, session_id: str, now: int) -> None:
        """Set last_active_at."""
        ...

    def delete_owned(self, session_id: str, user_id: str) -> bool:
        """
        Delete a session only if it belongs to user_id.

        Single atomic step. Returns whether a row was deleted.
        """
        ...

    def delete_all_for_user(self, user_id: str) -> int:
        """Delete every session of a principal. Returns rows deleted."""
        ...

    def delete_expired(self, now: int) -> int:
        """Delete sessions with expires_at <= now. Returns rows deleted."""
        ...


@runtime_checkable
class ISessionRegistry(Protocol):
    """Interface for session lifecycle operations."""

    async def register(
        self,
        principal_id: str,
        token_hash: str,
        expires_at: int,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> str:
        """Record an issued token. Returns the session ID."""
        ...

    async def is_live(self, token_hash: str) -> bool:
        """True iff the session exists, is unexpired and its principal is active."""
        ...

    async def revoke(self, session_id: str, principal_id: str) -> None:
        """
        Delete a session owned by principal_id.

        Raises:
            SessionNotFoundError: If missing or owned by someone else
        """
        ...

    async def revoke_all(self, principal_id: str) -> int:
        """Delete all sessions of a principal."""
        ...

    async def list(self, principal_id: str) -> list[Session]:
        """Unexpired sessions, most recently active first."""
        ...

    async def sweep_expired(self) -> int:
        """Delete expired sessions. Idempotent."""
        ...
