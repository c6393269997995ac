"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. This enables testing with fakes and swapping the
storage backend without touching business logic.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser, Tier
from modules.sessions.models import SessionInfo

from .models import AuthResult, IssuedToken, Principal, StoredCredential, TokenClaims


@runtime_checkable
class IPrincipalRepository(Protocol):
    """Durable storage for principals and their password hashes."""

    def insert(self, principal: Principal, password_hash: str) -> Principal:
        """
        Insert a new principal.

        Raises:
            DuplicateEmailError: If the email is taken
            DuplicateUsernameError: If the username is taken
        """
        ...

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        """Get a principal by ID."""
        ...

    def get_by_email(self, email: str) -> Optional[StoredCredential]:
        """Get a principal and its hash by normalized email."""
        ...

    def email_exists(self, email: str) -> bool:
        """Whether a normalized email is registered."""
        ...

    def username_exists(self, username: str) -> bool:
        """Whether a username is registered."""
        ...

    def update(self, principal_id: str, fields: dict[str, Any]) -> Optional[Principal]:
        """Apply a partial update. Returns None if the principal is unknown."""
        ...

    def set_password_hash(self, principal_id: str, password_hash: str) -> None:
        """Replace the stored password hash."""
        ...

    def delete(self, principal_id: str) -> bool:
        """Remove a principal outright. Returns False if it was unknown."""
        ...


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Interface for credential operations.

    The only component allowed to write password hashes.
    """

    async def create(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> Principal:
        """
        Register a principal.

        Raises:
            DuplicateEmailError, DuplicateUsernameError, WeakPasswordError,
            InvalidEmailError
        """
        ...

    async def verify(self, email: str, password: str) -> Principal:
        """
        Check an email/password pair.

        Raises:
            InvalidCredentialsError: For unknown email, wrong password or
                inactive principal alike
        """
        ...

    async def get_principal(self, principal_id: str) -> Optional[Principal]:
        """Get a principal by ID."""
        ...

    async def deactivate(self, principal_id: str) -> Principal:
        """Flip the active flag off."""
        ...

    async def change_tier(self, principal_id: str, tier: Tier) -> Principal:
        """Move a principal to another tier."""
        ...

    async def discard(self, principal_id: str) -> None:
        """Remove a principal whose registration did not complete."""
        ...


@runtime_checkable
class ITokenService(Protocol):
    """Mints and statelessly verifies bearer tokens."""

    def issue(self, principal: Principal, ttl_seconds: Optional[int] = None) -> IssuedToken:
        """Sign a token for the principal."""
        ...

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry without any I/O.

        Raises:
            MalformedTokenError, BadSignatureError, ExpiredTokenError
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the account/session flows behind /auth.

    This protocol defines the contract that the auth module exposes
    to the HTTP layer.
    """

    async def register(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        """Create a principal and its first session."""
        ...

    async def login(
        self,
        email: str,
        password: str,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        """Verify credentials and open a session."""
        ...

    async def logout(self, user: AuthenticatedUser) -> None:
        """Revoke the caller's current session."""
        ...

    async def logout_all(self, principal_id: str) -> int:
        """Revoke every session of the principal."""
        ...

    async def list_sessions(self, user: AuthenticatedUser) -> list[SessionInfo]:
        """Live sessions of the caller, most recently active first."""
        ...

    async def revoke_session(self, principal_id: str, session_id: str) -> None:
        """Revoke one of the caller's sessions."""
        ...
