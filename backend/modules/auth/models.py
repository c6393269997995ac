"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from shared.models import AuthenticatedUser, Tier


class Principal(BaseModel):
    """
    A registered account.

    Never carries the password hash; that lives only in StoredCredential,
    which does not leave the credential store.
    """

    id: str = Field(..., description="Principal ID (UUID)")
    email: EmailStr = Field(..., description="Normalized (lower-cased) email")
    username: Optional[str] = Field(None, description="Optional unique username")
    tier: Tier = Field(default=Tier.FREE, description="Subscription tier")
    is_active: bool = Field(default=True, description="Deactivated accounts cannot authenticate")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Last update time")
    last_login_at: Optional[datetime] = Field(None, description="Last successful login")

    def to_authenticated_user(self, session_id: Optional[str] = None) -> AuthenticatedUser:
        """Request-scoped view handed to route handlers."""
        return AuthenticatedUser(
            id=self.id,
            email=self.email,
            username=self.username,
            tier=self.tier,
            email_verified=self.email_verified,
            is_active=self.is_active,
            created_at=self.created_at,
            last_login_at=self.last_login_at,
            session_id=session_id,
        )


class StoredCredential(BaseModel):
    """A principal together with its password hash (storage-internal)."""

    principal: Principal
    password_hash: str


class TokenClaims(BaseModel):
    """
    Decoded bearer token payload.

    ``jti`` makes every issued token unique, so two logins in the same
    second still map to distinct session rows.
    """

    sub: str = Field(..., description="Subject (principal ID)")
    email: str = Field(..., description="Principal email at issue time")
    tier: Tier = Field(..., description="Principal tier at issue time")
    iat: int = Field(..., description="Issued at (epoch seconds)")
    exp: int = Field(..., description="Expiry (epoch seconds)")
    jti: str = Field(..., description="Unique token ID")

    model_config = {"frozen": True, "extra": "ignore"}


class IssuedToken(BaseModel):
    """A freshly minted token. The raw value must not be persisted."""

    token: str
    expires_at: int = Field(..., description="Expiry (epoch seconds), equal to claims.exp")
    claims: TokenClaims


class AuthResult(BaseModel):
    """Outcome of a successful register or login."""

    token: str
    principal: Principal
    expires_at: int
    session_id: str
