"""
Request and response models for the /auth endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from modules.sessions.models import SessionInfo
from shared.models import Tier


class RegisterRequest(BaseModel):
    """Registration payload. Email and password rules are enforced by the credential store."""

    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=1024)
    username: Optional[str] = Field(None, max_length=64)


class LoginRequest(BaseModel):
    """Login payload."""

    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=1024)


class PrincipalResponse(BaseModel):
    """Public view of a principal."""

    id: str
    email: str
    username: Optional[str] = None
    tier: Tier


class AuthResponse(BaseModel):
    """Returned by register and login."""

    token: str
    principal: PrincipalResponse
    expires_at: int = Field(..., description="Token expiry (epoch seconds)")


class PrincipalDetailResponse(PrincipalResponse):
    """Principal with its status flags, as seen by the auth gate."""

    is_active: bool
    email_verified: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    session_id: Optional[str] = None


class VerifyResponse(BaseModel):
    principal: PrincipalDetailResponse


class SessionListResponse(BaseModel):
    sessions: list[SessionInfo]


class MessageResponse(BaseModel):
    message: str


class LogoutAllResponse(MessageResponse):
    revoked: int = Field(..., description="Number of sessions revoked")


class WhoAmIResponse(BaseModel):
    authenticated: bool
    principal: Optional[PrincipalResponse] = None
