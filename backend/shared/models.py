"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class Tier(str, Enum):
    """Subscription tiers, ordered by increasing quota."""

    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated principal in the system.

    Populated by the auth gate from the stored principal record (not from
    token claims, which may be stale) and made available to route handlers
    via dependency injection.
    """

    id: str = Field(..., description="Principal ID (UUID)")
    email: EmailStr = Field(..., description="Normalized email address")
    username: Optional[str] = Field(None, description="Optional unique username")
    tier: Tier = Field(default=Tier.FREE, description="Subscription tier")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    is_active: bool = Field(default=True, description="Whether the account is active")

    created_at: Optional[datetime] = Field(None, description="Account creation time")
    last_login_at: Optional[datetime] = Field(None, description="Last successful login")

    # Request-scoped: the session the presented token belongs to
    session_id: Optional[str] = Field(None, description="Current session ID")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
