"""
Session registry data models.

Timestamps are epoch seconds, matching the ``exp`` claim of the token a
session was opened for.
"""

from typing import Optional
from pydantic import BaseModel, Field


class Session(BaseModel):
    """
    A durable record of an issued token.

    Only the SHA-256 hash of the token is stored. ``expires_at`` always
    equals the ``exp`` claim of that token.
    """

    id: str = Field(..., description="Session ID (UUID)")
    user_id: str = Field(..., description="Owning principal ID")
    token_hash: str = Field(..., description="Hex SHA-256 of the raw token")
    device_info: Optional[str] = Field(None, description="User-Agent at login")
    ip_address: Optional[str] = Field(None, description="Client address at login")
    expires_at: int = Field(..., description="Expiry (epoch seconds)")
    created_at: int = Field(..., description="Creation time (epoch seconds)")
    last_active_at: int = Field(..., description="Last verified use (epoch seconds)")

    def is_expired(self, now: int) -> bool:
        return self.expires_at <= now

    def to_info(self, current_session_id: Optional[str] = None) -> "SessionInfo":
        return SessionInfo(
            id=self.id,
            device_info=self.device_info,
            ip_address=self.ip_address,
            created_at=self.created_at,
            last_active_at=self.last_active_at,
            expires_at=self.expires_at,
            current=self.id == current_session_id,
        )


class SessionInfo(BaseModel):
    """Public view of a session (no token hash)."""

    id: str
    device_info: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: int
    last_active_at: int
    expires_at: int
    current: bool = Field(default=False, description="Whether this is the caller's session")
