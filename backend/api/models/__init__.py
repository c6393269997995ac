"""API models package."""

from .auth import (
    AuthResponse,
    LoginRequest,
    LogoutAllResponse,
    MessageResponse,
    PrincipalDetailResponse,
    PrincipalResponse,
    RegisterRequest,
    SessionListResponse,
    VerifyResponse,
    WhoAmIResponse,
)
from .errors import ErrorResponse

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "LogoutAllResponse",
    "MessageResponse",
    "PrincipalDetailResponse",
    "PrincipalResponse",
    "RegisterRequest",
    "SessionListResponse",
    "VerifyResponse",
    "WhoAmIResponse",
    "ErrorResponse",
]
