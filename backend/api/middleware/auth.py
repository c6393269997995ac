"""
Bearer authentication dependencies.

Thin FastAPI adapters over the AuthGate. Any authentication failure,
including a missing or malformed Authorization header, becomes the same
opaque 401.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modules.auth.gate import AuthGate
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_gate

# Bearer token extractor; we raise our own 401 instead of its 403
bearer_scheme = HTTPBearer(auto_error=False)


def _token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials or None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gate: AuthGate = Depends(get_auth_gate),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}

    Raises:
        GateRejection: Rendered as 401 by the exception handlers
    """
    return await gate.authenticate(_token(credentials))


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gate: AuthGate = Depends(get_auth_gate),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Any failure, including a storage error, yields None (anonymous).
    """
    return await gate.authenticate_optional(_token(credentials))

