"""
Authentication endpoints.

Registration, login, logout and per-device session management. Errors
are raised as QHubError subclasses and rendered by api.errors.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from modules.auth.interfaces import IAuthService
from modules.auth.models import AuthResult
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service
from ..middleware.auth import get_current_user, get_optional_user
from ..models.auth import (
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
from ..models.errors import ErrorResponse

router = APIRouter()

MAX_DEVICE_INFO_LENGTH = 512


def client_ip(request: Request) -> Optional[str]:
    """
    Best-effort client address.

    Prefers the CDN header, then the first X-Forwarded-For hop, then the
    socket peer.
    """
    ip = request.headers.get("cf-connecting-ip")
    if ip:
        return ip.strip()
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def device_info(request: Request) -> Optional[str]:
    user_agent = request.headers.get("user-agent")
    return user_agent[:MAX_DEVICE_INFO_LENGTH] if user_agent else None


def _auth_response(result: AuthResult) -> AuthResponse:
    principal = result.principal
    return AuthResponse(
        token=result.token,
        principal=PrincipalResponse(
            id=principal.id,
            email=principal.email,
            username=principal.username,
            tier=principal.tier,
        ),
        expires_at=result.expires_at,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    body: RegisterRequest,
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Create an account on the free tier and open its first session.
    """
    result = await service.register(
        body.email,
        body.password,
        body.username,
        device_info=device_info(request),
        ip_address=client_ip(request),
    )
    return _auth_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Exchange email and password for a bearer token.

    Unknown email, wrong password and deactivated account all return
    the same 401.
    """
    result = await service.login(
        body.email,
        body.password,
        device_info=device_info(request),
        ip_address=client_ip(request),
    )
    return _auth_response(result)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Revoke the session of the presented token.
    """
    await service.logout(user)
    return MessageResponse(message="Logged out successfully")


@router.post("/logout-all", response_model=LogoutAllResponse)
async def logout_all(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> LogoutAllResponse:
    """
    Revoke every session of the caller, including the current one.
    """
    revoked = await service.logout_all(user.id)
    return LogoutAllResponse(message="Logged out from all devices", revoked=revoked)


@router.get("/verify", response_model=VerifyResponse)
async def verify(
    user: AuthenticatedUser = Depends(get_current_user),
) -> VerifyResponse:
    """
    Return the caller's principal as currently stored.
    """
    return VerifyResponse(
        principal=PrincipalDetailResponse(
            id=user.id,
            email=user.email,
            username=user.username,
            tier=user.tier,
            is_active=user.is_active,
            email_verified=user.email_verified,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
            session_id=user.session_id,
        )
    )


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> SessionListResponse:
    """
    List the caller's unexpired sessions, most recently active first.
    """
    return SessionListResponse(sessions=await service.list_sessions(user))


@router.delete(
    "/sessions/{session_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_session(
    session_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Revoke one of the caller's sessions.

    A session that does not exist and one owned by someone else both
    return 404.
    """
    await service.revoke_session(user.id, session_id)
    return MessageResponse(message="Session deleted")


@router.get("/whoami", response_model=WhoAmIResponse)
async def whoami(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
) -> WhoAmIResponse:
    """
    Identify the caller if possible; never fails authentication.

    An invalid, expired or revoked token is treated as no token.
    """
    if user is None:
        return WhoAmIResponse(authenticated=False)
    return WhoAmIResponse(
        authenticated=True,
        principal=PrincipalResponse(
            id=user.id, email=user.email, username=user.username, tier=user.tier
        ),
    )
