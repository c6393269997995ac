"""
Authentication service implementation.

Composes the credential store, token service and session registry into
the account and session flows the HTTP layer exposes.
"""

import logging
from typing import Optional

from shared.exceptions import QHubError, ValidationError
from shared.models import AuthenticatedUser
from modules.sessions.models import SessionInfo
from modules.sessions.service import SessionRegistry, hash_token

from .credentials import CredentialStore
from .interfaces import IAuthService
from .models import AuthResult, Principal
from .tokens import TokenService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Every successful register or login yields exactly one token and one
    session row whose expiry equals the token's exp claim.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        tokens: TokenService,
        sessions: SessionRegistry,
    ):
        self._credentials = credentials
        self._tokens = tokens
        self._sessions = sessions

    async def register(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        principal = await self._credentials.create(email, password, username)
        try:
            return await self._open_session(principal, device_info, ip_address)
        except QHubError:
            # A principal is only kept once its first session exists
            try:
                await self._credentials.discard(principal.id)
            except QHubError:
                logger.exception("Could not discard principal %s", principal.id)
            raise

    async def login(
        self,
        email: str,
        password: str,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        principal = await self._credentials.verify(email, password)
        result = await self._open_session(principal, device_info, ip_address)
        result.principal = await self._credentials.record_login(principal.id)
        logger.info("Principal %s logged in (session %s)", principal.id, result.session_id)
        return result

    async def logout(self, user: AuthenticatedUser) -> None:
        """
        Revoke the session the caller authenticated with.

        Raises:
            ValidationError: If the caller has no current session
        """
        if not user.session_id:
            raise ValidationError("No active session", code="NO_SESSION")
        await self._sessions.revoke(user.session_id, user.id)
        logger.info("Principal %s logged out (session %s)", user.id, user.session_id)

    async def logout_all(self, principal_id: str) -> int:
        return await self._sessions.revoke_all(principal_id)

    async def list_sessions(self, user: AuthenticatedUser) -> list[SessionInfo]:
        sessions = await self._sessions.list(user.id)
        return [s.to_info(current_session_id=user.session_id) for s in sessions]

    async def revoke_session(self, principal_id: str, session_id: str) -> None:
        """
        Raises:
            SessionNotFoundError: If the session is missing or not owned
        """
        await self._sessions.revoke(session_id, principal_id)

    async def _open_session(
        self,
        principal: Principal,
        device_info: Optional[str],
        ip_address: Optional[str],
    ) -> AuthResult:
        issued = self._tokens.issue(principal)
        session_id = await self._sessions.register(
            principal.id,
            hash_token(issued.token),
            issued.expires_at,
            device_info=device_info,
            ip_address=ip_address,
        )
        return AuthResult(
            token=issued.token,
            principal=principal,
            expires_at=issued.expires_at,
            session_id=session_id,
        )
