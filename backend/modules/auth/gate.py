"""
Auth gate.

Request-boundary pipeline that turns a bearer token into an
AuthenticatedUser:

    UNAUTHENTICATED -> TOKEN_EXTRACTED -> TOKEN_VERIFIED
        -> SESSION_CONFIRMED -> AUTHORIZED

A failure at any step raises GateRejection, which carries the stage and
the underlying typed error for logging but always presents itself to
callers as the same opaque "Not authenticated". Storage failures are not
authentication failures and propagate unchanged.
"""

import logging
from enum import Enum
from typing import Optional

from shared.exceptions import AuthenticationError, QHubError
from shared.models import AuthenticatedUser
from modules.sessions.service import SessionRegistry, hash_token

from .credentials import CredentialStore
from .exceptions import InactivePrincipalError, MissingTokenError, RevokedSessionError
from .tokens import TokenService

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    """Pipeline stages, in order."""

    UNAUTHENTICATED = "unauthenticated"
    TOKEN_EXTRACTED = "token_extracted"
    TOKEN_VERIFIED = "token_verified"
    SESSION_CONFIRMED = "session_confirmed"
    AUTHORIZED = "authorized"


class GateRejection(AuthenticationError):
    """Opaque rejection. ``stage`` and ``cause`` are for server logs only."""

    def __init__(self, stage: GateState, cause: AuthenticationError):
        super().__init__("Not authenticated", code="UNAUTHORIZED")
        self.stage = stage
        self.cause = cause


class AuthGate:
    """Composes token verification, session confirmation and principal liveness."""

    def __init__(
        self,
        tokens: TokenService,
        sessions: SessionRegistry,
        credentials: CredentialStore,
    ):
        self._tokens = tokens
        self._sessions = sessions
        self._credentials = credentials

    async def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Run the full pipeline.

        Raises:
            GateRejection: On any authentication failure
            DependencyError: If storage is unavailable
        """
        state = GateState.UNAUTHENTICATED
        try:
            if not token:
                raise MissingTokenError()
            state = GateState.TOKEN_EXTRACTED

            claims = self._tokens.verify(token)
            state = GateState.TOKEN_VERIFIED

            session = await self._sessions.resolve(hash_token(token))
            if session is None or session.user_id != claims.sub:
                raise RevokedSessionError()
            principal = await self._credentials.get_principal(session.user_id)
            if principal is None or not principal.is_active:
                raise InactivePrincipalError(session.user_id)
            state = GateState.SESSION_CONFIRMED

            await self._sessions.touch(session)
            state = GateState.AUTHORIZED
            logger.debug("Authorized principal %s via session %s", principal.id, session.id)
            return principal.to_authenticated_user(session_id=session.id)

        except GateRejection:
            raise
        except AuthenticationError as e:
            logger.warning("Auth rejected at %s: %s", state.value, e.code)
            raise GateRejection(state, e) from e

    async def authenticate_optional(self, token: Optional[str]) -> Optional[AuthenticatedUser]:
        """
        Same pipeline, but any failure yields an anonymous caller (None).
        """
        if not token:
            return None
        try:
            return await self.authenticate(token)
        except QHubError as e:
            logger.debug("Optional auth fell back to anonymous: %s", e.code)
            return None
