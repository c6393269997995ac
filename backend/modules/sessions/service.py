"""
Session registry implementation.

Durable record of issued tokens, keyed by principal. Together with the
stateless token service this gives the two-layer model: a token must
verify cryptographically AND its hash must still be registered here
(with an active principal) to be honoured.
"""

import hashlib
import logging
import uuid
from typing import Optional

from shared.clock import Clock, epoch_seconds, utcnow

from .interfaces import IPrincipalLookup, ISessionRegistry, ISessionRepository
from .models import Session
from .exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)


def hash_token(token: str) -> str:
    """Hex SHA-256 of a raw bearer token. The raw token is never stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionRegistry(ISessionRegistry):
    """Registers, resolves and revokes sessions."""

    def __init__(
        self,
        repository: ISessionRepository,
        principals: IPrincipalLookup,
        touch_interval_seconds: int = 60,
        clock: Optional[Clock] = None,
    ):
        self._repo = repository
        self._principals = principals
        self._touch_interval = touch_interval_seconds
        self._clock = clock or utcnow

    def _now(self) -> int:
        return epoch_seconds(self._clock())

    async def register(
        self,
        principal_id: str,
        token_hash: str,
        expires_at: int,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> str:
        """
        Record an issued token.

        ``expires_at`` must be the token's own ``exp`` so session and token
        expire together.
        """
        now = self._now()
        session = Session(
            id=str(uuid.uuid4()),
            user_id=principal_id,
            token_hash=token_hash,
            device_info=device_info,
            ip_address=ip_address,
            expires_at=expires_at,
            created_at=now,
            last_active_at=now,
        )
        self._repo.insert(session)
        logger.debug("Registered session %s for principal %s", session.id, principal_id)
        return session.id

    async def resolve(self, token_hash: str) -> Optional[Session]:
        """
        The live session for a token hash, or None.

        Checks expiry itself, so a sweep that has not run yet can never
        cause a false accept.
        """
        session = self._repo.get_by_token_hash(token_hash)
        if session is None:
            return None
        if session.is_expired(self._now()):
            return None
        principal = self._principals.get_by_id(session.user_id)
        if principal is None or not principal.is_active:
            return None
        return session

    async def is_live(self, token_hash: str) -> bool:
        return await self.resolve(token_hash) is not None

    async def touch(self, session: Session) -> None:
        """Refresh last_active_at, at most once per touch interval."""
        now = self._now()
        if now - session.last_active_at < self._touch_interval:
            return
        self._repo.touch(session.id, now)
        logger.debug("Touched session %s", session.id)

    async def revoke(self, session_id: str, principal_id: str) -> None:
        if not self._repo.delete_owned(session_id, principal_id):
            logger.warning(
                "Revoke refused: session %s not found for principal %s",
                session_id,
                principal_id,
            )
            raise SessionNotFoundError(session_id)
        logger.info("Revoked session %s for principal %s", session_id, principal_id)

    async def revoke_all(self, principal_id: str) -> int:
        count = self._repo.delete_all_for_user(principal_id)
        logger.info("Revoked %d session(s) for principal %s", count, principal_id)
        return count

    async def list(self, principal_id: str) -> list[Session]:
        sessions = self._repo.list_for_user(principal_id, self._now())
        return sorted(sessions, key=lambda s: s.last_active_at, reverse=True)

    async def sweep_expired(self) -> int:
        count = self._repo.delete_expired(self._now())
        if count:
            logger.info("Swept %d expired session(s)", count)
        return count
