"""
Credential store.

Owns password hashing and the durable principal record. Every failure
of ``verify`` surfaces as the same InvalidCredentialsError; the precise
cause is kept on the exception and in the logs only.
"""

import logging
import re
import uuid
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from shared.clock import Clock, utcnow
from shared.models import Tier

from .interfaces import ICredentialStore, IPrincipalRepository
from .models import Principal
from .passwords import PasswordHasher
from .exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidEmailError,
    PrincipalNotFoundError,
    WeakPasswordError,
)

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_username(username: Optional[str]) -> Optional[str]:
    value = (username or "").strip()
    return value or None


class CredentialStore(ICredentialStore):
    """Registers principals and checks their passwords."""

    def __init__(
        self,
        repository: IPrincipalRepository,
        hasher: PasswordHasher,
        min_password_length: int = 8,
        clock: Optional[Clock] = None,
    ):
        self._repo = repository
        self._hasher = hasher
        self._min_password_length = min_password_length
        self._clock = clock or utcnow

    async def create(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> Principal:
        """Validate, hash and insert a new principal on the free tier."""
        email = normalize_email(email)
        username = normalize_username(username)

        if not _EMAIL_RE.match(email):
            raise InvalidEmailError()
        if len(password or "") < self._min_password_length:
            raise WeakPasswordError(self._min_password_length)

        # Pre-checks give a clean error in the common case; the repository
        # insert enforces uniqueness for concurrent registrations.
        if self._repo.email_exists(email):
            raise DuplicateEmailError(email)
        if username and self._repo.username_exists(username):
            raise DuplicateUsernameError(username)

        now = self._clock()
        try:
            principal = Principal(
                id=str(uuid.uuid4()),
                email=email,
                username=username,
                tier=Tier.FREE,
                is_active=True,
                email_verified=False,
                created_at=now,
                updated_at=now,
            )
        except PydanticValidationError:
            raise InvalidEmailError()
        created = self._repo.insert(principal, self._hasher.hash(password))
        logger.info("Registered principal %s", created.id)
        return created

    async def verify(self, email: str, password: str) -> Principal:
        """Return the principal if the email/password pair is valid and active."""
        stored = self._repo.get_by_email(normalize_email(email))

        if stored is None:
            self._hasher.dummy_verify(password)
            logger.warning("Login rejected: unknown email")
            raise InvalidCredentialsError("unknown_email")

        principal = stored.principal
        if not self._hasher.verify(password, stored.password_hash):
            logger.warning("Login rejected: wrong password for principal %s", principal.id)
            raise InvalidCredentialsError("wrong_password")

        if not principal.is_active:
            logger.warning("Login rejected: principal %s is inactive", principal.id)
            raise InvalidCredentialsError("inactive")

        if self._hasher.needs_rehash(stored.password_hash):
            self._repo.set_password_hash(principal.id, self._hasher.hash(password))
            logger.info("Rehashed password for principal %s", principal.id)

        return principal

    async def get_principal(self, principal_id: str) -> Optional[Principal]:
        return self._repo.get_by_id(principal_id)

    async def record_login(self, principal_id: str) -> Principal:
        """Stamp last_login_at."""
        now = self._clock()
        return self._update(principal_id, {"last_login_at": now, "updated_at": now})

    async def deactivate(self, principal_id: str) -> Principal:
        """
        Flip the active flag off.

        Existing tokens stay cryptographically valid but the auth gate
        rejects them because it re-reads the principal on every request.
        """
        principal = self._update(
            principal_id, {"is_active": False, "updated_at": self._clock()}
        )
        logger.info("Deactivated principal %s", principal_id)
        return principal

    async def reactivate(self, principal_id: str) -> Principal:
        principal = self._update(
            principal_id, {"is_active": True, "updated_at": self._clock()}
        )
        logger.info("Reactivated principal %s", principal_id)
        return principal

    async def change_tier(self, principal_id: str, tier: Tier) -> Principal:
        principal = self._update(
            principal_id, {"tier": Tier(tier), "updated_at": self._clock()}
        )
        logger.info("Principal %s moved to tier %s", principal_id, principal.tier.value)
        return principal

    async def discard(self, principal_id: str) -> None:
        """
        Remove a principal that was created but never got a session.

        Only used to undo a registration; accounts are otherwise
        deactivated, never deleted.
        """
        if self._repo.delete(principal_id):
            logger.warning("Discarded principal %s after failed registration", principal_id)

    def _update(self, principal_id: str, fields: dict) -> Principal:
        principal = self._repo.update(principal_id, fields)
        if principal is None:
            raise PrincipalNotFoundError(principal_id)
        return principal
