"""
Password hashing.

Argon2id via argon2-cffi. The library's verify is constant-time; the
store additionally runs a dummy verify for unknown emails so the two
failure paths cost the same.
"""

import logging

from argon2 import PasswordHasher as Argon2Hasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Salted, memory-hard one-way password hashing."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ):
        self._hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )
        # Verified against when the email is unknown
        self._dummy_hash = self._hasher.hash("qhub-dummy-password")

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        if not password:
            raise ValueError("password_blank")
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash."""
        if not password or not password_hash:
            return False
        try:
            return self._hasher.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError):
            logger.warning("Stored password hash could not be verified")
            return False

    def dummy_verify(self, password: str) -> None:
        """Burn the same work as a real verify, always failing."""
        self.verify(password or "x", self._dummy_hash)

    def needs_rehash(self, password_hash: str) -> bool:
        """Whether a hash was produced with different parameters."""
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except InvalidHashError:
            return True
