"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations for the configured
storage backend.
"""

import logging
import secrets
from typing import TYPE_CHECKING, Optional

from shared.clock import Clock, utcnow
from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.credentials import CredentialStore
    from modules.auth.gate import AuthGate
    from modules.auth.interfaces import IAuthService, IPrincipalRepository
    from modules.auth.tokens import TokenService
    from modules.quota.service import QuotaEnforcer
    from modules.sessions.service import SessionRegistry
    from modules.sessions.sweeper import SessionSweeper

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached for the
    lifetime of the container. Tests build a container from their own
    Settings and clock and install it with ``set_container``.
    """

    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> None:
        self.settings = settings or get_settings()
        self.clock = clock or utcnow
        self._principal_repository: "IPrincipalRepository | None" = None
        self._credentials: "CredentialStore | None" = None
        self._tokens: "TokenService | None" = None
        self._sessions: "SessionRegistry | None" = None
        self._quota: "QuotaEnforcer | None" = None
        self._gate: "AuthGate | None" = None
        self._auth_service: "IAuthService | None" = None
        self._sweeper: "SessionSweeper | None" = None

    @property
    def uses_supabase(self) -> bool:
        return self.settings.storage_backend == "supabase"

    def _supabase(self):
        from shared.database import get_supabase_client
        return get_supabase_client()

    @property
    def principal_repository(self) -> "IPrincipalRepository":
        """Get the principal repository for the configured backend."""
        if self._principal_repository is None:
            if self.uses_supabase:
                from modules.auth.repository import SupabasePrincipalRepository
                self._principal_repository = SupabasePrincipalRepository(self._supabase())
            else:
                from modules.auth.repository import InMemoryPrincipalRepository
                self._principal_repository = InMemoryPrincipalRepository()
        return self._principal_repository

    @property
    def credentials(self) -> "CredentialStore":
        """Get the credential store instance."""
        if self._credentials is None:
            from modules.auth.credentials import CredentialStore
            from modules.auth.passwords import PasswordHasher
            hasher = PasswordHasher(
                time_cost=self.settings.argon2_time_cost,
                memory_cost=self.settings.argon2_memory_cost,
                parallelism=self.settings.argon2_parallelism,
            )
            self._credentials = CredentialStore(
                repository=self.principal_repository,
                hasher=hasher,
                min_password_length=self.settings.password_min_length,
                clock=self.clock,
            )
        return self._credentials

    @property
    def tokens(self) -> "TokenService":
        """Get the token service, reading the signing secret exactly once."""
        if self._tokens is None:
            from modules.auth.tokens import TokenService
            secret = self.settings.jwt_secret
            if not secret:
                secret = secrets.token_urlsafe(48)
                logger.warning(
                    "JWT_SECRET is not set; using a random per-process secret. "
                    "Tokens will not survive a restart."
                )
            self._tokens = TokenService(
                secret=secret,
                algorithm=self.settings.jwt_algorithm,
                default_ttl_seconds=self.settings.token_ttl_hours * 3600,
                clock=self.clock,
            )
        return self._tokens

    @property
    def sessions(self) -> "SessionRegistry":
        """Get the session registry instance."""
        if self._sessions is None:
            from modules.sessions.service import SessionRegistry
            if self.uses_supabase:
                from modules.sessions.repository import SupabaseSessionRepository
                repository = SupabaseSessionRepository(self._supabase())
            else:
                from modules.sessions.repository import InMemorySessionRepository
                repository = InMemorySessionRepository()
            self._sessions = SessionRegistry(
                repository=repository,
                principals=self.principal_repository,
                touch_interval_seconds=self.settings.session_touch_interval_seconds,
                clock=self.clock,
            )
        return self._sessions

    @property
    def quota(self) -> "QuotaEnforcer":
        """Get the quota enforcer instance."""
        if self._quota is None:
            from modules.quota.service import QuotaEnforcer
            if self.uses_supabase:
                from modules.quota.repository import SupabaseUsageCounterRepository
                repository = SupabaseUsageCounterRepository(self._supabase())
            else:
                from modules.quota.repository import InMemoryUsageCounterRepository
                repository = InMemoryUsageCounterRepository()
            self._quota = QuotaEnforcer(
                repository=repository,
                principals=self.principal_repository,
                clock=self.clock,
            )
        return self._quota

    @property
    def gate(self) -> "AuthGate":
        """Get the auth gate instance."""
        if self._gate is None:
            from modules.auth.gate import AuthGate
            self._gate = AuthGate(
                tokens=self.tokens,
                sessions=self.sessions,
                credentials=self.credentials,
            )
        return self._gate

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                credentials=self.credentials,
                tokens=self.tokens,
                sessions=self.sessions,
            )
        return self._auth_service

    @property
    def sweeper(self) -> "SessionSweeper":
        """Get the background session sweeper."""
        if self._sweeper is None:
            from modules.sessions.sweeper import SessionSweeper
            self._sweeper = SessionSweeper(
                self.sessions,
                interval_seconds=self.settings.session_sweep_interval_seconds,
            )
        return self._sweeper


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a prebuilt container (tests)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() builds a fresh container with new
    service instances and empty in-memory stores.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_auth_gate() -> "AuthGate":
    """FastAPI dependency for the auth gate."""
    return get_container().gate


def get_quota_enforcer() -> "QuotaEnforcer":
    """FastAPI dependency for the quota enforcer."""
    return get_container().quota
