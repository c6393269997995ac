"""
Session registry module.

Tracks which issued tokens are still honoured, enabling logout,
logout-all and per-device revocation on top of stateless tokens.

Public API:
- ISessionRegistry: Interface for session operations
- SessionRegistry: Implementation
- Session / SessionInfo: Stored and public session views
- SessionSweeper: Optional background expiry sweep
"""

from .interfaces import ISessionRegistry, ISessionRepository, IPrincipalLookup
from .models import Session, SessionInfo
from .exceptions import SessionNotFoundError
from .repository import InMemorySessionRepository, SupabaseSessionRepository
from .service import SessionRegistry, hash_token
from .sweeper import SessionSweeper

__all__ = [
    # Interfaces
    "ISessionRegistry",
    "ISessionRepository",
    "IPrincipalLookup",
    # Models
    "Session",
    "SessionInfo",
    # Exceptions
    "SessionNotFoundError",
    # Implementations
    "InMemorySessionRepository",
    "SupabaseSessionRepository",
    "SessionRegistry",
    "SessionSweeper",
    "hash_token",
]
