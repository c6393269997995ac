"""
Base repository class for database access.

Provides a common abstraction layer for the Supabase-backed repositories,
encapsulating client access and the translation of driver failures into
the QHub exception hierarchy.
"""

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from .exceptions import DependencyError


T = TypeVar("T")

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class BaseRepository(Generic[T]):
    """
    Base class for Supabase repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - _execute()/_rpc() wrappers that turn driver errors into DependencyError
    - Generic type parameter for model type hints

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic model mapping internally. Unique violations the
    caller can act on are surfaced through ``_execute(..., on_conflict=...)``.

    Example:
        class SessionRepository(BaseRepository[Session]):
            def get(self, session_id: str) -> Optional[Session]:
                result = self._execute(
                    self._db.table("user_sessions").select("*").eq("id", session_id),
                    "get session",
                )
                return self._map(result.data[0]) if result.data else None
    """

    service_name = "supabase"

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(
        self,
        query: Any,
        operation: str,
        on_conflict: Optional[Callable[[APIError], None]] = None,
    ) -> Any:
        """
        Run a query builder, translating storage failures.

        Args:
            query: A postgrest request builder
            operation: Short description used in logs and error details
            on_conflict: Called with the APIError on a unique violation;
                expected to raise a domain ConflictError
        """
        try:
            return query.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION and on_conflict is not None:
                on_conflict(e)
            logger.error("Storage error during %s: %s (%s)", operation, e.message, e.code)
            raise DependencyError(
                f"Storage operation failed: {operation}",
                service=self.service_name,
                details={"operation": operation},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Storage unreachable during %s: %s", operation, e)
            raise DependencyError(
                f"Storage unavailable: {operation}",
                service=self.service_name,
                details={"operation": operation},
            ) from e

    def _rpc(self, function: str, params: dict[str, Any]) -> Any:
        """Call a SQL function through PostgREST."""
        return self._execute(self._db.rpc(function, params), f"rpc {function}")

    @staticmethod
    def _first(data: Optional[list[dict[str, Any]]]) -> Optional[dict[str, Any]]:
        """First row of a result set, or None."""
        return data[0] if data else None
