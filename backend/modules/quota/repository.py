"""
Usage counter repositories.

Two interchangeable implementations of IUsageCounterRepository:
- InMemoryUsageCounterRepository for tests and local development
- SupabaseUsageCounterRepository for production (table ``usage_counters``
  plus the ``try_consume_quota``/``release_quota`` SQL functions)
"""

import threading
from typing import Any

from shared.repository import BaseRepository

from .models import ResourceType

CounterKey = tuple[str, str, int]


class InMemoryUsageCounterRepository:
    """
    Counters in process memory.

    Each counter has its own lock, so the compare-and-increment for one
    (principal, resource, window) never waits on another. Opening a newer
    window for a (principal, resource) drops its older windows.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[CounterKey, threading.Lock] = {}
        self._counts: dict[CounterKey, int] = {}
        self._windows: dict[tuple[str, str], set[int]] = {}

    def _lock_for(self, key: CounterKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
                self._prune_older(key)
            return lock

    def _prune_older(self, key: CounterKey) -> None:
        """Forget windows before ``key``'s; caller holds the guard."""
        user_id, resource, window = key
        windows = self._windows.setdefault((user_id, resource), set())
        for old in [w for w in windows if w < window]:
            windows.discard(old)
            self._locks.pop((user_id, resource, old), None)
            self._counts.pop((user_id, resource, old), None)
        windows.add(window)

    @staticmethod
    def _key(user_id: str, resource: ResourceType, window_key: int) -> CounterKey:
        return (user_id, ResourceType(resource).value, int(window_key))

    def try_increment(
        self,
        user_id: str,
        resource: ResourceType,
        window_key: int,
        limit: int,
    ) -> tuple[bool, int]:
        key = self._key(user_id, resource, window_key)
        with self._lock_for(key):
            current = self._counts.get(key, 0)
            if current >= limit:
                return False, current
            self._counts[key] = current + 1
            return True, current + 1

    def decrement(self, user_id: str, resource: ResourceType, window_key: int) -> int:
        key = self._key(user_id, resource, window_key)
        with self._lock_for(key):
            current = max(self._counts.get(key, 0) - 1, 0)
            self._counts[key] = current
            return current

    def get_count(self, user_id: str, resource: ResourceType, window_key: int) -> int:
        return self._counts.get(self._key(user_id, resource, window_key), 0)


class SupabaseUsageCounterRepository(BaseRepository[int]):
    """
    Counters in the Supabase ``usage_counters`` table.

    Increment and release run as SQL functions so the check and the
    write are one statement inside the database.
    """

    TABLE = "usage_counters"

    def try_increment(
        self,
        user_id: str,
        resource: ResourceType,
        window_key: int,
        limit: int,
    ) -> tuple[bool, int]:
        result = self._rpc(
            "try_consume_quota",
            {
                "p_user_id": user_id,
                "p_resource": ResourceType(resource).value,
                "p_window": window_key,
                "p_limit": limit,
            },
        )
        row = self._first(self._rows(result.data)) or {}
        return bool(row.get("allowed")), int(row.get("current_count") or 0)

    def decrement(self, user_id: str, resource: ResourceType, window_key: int) -> int:
        result = self._rpc(
            "release_quota",
            {
                "p_user_id": user_id,
                "p_resource": ResourceType(resource).value,
                "p_window": window_key,
            },
        )
        row = self._first(self._rows(result.data)) or {}
        return int(row.get("current_count") or 0)

    def get_count(self, user_id: str, resource: ResourceType, window_key: int) -> int:
        result = self._execute(
            self._db.table(self.TABLE)
            .select("count")
            .eq("user_id", user_id)
            .eq("resource_type", ResourceType(resource).value)
            .eq("window_key", window_key),
            "get usage counter",
        )
        row = self._first(result.data)
        return int(row["count"]) if row else 0

    @staticmethod
    def _rows(data: Any) -> list[dict[str, Any]]:
        # Table-returning functions come back as a list, scalar-row ones as a dict
        if isinstance(data, dict):
            return [data]
        return data or []
