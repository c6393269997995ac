"""
Session repositories.

Two interchangeable implementations of ISessionRepository:
- InMemorySessionRepository for tests and local development
- SupabaseSessionRepository for production (table ``user_sessions``)
"""

import threading
import uuid
from typing import Any, Optional

from shared.repository import BaseRepository

from .models import Session


class InMemorySessionRepository:
    """
    Session storage in process memory.

    Mutations for one principal are serialised by that principal's lock;
    different principals never contend. A principal's lock and index
    entry are dropped once its last session is removed.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._rows: dict[str, Session] = {}
        self._by_hash: dict[str, str] = {}
        self._by_user: dict[str, set[str]] = {}

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(user_id, threading.Lock())

    def insert(self, session: Session) -> Session:
        with self._lock_for(session.user_id):
            if session.token_hash in self._by_hash:
                raise ValueError("token_hash already registered")
            self._rows[session.id] = session
            self._by_hash[session.token_hash] = session.id
            with self._guard:
                self._by_user.setdefault(session.user_id, set()).add(session.id)
        return session

    def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        session_id = self._by_hash.get(token_hash)
        return self._rows.get(session_id) if session_id else None

    def list_for_user(self, user_id: str, now: int) -> list[Session]:
        with self._guard:
            ids = list(self._by_user.get(user_id, ()))
        sessions = [self._rows.get(session_id) for session_id in ids]
        return [s for s in sessions if s is not None and not s.is_expired(now)]

    def touch(self, session_id: str, now: int) -> None:
        session = self._rows.get(session_id)
        if session is None:
            return
        with self._lock_for(session.user_id):
            # Re-read under the lock: a concurrent revoke must win
            current = self._rows.get(session_id)
            if current is not None:
                self._rows[session_id] = current.model_copy(update={"last_active_at": now})

    def delete_owned(self, session_id: str, user_id: str) -> bool:
        with self._lock_for(user_id):
            session = self._rows.get(session_id)
            if session is None or session.user_id != user_id:
                return False
            self._remove(session)
            return True

    def delete_all_for_user(self, user_id: str) -> int:
        with self._lock_for(user_id):
            with self._guard:
                ids = list(self._by_user.get(user_id, ()))
            owned = [self._rows[i] for i in ids if i in self._rows]
            for session in owned:
                self._remove(session)
            with self._guard:
                if user_id not in self._by_user:
                    self._locks.pop(user_id, None)
            return len(owned)

    def delete_expired(self, now: int) -> int:
        deleted = 0
        for session in list(self._rows.values()):
            if not session.is_expired(now):
                continue
            with self._lock_for(session.user_id):
                if self._rows.get(session.id) is session:
                    self._remove(session)
                    deleted += 1
        return deleted

    def _remove(self, session: Session) -> None:
        """Drop one row; caller holds the owner's lock."""
        self._rows.pop(session.id, None)
        self._by_hash.pop(session.token_hash, None)
        with self._guard:
            owned = self._by_user.get(session.user_id)
            if owned is not None:
                owned.discard(session.id)
                if not owned:
                    del self._by_user[session.user_id]
                    self._locks.pop(session.user_id, None)


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError):
        return False
    return True


class SupabaseSessionRepository(BaseRepository[Session]):
    """
    Session storage in the Supabase ``user_sessions`` table.

    Every mutation is a single statement, so ownership checks and
    deletions cannot interleave with another request's.
    """

    TABLE = "user_sessions"

    def insert(self, session: Session) -> Session:
        result = self._execute(
            self._db.table(self.TABLE).insert(session.model_dump()),
            "insert session",
        )
        return self._map_to_session(result.data[0])

    def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        result = self._execute(
            self._db.table(self.TABLE).select("*").eq("token_hash", token_hash),
            "get session by token",
        )
        row = self._first(result.data)
        return self._map_to_session(row) if row else None

    def list_for_user(self, user_id: str, now: int) -> list[Session]:
        result = self._execute(
            self._db.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .gt("expires_at", now),
            "list sessions",
        )
        return [self._map_to_session(row) for row in result.data or []]

    def touch(self, session_id: str, now: int) -> None:
        self._execute(
            self._db.table(self.TABLE).update({"last_active_at": now}).eq("id", session_id),
            "touch session",
        )

    def delete_owned(self, session_id: str, user_id: str) -> bool:
        # The id column is a UUID; anything else cannot match and would fail with 22P02
        if not _is_uuid(session_id):
            return False
        result = self._execute(
            self._db.table(self.TABLE).delete().eq("id", session_id).eq("user_id", user_id),
            "delete session",
        )
        return bool(result.data)

    def delete_all_for_user(self, user_id: str) -> int:
        result = self._execute(
            self._db.table(self.TABLE).delete().eq("user_id", user_id),
            "delete user sessions",
        )
        return len(result.data or [])

    def delete_expired(self, now: int) -> int:
        result = self._execute(
            self._db.table(self.TABLE).delete().lte("expires_at", now),
            "sweep sessions",
        )
        return len(result.data or [])

    def _map_to_session(self, data: dict[str, Any]) -> Session:
        """Map database row to Session model."""
        return Session(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            token_hash=data["token_hash"],
            device_info=data.get("device_info"),
            ip_address=data.get("ip_address"),
            expires_at=int(data["expires_at"]),
            created_at=int(data["created_at"]),
            last_active_at=int(data["last_active_at"]),
        )
