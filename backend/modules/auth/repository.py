"""
Principal repositories.

Two interchangeable implementations of IPrincipalRepository:
- InMemoryPrincipalRepository for tests and local development
- SupabasePrincipalRepository for production (table ``users``)

Uniqueness of email and username is enforced at insert time in both, so
two concurrent registrations for the same email cannot both succeed even
if both passed the service-level pre-check.
"""

import threading
from datetime import datetime
from typing import Any, Optional

from postgrest.exceptions import APIError

from shared.models import Tier
from shared.repository import BaseRepository

from .models import Principal, StoredCredential
from .exceptions import DuplicateEmailError, DuplicateUsernameError


class InMemoryPrincipalRepository:
    """
    Principal storage in process memory.

    The lock plays the part of the unique indexes: it covers the
    check-and-insert on the email/username maps and nothing else.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: dict[str, StoredCredential] = {}
        self._by_email: dict[str, str] = {}
        self._by_username: dict[str, str] = {}

    def insert(self, principal: Principal, password_hash: str) -> Principal:
        with self._lock:
            if principal.email in self._by_email:
                raise DuplicateEmailError(principal.email)
            if principal.username and principal.username in self._by_username:
                raise DuplicateUsernameError(principal.username)
            self._rows[principal.id] = StoredCredential(
                principal=principal, password_hash=password_hash
            )
            self._by_email[principal.email] = principal.id
            if principal.username:
                self._by_username[principal.username] = principal.id
        return principal

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        row = self._rows.get(principal_id)
        return row.principal if row else None

    def get_by_email(self, email: str) -> Optional[StoredCredential]:
        principal_id = self._by_email.get(email)
        return self._rows.get(principal_id) if principal_id else None

    def email_exists(self, email: str) -> bool:
        return email in self._by_email

    def username_exists(self, username: str) -> bool:
        return username in self._by_username

    def update(self, principal_id: str, fields: dict[str, Any]) -> Optional[Principal]:
        with self._lock:
            row = self._rows.get(principal_id)
            if row is None:
                return None
            updated = row.principal.model_copy(update=fields)
            self._rows[principal_id] = StoredCredential(
                principal=updated, password_hash=row.password_hash
            )
            return updated

    def set_password_hash(self, principal_id: str, password_hash: str) -> None:
        with self._lock:
            row = self._rows.get(principal_id)
            if row is not None:
                self._rows[principal_id] = StoredCredential(
                    principal=row.principal, password_hash=password_hash
                )

    def delete(self, principal_id: str) -> bool:
        with self._lock:
            row = self._rows.pop(principal_id, None)
            if row is None:
                return False
            self._by_email.pop(row.principal.email, None)
            if row.principal.username:
                self._by_username.pop(row.principal.username, None)
            return True


class SupabasePrincipalRepository(BaseRepository[Principal]):
    """
    Principal storage in the Supabase ``users`` table.

    Relies on the UNIQUE constraints on ``email`` and ``username``
    (see migrations/001_auth_core.sql).
    """

    TABLE = "users"

    def insert(self, principal: Principal, password_hash: str) -> Principal:
        def raise_duplicate(error: APIError) -> None:
            text = f"{error.message} {error.details}".lower()
            if "username" in text:
                raise DuplicateUsernameError(principal.username or "")
            raise DuplicateEmailError(principal.email)

        row = self._to_row(principal)
        row["password_hash"] = password_hash
        result = self._execute(
            self._db.table(self.TABLE).insert(row),
            "insert principal",
            on_conflict=raise_duplicate,
        )
        return self._map_to_principal(result.data[0])

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        result = self._execute(
            self._db.table(self.TABLE).select("*").eq("id", principal_id),
            "get principal",
        )
        row = self._first(result.data)
        return self._map_to_principal(row) if row else None

    def get_by_email(self, email: str) -> Optional[StoredCredential]:
        result = self._execute(
            self._db.table(self.TABLE).select("*").eq("email", email),
            "get principal by email",
        )
        row = self._first(result.data)
        if row is None:
            return None
        return StoredCredential(
            principal=self._map_to_principal(row),
            password_hash=row.get("password_hash") or "",
        )

    def email_exists(self, email: str) -> bool:
        result = self._execute(
            self._db.table(self.TABLE).select("id").eq("email", email),
            "check email",
        )
        return bool(result.data)

    def username_exists(self, username: str) -> bool:
        result = self._execute(
            self._db.table(self.TABLE).select("id").eq("username", username),
            "check username",
        )
        return bool(result.data)

    def update(self, principal_id: str, fields: dict[str, Any]) -> Optional[Principal]:
        payload = {k: self._to_column(v) for k, v in fields.items()}
        result = self._execute(
            self._db.table(self.TABLE).update(payload).eq("id", principal_id),
            "update principal",
        )
        row = self._first(result.data)
        return self._map_to_principal(row) if row else None

    def set_password_hash(self, principal_id: str, password_hash: str) -> None:
        self._execute(
            self._db.table(self.TABLE)
            .update({"password_hash": password_hash})
            .eq("id", principal_id),
            "set password hash",
        )

    def delete(self, principal_id: str) -> bool:
        result = self._execute(
            self._db.table(self.TABLE).delete().eq("id", principal_id),
            "delete principal",
        )
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_column(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, Tier):
            return value.value
        return value

    def _to_row(self, principal: Principal) -> dict[str, Any]:
        return {
            key: self._to_column(value)
            for key, value in principal.model_dump().items()
        }

    def _map_to_principal(self, data: dict[str, Any]) -> Principal:
        """Map database row to Principal model."""
        return Principal(
            id=str(data["id"]),
            email=data["email"],
            username=data.get("username"),
            tier=Tier(data.get("tier") or Tier.FREE.value),
            is_active=bool(data.get("is_active", True)),
            email_verified=bool(data.get("email_verified", False)),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            last_login_at=data.get("last_login_at"),
        )
