"""Tests for shared/repository.py."""

from typing import Optional
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from shared.exceptions import ConflictError, DependencyError
from shared.repository import BaseRepository


def api_error(code: str, message: str = "boom") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_db_client(self):
        """Should store the database client in _db attribute."""
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_generic_type_parameter(self):
        """Should work with generic type parameter."""

        class MockModel:
            pass

        class TestRepository(BaseRepository[MockModel]):
            def get_by_id(self, id: str) -> Optional[MockModel]:
                return None

        mock_db = MagicMock()
        repo = TestRepository(mock_db)
        assert repo._db is mock_db


class TestExecute:
    def setup_method(self):
        self.repo = BaseRepository(MagicMock())
        self.query = MagicMock()

    def test_returns_result(self):
        self.query.execute.return_value = MagicMock(data=[{"id": "1"}])
        result = self.repo._execute(self.query, "select")
        assert result.data == [{"id": "1"}]

    def test_unique_violation_calls_on_conflict(self):
        self.query.execute.side_effect = api_error("23505")

        def on_conflict(error):
            raise ConflictError("duplicate", code="DUPLICATE")

        with pytest.raises(ConflictError):
            self.repo._execute(self.query, "insert", on_conflict=on_conflict)

    def test_unique_violation_without_handler_is_dependency_error(self):
        self.query.execute.side_effect = api_error("23505")
        with pytest.raises(DependencyError):
            self.repo._execute(self.query, "insert")

    def test_other_api_error_is_dependency_error(self):
        self.query.execute.side_effect = api_error("42P01", "relation does not exist")
        on_conflict = MagicMock()

        with pytest.raises(DependencyError) as exc_info:
            self.repo._execute(self.query, "select users", on_conflict=on_conflict)

        on_conflict.assert_not_called()
        assert exc_info.value.service == "supabase"
        assert exc_info.value.details["operation"] == "select users"
        assert "relation does not exist" not in exc_info.value.message

    def test_transport_error_is_dependency_error(self):
        self.query.execute.side_effect = httpx.ConnectError("refused")
        with pytest.raises(DependencyError, match="Storage unavailable"):
            self.repo._execute(self.query, "select")


class TestRpcAndFirst:
    def test_rpc_calls_function(self):
        db = MagicMock()
        db.rpc.return_value.execute.return_value = MagicMock(data=[{"allowed": True}])
        repo = BaseRepository(db)

        result = repo._rpc("try_consume_quota", {"p_limit": 10})

        db.rpc.assert_called_once_with("try_consume_quota", {"p_limit": 10})
        assert result.data == [{"allowed": True}]

    def test_rpc_failure_names_function(self):
        db = MagicMock()
        db.rpc.return_value.execute.side_effect = api_error("P0001")
        repo = BaseRepository(db)

        with pytest.raises(DependencyError) as exc_info:
            repo._rpc("release_quota", {})

        assert exc_info.value.details["operation"] == "rpc release_quota"

    def test_first(self):
        assert BaseRepository._first([{"a": 1}, {"a": 2}]) == {"a": 1}
        assert BaseRepository._first([]) is None
        assert BaseRepository._first(None) is None
