"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    QHubError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    QuotaExceededError,
    DependencyError,
)


class TestQHubError:
    def test_message(self):
        """QHubError should store message."""
        error = QHubError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """QHubError should default code to class name."""
        error = QHubError("Test error")
        assert error.code == "QHubError"

    def test_custom_code(self):
        error = QHubError("Test error", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_default_details(self):
        assert QHubError("Test error").details == {}

    def test_to_dict(self):
        """to_dict should produce the API error body."""
        error = QHubError("Test error", code="TEST", details={"key": "value"})
        assert error.to_dict() == {
            "error": "TEST",
            "message": "Test error",
            "details": {"key": "value"},
        }


class TestExceptionFamilies:
    @pytest.mark.parametrize(
        "cls",
        [NotFoundError, ValidationError, ConflictError, AuthenticationError, AuthorizationError],
    )
    def test_inherits_from_qhub_error(self, cls):
        error = cls("boom")
        assert isinstance(error, QHubError)
        assert error.code == cls.__name__

    def test_families_are_distinct(self):
        assert not issubclass(AuthorizationError, AuthenticationError)
        assert not issubclass(ConflictError, ValidationError)


class TestQuotaExceededError:
    def test_fields(self):
        error = QuotaExceededError("ai_message", current=10, limit=10)
        assert error.code == "QUOTA_EXCEEDED"
        assert error.resource == "ai_message"
        assert error.current == 10
        assert error.limit == 10
        assert error.details == {"resource": "ai_message", "current": 10, "limit": 10}
        assert "10/10" in error.message

    def test_custom_message(self):
        error = QuotaExceededError("compute_job", current=3, limit=3, message="Too many jobs")
        assert error.message == "Too many jobs"


class TestDependencyError:
    def test_records_service(self):
        error = DependencyError("Storage unavailable", service="supabase")
        assert error.service == "supabase"
        assert error.details["service"] == "supabase"
        assert isinstance(error, QHubError)

    def test_keeps_extra_details(self):
        error = DependencyError("x", service="supabase", details={"operation": "insert"})
        assert error.details == {"operation": "insert", "service": "supabase"}
