from datetime import datetime, timezone

import pytest

from modules.auth.models import Principal, TokenClaims
from shared.models import Tier


def make_principal(**overrides) -> Principal:
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    data = {
        "id": "user-123",
        "email": "test@example.com",
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Principal(**data)


class TestPrincipal:
    def test_defaults(self):
        principal = make_principal()
        assert principal.tier == Tier.FREE
        assert principal.is_active is True
        assert principal.email_verified is False
        assert principal.username is None

    def test_has_no_password_field(self):
        assert "password_hash" not in Principal.model_fields

    def test_to_authenticated_user(self):
        principal = make_principal(username="alice", tier=Tier.PRO)
        user = principal.to_authenticated_user(session_id="sess-1")
        assert user.id == "user-123"
        assert user.username == "alice"
        assert user.tier == Tier.PRO
        assert user.session_id == "sess-1"

    def test_authenticated_user_is_immutable(self):
        user = make_principal().to_authenticated_user()
        with pytest.raises(Exception):  # Pydantic ValidationError
            user.id = "different-id"


class TestTokenClaims:
    def test_parse_claims(self):
        claims = TokenClaims(
            sub="user-123",
            email="test@example.com",
            tier="pro",
            iat=1704063600,
            exp=1704067200,
            jti="abc",
        )
        assert claims.tier == Tier.PRO

    def test_ignores_extra_claims(self):
        claims = TokenClaims(
            sub="user-123",
            email="test@example.com",
            tier="free",
            iat=1,
            exp=2,
            jti="abc",
            aud="ignored",
        )
        assert not hasattr(claims, "aud")
