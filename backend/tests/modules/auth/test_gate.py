"""Tests for the auth gate pipeline."""

from unittest.mock import AsyncMock

import jwt
import pytest_asyncio
import pytest

from modules.auth.exceptions import (
    BadSignatureError,
    ExpiredTokenError,
    InactivePrincipalError,
    MissingTokenError,
    RevokedSessionError,
)
from modules.auth.gate import GateRejection, GateState
from shared.exceptions import DependencyError


@pytest_asyncio.fixture
async def session(container):
    """A registered principal with one live session."""
    return await container.auth.register("alice@example.com", "Pass1234!")


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_authorizes_live_session(self, container, session):
        user = await container.gate.authenticate(session.token)
        assert user.id == session.principal.id
        assert user.session_id == session.session_id
        assert user.email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_missing_token(self, container):
        with pytest.raises(GateRejection) as exc_info:
            await container.gate.authenticate(None)
        assert exc_info.value.stage == GateState.UNAUTHENTICATED
        assert isinstance(exc_info.value.cause, MissingTokenError)

    @pytest.mark.asyncio
    async def test_bad_signature(self, container, session):
        forged = jwt.encode({"sub": session.principal.id}, "wrong-secret", algorithm="HS256")
        with pytest.raises(GateRejection) as exc_info:
            await container.gate.authenticate(forged)
        assert exc_info.value.stage == GateState.TOKEN_EXTRACTED
        assert isinstance(exc_info.value.cause, BadSignatureError)

    @pytest.mark.asyncio
    async def test_expired_token(self, container, session, clock):
        clock.advance(hours=24)
        with pytest.raises(GateRejection) as exc_info:
            await container.gate.authenticate(session.token)
        assert isinstance(exc_info.value.cause, ExpiredTokenError)

    @pytest.mark.asyncio
    async def test_revocation_wins_over_validity(self, container, session):
        principal_id = session.principal.id
        await container.sessions.revoke(session.session_id, principal_id)

        # Still a well-formed, correctly signed, unexpired token
        assert container.tokens.verify(session.token).sub == principal_id

        with pytest.raises(GateRejection) as exc_info:
            await container.gate.authenticate(session.token)
        assert exc_info.value.stage == GateState.TOKEN_VERIFIED
        assert isinstance(exc_info.value.cause, RevokedSessionError)

    @pytest.mark.asyncio
    async def test_deactivated_principal_rejected(self, container, session):
        await container.credentials.deactivate(session.principal.id)
        with pytest.raises(GateRejection):
            await container.gate.authenticate(session.token)

    @pytest.mark.asyncio
    async def test_rejection_is_opaque(self, container, session, clock):
        await container.sessions.revoke(session.session_id, session.principal.id)
        with pytest.raises(GateRejection) as revoked:
            await container.gate.authenticate(session.token)
        with pytest.raises(GateRejection) as garbage:
            await container.gate.authenticate("garbage")
        assert revoked.value.to_dict() == garbage.value.to_dict() == {
            "error": "UNAUTHORIZED",
            "message": "Not authenticated",
            "details": {},
        }

    @pytest.mark.asyncio
    async def test_user_reflects_stored_tier(self, container, session):
        from shared.models import Tier

        await container.credentials.change_tier(session.principal.id, Tier.ENTERPRISE)
        user = await container.gate.authenticate(session.token)
        assert user.tier == Tier.ENTERPRISE

    @pytest.mark.asyncio
    async def test_touch_is_throttled(self, container, session, clock):
        clock.advance(seconds=30)
        await container.gate.authenticate(session.token)
        [listed] = await container.sessions.list(session.principal.id)
        assert listed.last_active_at == listed.created_at

        clock.advance(seconds=60)
        await container.gate.authenticate(session.token)
        [listed] = await container.sessions.list(session.principal.id)
        assert listed.last_active_at == listed.created_at + 90

    @pytest.mark.asyncio
    async def test_storage_failure_is_not_an_auth_failure(self, container, session, monkeypatch):
        monkeypatch.setattr(
            container.sessions,
            "resolve",
            AsyncMock(side_effect=DependencyError("down", service="supabase")),
        )
        with pytest.raises(DependencyError):
            await container.gate.authenticate(session.token)


class TestAuthenticateOptional:
    @pytest.mark.asyncio
    async def test_no_token_is_anonymous(self, container):
        assert await container.gate.authenticate_optional(None) is None

    @pytest.mark.asyncio
    async def test_bad_token_is_anonymous(self, container):
        assert await container.gate.authenticate_optional("garbage") is None

    @pytest.mark.asyncio
    async def test_valid_token_resolves(self, container, session):
        user = await container.gate.authenticate_optional(session.token)
        assert user.id == session.principal.id

    @pytest.mark.asyncio
    async def test_storage_failure_is_anonymous(self, container, session, monkeypatch):
        monkeypatch.setattr(
            container.sessions,
            "resolve",
            AsyncMock(side_effect=DependencyError("down", service="supabase")),
        )
        assert await container.gate.authenticate_optional(session.token) is None


def test_inactive_principal_error_carries_id():
    assert InactivePrincipalError("user-1").details == {"principal_id": "user-1"}
