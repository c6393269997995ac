"""Tests for AuthService flows."""

import pytest

from modules.auth.exceptions import DuplicateEmailError, InvalidCredentialsError
from modules.auth.gate import GateRejection
from modules.sessions.exceptions import SessionNotFoundError
from modules.sessions.service import hash_token
from shared.clock import epoch_seconds
from shared.exceptions import DependencyError, ValidationError


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_opens_session(self, container, clock):
        result = await container.auth.register(
            "alice@example.com", "Pass1234!", "alice", device_info="pytest", ip_address="10.0.0.1"
        )
        assert result.principal.email == "alice@example.com"
        assert result.expires_at == epoch_seconds(clock()) + 24 * 3600

        [session] = await container.sessions.list(result.principal.id)
        assert session.id == result.session_id
        assert session.device_info == "pytest"
        assert session.ip_address == "10.0.0.1"

    @pytest.mark.asyncio
    async def test_session_expiry_equals_token_expiry(self, container):
        result = await container.auth.register("alice@example.com", "Pass1234!")
        claims = container.tokens.verify(result.token)
        [session] = await container.sessions.list(result.principal.id)
        assert session.expires_at == claims.exp == result.expires_at

    @pytest.mark.asyncio
    async def test_only_token_hash_is_stored(self, container):
        result = await container.auth.register("alice@example.com", "Pass1234!")
        [session] = await container.sessions.list(result.principal.id)
        assert session.token_hash == hash_token(result.token)
        assert result.token not in session.model_dump_json()

    @pytest.mark.asyncio
    async def test_re_registration_rejected(self, container):
        await container.auth.register("alice@example.com", "Pass1234!")
        with pytest.raises(DuplicateEmailError):
            await container.auth.register("alice@example.com", "Pass1234!")

    @pytest.mark.asyncio
    async def test_session_failure_leaves_no_principal(self, container, monkeypatch):
        async def unavailable(*args, **kwargs):
            raise DependencyError("user_sessions unreachable", service="supabase")

        monkeypatch.setattr(container.sessions, "register", unavailable)
        with pytest.raises(DependencyError):
            await container.auth.register("alice@example.com", "Pass1234!", "alice")

        assert container.principal_repository.email_exists("alice@example.com") is False
        assert container.principal_repository.username_exists("alice") is False

        monkeypatch.undo()
        result = await container.auth.register("alice@example.com", "Pass1234!", "alice")
        assert result.principal.username == "alice"

    @pytest.mark.asyncio
    async def test_failed_cleanup_reraises_original_error(self, container, monkeypatch):
        async def unavailable(*args, **kwargs):
            raise DependencyError("user_sessions unreachable", service="supabase")

        def delete_fails(principal_id):
            raise DependencyError("users unreachable", service="supabase")

        monkeypatch.setattr(container.sessions, "register", unavailable)
        monkeypatch.setattr(container.principal_repository, "delete", delete_fails)

        with pytest.raises(DependencyError, match="user_sessions unreachable"):
            await container.auth.register("alice@example.com", "Pass1234!")


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_scenario(self, container):
        await container.auth.register("alice@example.com", "Pass1234!")

        result = await container.auth.login("alice@example.com", "Pass1234!")
        assert result.principal.last_login_at is not None

        with pytest.raises(InvalidCredentialsError):
            await container.auth.login("alice@example.com", "pass1234!")

    @pytest.mark.asyncio
    async def test_each_login_is_a_new_session(self, container):
        registered = await container.auth.register("alice@example.com", "Pass1234!")
        first = await container.auth.login("alice@example.com", "Pass1234!")
        second = await container.auth.login("alice@example.com", "Pass1234!")

        ids = {s.id for s in await container.sessions.list(registered.principal.id)}
        assert ids == {registered.session_id, first.session_id, second.session_id}


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_revokes_only_current_session(self, container):
        laptop = await container.auth.register("alice@example.com", "Pass1234!")
        phone = await container.auth.login("alice@example.com", "Pass1234!")

        user = await container.gate.authenticate(laptop.token)
        await container.auth.logout(user)

        with pytest.raises(GateRejection):
            await container.gate.authenticate(laptop.token)
        assert (await container.gate.authenticate(phone.token)).session_id == phone.session_id

    @pytest.mark.asyncio
    async def test_logout_without_session(self, container):
        laptop = await container.auth.register("alice@example.com", "Pass1234!")
        user = laptop.principal.to_authenticated_user()
        with pytest.raises(ValidationError):
            await container.auth.logout(user)

    @pytest.mark.asyncio
    async def test_logout_all_scenario(self, container):
        await container.auth.register("alice@example.com", "Pass1234!")
        laptop = await container.auth.login("alice@example.com", "Pass1234!")
        phone = await container.auth.login("alice@example.com", "Pass1234!")
        principal_id = laptop.principal.id

        revoked = await container.auth.logout_all(principal_id)

        assert revoked == 3
        assert await container.sessions.list(principal_id) == []
        for token in (laptop.token, phone.token):
            with pytest.raises(GateRejection):
                await container.gate.authenticate(token)


class TestSessionManagement:
    @pytest.mark.asyncio
    async def test_list_marks_current_session(self, container, clock):
        laptop = await container.auth.register("alice@example.com", "Pass1234!")
        clock.advance(minutes=5)
        phone = await container.auth.login("alice@example.com", "Pass1234!")

        user = laptop.principal.to_authenticated_user(session_id=laptop.session_id)
        sessions = await container.auth.list_sessions(user)

        assert [s.id for s in sessions] == [phone.session_id, laptop.session_id]
        assert [s.current for s in sessions] == [False, True]

    @pytest.mark.asyncio
    async def test_list_omits_expired(self, container, clock):
        old = await container.auth.register("alice@example.com", "Pass1234!")
        clock.advance(hours=23)
        fresh = await container.auth.login("alice@example.com", "Pass1234!")
        clock.advance(hours=1)

        user = await container.gate.authenticate(fresh.token)
        sessions = await container.auth.list_sessions(user)
        assert [s.id for s in sessions] == [fresh.session_id]
        assert old.session_id not in [s.id for s in sessions]

    @pytest.mark.asyncio
    async def test_revoke_foreign_session_refused(self, container):
        alice = await container.auth.register("alice@example.com", "Pass1234!")
        bob = await container.auth.register("bob@example.com", "Pass1234!")

        with pytest.raises(SessionNotFoundError):
            await container.auth.revoke_session(bob.principal.id, alice.session_id)

        # Alice is unaffected
        await container.gate.authenticate(alice.token)

    @pytest.mark.asyncio
    async def test_revoke_own_session(self, container):
        laptop = await container.auth.register("alice@example.com", "Pass1234!")
        phone = await container.auth.login("alice@example.com", "Pass1234!")

        await container.auth.revoke_session(laptop.principal.id, phone.session_id)

        with pytest.raises(GateRejection):
            await container.gate.authenticate(phone.token)
