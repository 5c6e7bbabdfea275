"""Tests for the session context lifecycle."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from polly_gateway.auth.actions import AuthActions
from polly_gateway.auth.dataclasses import AuthResult, Credentials, RegistrationData
from polly_gateway.auth.exceptions import AuthProviderUnavailableError
from polly_gateway.auth.providers.memory import InMemoryAuthProvider
from polly_gateway.auth.schemas import User
from polly_gateway.auth.session_context import SessionContext, SessionStatus
from polly_gateway.auth.session_store import MemorySessionStore


@pytest.fixture
def actions():
    return AuthActions(InMemoryAuthProvider(), MemorySessionStore())


@pytest.fixture
def ada():
    return User(id="1", email="ada@x.com", user_metadata={"name": "Ada"})


class TestSessionContext:
    def test_starts_unknown(self, actions):
        context = SessionContext(actions)

        assert context.status is SessionStatus.UNKNOWN
        assert not context.is_resolved
        assert context.user is None

    @pytest.mark.asyncio
    async def test_initialize_without_session_is_anonymous(self, actions):
        context = SessionContext(actions)

        await context.initialize()

        assert context.status is SessionStatus.ANONYMOUS
        assert context.user is None

    @pytest.mark.asyncio
    async def test_initialize_with_session_is_authenticated(self, actions):
        await actions.register(
            RegistrationData(email="a@x.com", password="secret", name="Ada")
        )
        context = SessionContext(actions)

        await context.initialize()

        assert context.status is SessionStatus.AUTHENTICATED
        assert context.user.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_initialize_resolves_once(self, ada):
        stub = AsyncMock(spec=AuthActions)
        stub.get_current_user.return_value = ada
        context = SessionContext(stub)

        await asyncio.gather(context.initialize(), context.initialize())
        await context.initialize()

        assert stub.get_current_user.await_count == 1

    @pytest.mark.asyncio
    async def test_user_is_a_snapshot(self, ada):
        stub = AsyncMock(spec=AuthActions)
        stub.get_current_user.return_value = ada
        context = SessionContext(stub)
        await context.initialize()

        snapshot = context.user
        snapshot.user_metadata["name"] = "Mallory"

        assert context.user.name == "Ada"
        assert snapshot is not context.user

    @pytest.mark.asyncio
    async def test_reload_picks_up_login(self, actions):
        await actions.register(
            RegistrationData(email="a@x.com", password="secret", name="Ada")
        )
        await actions.logout()
        context = SessionContext(actions)
        await context.initialize()
        assert context.status is SessionStatus.ANONYMOUS

        await actions.login(Credentials(email="a@x.com", password="secret"))
        await context.reload()

        assert context.status is SessionStatus.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_reload_reads_unknown_while_pending(self, ada):
        release = asyncio.Event()

        async def slow_user():
            await release.wait()
            return ada

        stub = AsyncMock(spec=AuthActions)
        stub.get_current_user.return_value = ada
        context = SessionContext(stub)
        await context.initialize()

        stub.get_current_user.side_effect = slow_user
        task = asyncio.create_task(context.reload())
        await asyncio.sleep(0)

        assert context.status is SessionStatus.UNKNOWN
        assert context.user is None

        release.set()
        await task
        assert context.status is SessionStatus.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_logout_clears_user(self, actions):
        await actions.register(
            RegistrationData(email="a@x.com", password="secret", name="Ada")
        )
        context = SessionContext(actions)
        await context.initialize()

        result = await context.logout()

        assert result.ok
        assert context.status is SessionStatus.ANONYMOUS
        assert context.user is None

    @pytest.mark.asyncio
    async def test_failed_logout_keeps_user(self, ada):
        stub = AsyncMock(spec=AuthActions)
        stub.get_current_user.return_value = ada
        stub.logout.return_value = AuthResult.failure("Sign out failed")
        context = SessionContext(stub)
        await context.initialize()

        result = await context.logout()

        assert result.error == "Sign out failed"
        assert context.user.id == "1"

    @pytest.mark.asyncio
    async def test_clear_discards_resolution_in_flight(self, ada):
        release = asyncio.Event()

        async def slow_user():
            await release.wait()
            return ada

        stub = AsyncMock(spec=AuthActions)
        stub.get_current_user.side_effect = slow_user
        context = SessionContext(stub)

        task = asyncio.create_task(context.initialize())
        await asyncio.sleep(0)
        context.clear()
        release.set()
        await task

        assert context.status is SessionStatus.ANONYMOUS
        assert context.user is None

    @pytest.mark.asyncio
    async def test_provider_outage_leaves_status_unknown(self):
        stub = AsyncMock(spec=AuthActions)
        stub.get_current_user.side_effect = AuthProviderUnavailableError("down")
        context = SessionContext(stub)

        with pytest.raises(AuthProviderUnavailableError):
            await context.initialize()

        assert context.status is SessionStatus.UNKNOWN

    @pytest.mark.asyncio
    async def test_async_context_manager_lifecycle(self, ada):
        stub = AsyncMock(spec=AuthActions)
        stub.get_current_user.return_value = ada

        async with SessionContext(stub) as context:
            assert context.status is SessionStatus.AUTHENTICATED

        assert context.status is SessionStatus.UNKNOWN
        assert context.user is None
