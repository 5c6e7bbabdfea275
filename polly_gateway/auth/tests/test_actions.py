"""Tests for the auth action layer against the in-memory provider."""

from unittest.mock import AsyncMock

import pytest

from polly_gateway.auth.actions import AuthActions
from polly_gateway.auth.dataclasses import (
    Credentials,
    ProviderResult,
    RegistrationData,
)
from polly_gateway.auth.exceptions import AuthProviderUnavailableError
from polly_gateway.auth.providers.memory import (
    INVALID_CREDENTIALS,
    USER_ALREADY_REGISTERED,
    InMemoryAuthProvider,
)
from polly_gateway.auth.schemas import Session
from polly_gateway.auth.session_store import MemorySessionStore


@pytest.fixture
def provider():
    return InMemoryAuthProvider()


@pytest.fixture
def actions(provider):
    return AuthActions(provider, MemorySessionStore())


async def _register(actions, email="a@x.com", password="secret", name="Ada"):
    result = await actions.register(
        RegistrationData(email=email, password=password, name=name)
    )
    assert result.ok
    await actions.logout()


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_then_current_user_matches_email(self, actions):
        await _register(actions)

        result = await actions.login(Credentials(email="a@x.com", password="secret"))

        assert result.error is None
        user = await actions.get_current_user()
        assert user is not None
        assert user.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_wrong_password_returns_error_and_no_session(self, actions):
        await _register(actions)

        result = await actions.login(Credentials(email="a@x.com", password="wrong"))

        assert result.error == INVALID_CREDENTIALS
        assert not result.ok
        assert await actions.get_session() is None
        assert await actions.get_current_user() is None

    @pytest.mark.asyncio
    async def test_unknown_account_is_rejected(self, actions):
        result = await actions.login(
            Credentials(email="nobody@x.com", password="secret")
        )

        assert result.error == INVALID_CREDENTIALS
        assert await actions.get_session() is None

    @pytest.mark.asyncio
    async def test_provider_message_passes_through_unmodified(self):
        provider = AsyncMock()
        provider.sign_in_with_password.return_value = ProviderResult(
            error="Email not confirmed"
        )
        actions = AuthActions(provider, MemorySessionStore())

        result = await actions.login(Credentials(email="a@x.com", password="pw"))

        assert result.error == "Email not confirmed"

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self):
        provider = AsyncMock()
        provider.sign_in_with_password.side_effect = AuthProviderUnavailableError(
            "down"
        )
        actions = AuthActions(provider, MemorySessionStore())

        with pytest.raises(AuthProviderUnavailableError):
            await actions.login(Credentials(email="a@x.com", password="pw"))


class TestRegister:
    @pytest.mark.asyncio
    async def test_name_is_on_the_created_user(self, actions, provider):
        result = await actions.register(
            RegistrationData(email="a@x.com", password="secret", name="Ada")
        )

        assert result.ok
        user = await actions.get_current_user()
        assert user.name == "Ada"
        assert user.user_metadata == {"name": "Ada"}

    @pytest.mark.asyncio
    async def test_name_is_sent_with_the_sign_up_call(self):
        provider = AsyncMock()
        provider.sign_up.return_value = ProviderResult()
        actions = AuthActions(provider, MemorySessionStore())
        data = RegistrationData(email="a@x.com", password="secret", name="Ada")

        await actions.register(data)

        provider.sign_up.assert_awaited_once_with(data)
        # no follow-up profile update call
        assert [call[0] for call in provider.method_calls] == ["sign_up"]

    @pytest.mark.asyncio
    async def test_duplicate_registration_is_rejected(self, actions):
        await _register(actions)

        result = await actions.register(
            RegistrationData(email="a@x.com", password="secret", name="Ada")
        )

        assert result.error == USER_ALREADY_REGISTERED

    @pytest.mark.asyncio
    async def test_sign_up_without_session_stores_nothing(self):
        provider = AsyncMock()
        provider.sign_up.return_value = ProviderResult()
        store = MemorySessionStore()
        actions = AuthActions(provider, store)

        result = await actions.register(
            RegistrationData(email="a@x.com", password="secret", name="Ada")
        )

        assert result.ok
        assert store.load() is None


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_without_session_succeeds(self, actions):
        result = await actions.logout()

        assert result.error is None

    @pytest.mark.asyncio
    async def test_logout_ends_the_session(self, actions):
        await _register(actions)
        await actions.login(Credentials(email="a@x.com", password="secret"))

        result = await actions.logout()

        assert result.ok
        assert await actions.get_current_user() is None
        assert await actions.get_session() is None

    @pytest.mark.asyncio
    async def test_provider_error_keeps_the_session(self):
        provider = AsyncMock()
        provider.sign_out.return_value = ProviderResult(error="Sign out failed")
        store = MemorySessionStore()
        actions = AuthActions(provider, store)
        provider.sign_in_with_password.return_value = ProviderResult(
            session=Session(access_token="access", refresh_token="refresh")
        )
        await actions.login(Credentials(email="a@x.com", password="pw"))

        result = await actions.logout()

        assert result.error == "Sign out failed"
        assert store.load() is not None


class TestReads:
    @pytest.mark.asyncio
    async def test_reads_return_none_without_session(self, actions):
        assert await actions.get_current_user() is None
        assert await actions.get_session() is None

    @pytest.mark.asyncio
    async def test_get_session_returns_provider_session(self, actions):
        await _register(actions)
        await actions.login(Credentials(email="a@x.com", password="secret"))

        session = await actions.get_session()

        assert session is not None
        assert session.user.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_refresh_rotates_tokens(self, actions):
        await _register(actions)
        await actions.login(Credentials(email="a@x.com", password="secret"))
        old_tokens = actions.store.load()

        result = await actions.refresh()

        assert result.ok
        new_tokens = actions.store.load()
        assert new_tokens.access_token != old_tokens.access_token
        assert (await actions.get_current_user()).email == "a@x.com"

    @pytest.mark.asyncio
    async def test_refresh_without_session_fails(self, actions):
        result = await actions.refresh()

        assert result.error == "No refresh token found"
