"""
Server-side auth actions.

Each action makes one call to the credential backend and reports the outcome
as an ``AuthResult``. Credential rejections come back as values carrying the
provider's message unmodified; ``AuthProviderUnavailableError`` propagates
and callers must be prepared to catch it.

Credentials are used for the single provider call and are never logged.
"""

from polly_gateway.auth import schemas
from polly_gateway.auth.base import AuthProvider
from polly_gateway.auth.dataclasses import AuthResult, Credentials, RegistrationData
from polly_gateway.auth.session_store import SessionStore
from polly_gateway.utils.logger import logger


class AuthActions:
    """Login, registration, logout and identity reads for one session store."""

    def __init__(self, provider: AuthProvider, store: SessionStore):
        self.provider = provider
        self.store = store

    async def login(self, credentials: Credentials) -> AuthResult:
        result = await self.provider.sign_in_with_password(
            credentials.email, credentials.password
        )
        if result.error is not None:
            logger.info("Login rejected by provider")
            return AuthResult.failure(result.error)

        if result.session:
            self.store.save(result.session)
        logger.info("Login succeeded", user_id=result.user.id if result.user else None)
        return AuthResult.success()

    async def register(self, data: RegistrationData) -> AuthResult:
        result = await self.provider.sign_up(data)
        if result.error is not None:
            logger.info("Registration rejected by provider")
            return AuthResult.failure(result.error)

        # No session yet when the provider waits for email confirmation
        if result.session:
            self.store.save(result.session)
        logger.info(
            "Registration succeeded",
            user_id=result.user.id if result.user else None,
            session_issued=result.session is not None,
        )
        return AuthResult.success()

    async def logout(self) -> AuthResult:
        tokens = self.store.load()
        if tokens is None:
            self.store.clear()
            return AuthResult.success()

        result = await self.provider.sign_out(tokens.access_token)
        if result.error is not None:
            logger.warning("Logout rejected by provider", error=result.error)
            return AuthResult.failure(result.error)

        self.store.clear()
        logger.info("Logout succeeded")
        return AuthResult.success()

    async def refresh(self) -> AuthResult:
        """Exchange the stored refresh token for a new session."""
        tokens = self.store.load()
        if tokens is None or not tokens.refresh_token:
            return AuthResult.failure("No refresh token found")

        result = await self.provider.refresh_session(tokens.refresh_token)
        if result.error is not None:
            logger.info("Session refresh rejected by provider")
            return AuthResult.failure(result.error)

        if result.session:
            self.store.save(result.session)
        return AuthResult.success()

    async def get_current_user(self) -> schemas.User | None:
        tokens = self.store.load()
        if tokens is None:
            return None
        return await self.provider.get_user(tokens.access_token)

    async def get_session(self) -> schemas.Session | None:
        tokens = self.store.load()
        if tokens is None:
            return None
        return await self.provider.get_session(tokens.access_token)
