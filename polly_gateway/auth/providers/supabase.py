"""
Supabase authentication provider.

This module implements the AuthProvider interface against the Supabase
GoTrue REST API, handling the wire format and error translation.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar

import httpx

from polly_gateway.auth import schemas
from polly_gateway.auth.base import AuthProvider
from polly_gateway.auth.config import AuthSettings, get_auth_settings
from polly_gateway.auth.constants import SupabaseEndpoints, TimeInSeconds
from polly_gateway.auth.dataclasses import ProviderResult, RegistrationData
from polly_gateway.auth.exceptions import AuthProviderUnavailableError
from polly_gateway.utils.logger import logger

# Status codes meaning "this token is no longer a session"
_STALE_TOKEN_STATUSES = {401, 403, 404}

T = TypeVar("T")


class SupabaseAuthProvider(AuthProvider):
    """Supabase GoTrue implementation of the AuthProvider interface."""

    def __init__(
        self,
        settings: AuthSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the Supabase auth provider."""
        settings = settings or get_auth_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

        self.base_url = settings.supabase_auth_url()
        self.api_key = settings.supabase_anon_key
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout),
            headers={
                "Content-Type": "application/json",
                "apikey": self.api_key,
            },
        )

        logger.info("SupabaseAuthProvider initialized", base_url=self.base_url)

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        access_token: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a request to the GoTrue API, bearer-authenticated when a token is given."""
        url = f"{self.base_url}{endpoint}"
        headers = {"Authorization": f"Bearer {access_token or self.api_key}"}
        try:
            response = await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Supabase request failed", endpoint=endpoint, error=str(e))
            raise AuthProviderUnavailableError(
                f"Supabase auth is unreachable: {e}"
            ) from e

        if response.status_code >= 500:
            logger.error(
                "Supabase returned a server error",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise AuthProviderUnavailableError(
                f"Supabase auth failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def sign_in_with_password(self, email: str, password: str) -> ProviderResult:
        """Sign in a user with email and password."""
        response = await self._make_request(
            "POST",
            SupabaseEndpoints.PASSWORD_GRANT.value,
            json={"email": email, "password": password},
        )
        if response.is_error:
            return ProviderResult(error=self._error_message(response))

        session = self._parse_body(response, self._parse_session)
        return ProviderResult(session=session, user=session.user)

    async def sign_up(self, data: RegistrationData) -> ProviderResult:
        """Register a new user with the display name in ``user_metadata``."""
        response = await self._make_request(
            "POST",
            SupabaseEndpoints.SIGNUP.value,
            json={
                "email": data.email,
                "password": data.password,
                "data": {"name": data.name},
            },
        )
        if response.is_error:
            return ProviderResult(error=self._error_message(response))

        return self._parse_body(response, self._parse_sign_up)

    async def sign_out(self, access_token: str) -> ProviderResult:
        """Sign out a user."""
        response = await self._make_request(
            "POST", SupabaseEndpoints.LOGOUT.value, access_token=access_token
        )
        if response.is_error and response.status_code not in _STALE_TOKEN_STATUSES:
            return ProviderResult(error=self._error_message(response))
        return ProviderResult()

    async def get_user(self, access_token: str) -> schemas.User | None:
        """Get the user behind an access token."""
        response = await self._make_request(
            "GET", SupabaseEndpoints.USER.value, access_token=access_token
        )
        if response.is_error:
            logger.debug(
                "Supabase rejected access token", status_code=response.status_code
            )
            return None
        return self._parse_body(response, self._parse_user)

    async def get_session(self, access_token: str) -> schemas.Session | None:
        """Get session information from access token."""
        user = await self.get_user(access_token)
        if not user:
            return None
        # GoTrue does not echo the refresh token or expiry for an access token
        return schemas.Session(access_token=access_token, user=user)

    async def refresh_session(self, refresh_token: str) -> ProviderResult:
        """Exchange a refresh token for a new session."""
        response = await self._make_request(
            "POST",
            SupabaseEndpoints.REFRESH_GRANT.value,
            json={"refresh_token": refresh_token},
        )
        if response.is_error:
            return ProviderResult(error=self._error_message(response))

        session = self._parse_body(response, self._parse_session)
        return ProviderResult(session=session, user=session.user)

    async def close(self) -> None:
        await self.client.aclose()

    # Helper methods

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull the human-readable message out of a GoTrue error body."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, dict):
            for key in ("msg", "message", "error_description", "error"):
                if body.get(key):
                    return str(body[key])
        return response.reason_phrase or f"Request failed ({response.status_code})"

    @staticmethod
    def _parse_body(response: httpx.Response, parse: Callable[[dict], T]) -> T:
        """Parse a success body; an unreadable one means the provider is failing."""
        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("expected a JSON object")
            return parse(payload)
        except (ValueError, KeyError, TypeError) as e:
            logger.error(
                "Supabase returned a malformed body",
                url=str(response.request.url),
                status_code=response.status_code,
                error=str(e),
            )
            raise AuthProviderUnavailableError(
                f"Supabase auth returned a malformed response: {e}",
                status_code=response.status_code,
            ) from e

    def _parse_sign_up(self, payload: dict) -> ProviderResult:
        # With email confirmation on, GoTrue answers with the bare user
        if payload.get("access_token"):
            session = self._parse_session(payload)
            return ProviderResult(session=session, user=session.user)
        return ProviderResult(user=self._parse_user(payload.get("user") or payload))

    def _parse_session(self, payload: dict) -> schemas.Session:
        if payload.get("expires_at"):
            expires_at = datetime.fromtimestamp(payload["expires_at"], tz=UTC)
        else:
            expires_at = datetime.now(UTC) + timedelta(
                seconds=payload.get("expires_in", TimeInSeconds.ONE_HOUR)
            )
        user_payload = payload.get("user")
        return schemas.Session(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            token_type=payload.get("token_type", "bearer"),
            expires_at=expires_at,
            user=self._parse_user(user_payload) if user_payload else None,
        )

    @staticmethod
    def _parse_user(payload: dict) -> schemas.User:
        return schemas.User(
            id=payload["id"],
            email=payload.get("email", ""),
            user_metadata=payload.get("user_metadata") or {},
            email_confirmed=bool(
                payload.get("email_confirmed_at") or payload.get("confirmed_at")
            ),
            created_at=payload.get("created_at"),
        )
