"""
Storage for the tokens of the current session between calls.

The web API keeps them in HTTP-only cookies; in-process clients keep them in
memory. Stores never look inside a token.
"""

from abc import ABC, abstractmethod

from fastapi import Request, Response

from polly_gateway.auth import schemas
from polly_gateway.auth.config import AuthSettings, get_auth_settings
from polly_gateway.auth.constants import CookieNames
from polly_gateway.auth.dataclasses import StoredTokens


class SessionStore(ABC):
    """Where the current session's tokens live."""

    @abstractmethod
    def load(self) -> StoredTokens | None:
        """Return the stored tokens, or None when no session is stored."""
        pass

    @abstractmethod
    def save(self, session: schemas.Session) -> None:
        """Persist the tokens of a freshly issued session."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored session."""
        pass


class MemorySessionStore(SessionStore):
    """Keeps tokens on the instance; one store per client."""

    def __init__(self) -> None:
        self._tokens: StoredTokens | None = None

    def load(self) -> StoredTokens | None:
        return self._tokens

    def save(self, session: schemas.Session) -> None:
        self._tokens = StoredTokens(
            access_token=session.access_token, refresh_token=session.refresh_token
        )

    def clear(self) -> None:
        self._tokens = None


class CookieSessionStore(SessionStore):
    """Reads tokens from request cookies and writes them to the response."""

    _UNSET = object()

    def __init__(
        self,
        request: Request,
        response: Response,
        settings: AuthSettings | None = None,
    ) -> None:
        self.request = request
        self.response = response
        self.settings = settings or get_auth_settings()
        # Writes made during this request win over the incoming cookies
        self._override: StoredTokens | None | object = self._UNSET

    def load(self) -> StoredTokens | None:
        if self._override is not self._UNSET:
            return self._override

        access_token = self.request.cookies.get(CookieNames.SESSION_TOKEN.value)
        if not access_token:
            return None
        return StoredTokens(
            access_token=access_token,
            refresh_token=self.request.cookies.get(CookieNames.REFRESH_TOKEN.value),
        )

    def save(self, session: schemas.Session) -> None:
        self._set_cookie(
            CookieNames.SESSION_TOKEN.value,
            session.access_token,
            self.settings.session_cookie_max_age,
        )
        if session.refresh_token:
            self._set_cookie(
                CookieNames.REFRESH_TOKEN.value,
                session.refresh_token,
                self.settings.refresh_cookie_max_age,
            )
        self._override = StoredTokens(
            access_token=session.access_token, refresh_token=session.refresh_token
        )

    def clear(self) -> None:
        for cookie in CookieNames:
            self.response.delete_cookie(
                cookie.value,
                domain=self.settings.cookie_domain,
                secure=self.settings.cookie_secure,
                httponly=self.settings.cookie_httponly,
                samesite=self.settings.cookie_samesite.value,
            )
        self._override = None

    def _set_cookie(self, key: str, value: str, max_age: int) -> None:
        self.response.set_cookie(
            key=key,
            value=value,
            httponly=self.settings.cookie_httponly,
            secure=self.settings.cookie_secure,
            samesite=self.settings.cookie_samesite.value,
            max_age=max_age,
            domain=self.settings.cookie_domain,
        )
