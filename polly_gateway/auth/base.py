"""
Abstract interface for credential backends.

This module defines the contract every identity provider adapter implements.
Credential-level failures (bad password, duplicate account, provider-side
validation) are returned as ``ProviderResult.error`` with the provider's own
human-readable message. Transport failures and provider outages raise
``AuthProviderUnavailableError`` instead.
"""

from abc import ABC, abstractmethod

from polly_gateway.auth import schemas
from polly_gateway.auth.dataclasses import ProviderResult, RegistrationData


class AuthProvider(ABC):
    """Abstract interface for authentication providers."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> ProviderResult:
        """
        Sign in a user with email and password.

        Returns:
            ProviderResult: the issued session on success, or the provider's error

        Raises:
            AuthProviderUnavailableError: If the provider cannot be reached
        """
        pass

    @abstractmethod
    async def sign_up(self, data: RegistrationData) -> ProviderResult:
        """
        Register a new user with ``data.name`` attached as profile metadata.

        The metadata is written by the same provider call that creates the
        account. A session is included only if the provider issues one at
        sign-up (for instance when email confirmation is disabled).
        """
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> ProviderResult:
        """
        Sign out the session behind ``access_token``.

        A token the provider no longer recognises is reported as success.
        """
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> schemas.User | None:
        """Get the user behind an access token, or None if it is not valid."""
        pass

    @abstractmethod
    async def get_session(self, access_token: str) -> schemas.Session | None:
        """Get session information from access token."""
        pass

    @abstractmethod
    async def refresh_session(self, refresh_token: str) -> ProviderResult:
        """Exchange a refresh token for a new session."""
        pass

    async def close(self) -> None:
        """Release any network resources held by the provider."""
        return None
