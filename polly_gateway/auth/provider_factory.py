"""
Auth provider factory.

This module provides a factory function to create the appropriate auth provider
based on configuration.
"""

from polly_gateway.auth.base import AuthProvider
from polly_gateway.auth.config import get_auth_settings
from polly_gateway.auth.constants import AuthProviderName
from polly_gateway.auth.providers import (
    CognitoAuthProvider,
    InMemoryAuthProvider,
    SupabaseAuthProvider,
)


def create_auth_provider() -> AuthProvider:
    """
    Create an auth provider based on environment configuration.

    Returns:
        AuthProvider: The configured auth provider instance.

    Raises:
        ValueError: If an unknown auth provider is specified.
    """
    settings = get_auth_settings()
    provider = settings.auth_provider

    if provider == AuthProviderName.SUPABASE:
        return SupabaseAuthProvider(settings)
    elif provider == AuthProviderName.COGNITO:
        return CognitoAuthProvider(settings)
    elif provider == AuthProviderName.MEMORY:
        return InMemoryAuthProvider()
    else:
        raise ValueError(f"Unknown auth provider: {provider}")


def get_auth_provider() -> AuthProvider:
    """
    Get a singleton instance of the auth provider.

    This function caches the provider instance to avoid recreating it
    on every request.

    Returns:
        AuthProvider: The cached auth provider instance.
    """
    if not hasattr(get_auth_provider, "_instance"):
        get_auth_provider._instance = create_auth_provider()
    return get_auth_provider._instance


def reset_auth_provider() -> None:
    """Drop the cached provider so the next lookup rebuilds it from settings."""
    if hasattr(get_auth_provider, "_instance"):
        del get_auth_provider._instance
