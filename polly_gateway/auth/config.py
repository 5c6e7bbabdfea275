"""
Configuration management for the auth package.

This module handles environment variable configuration and validation
for the authentication system using Pydantic settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from polly_gateway.auth.constants import AuthProviderName, SameSite, TimeInSeconds
from polly_gateway.utils.logger import logger


class AuthSettings(BaseSettings):
    """Configuration for the auth system using Pydantic settings."""

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    # Provider configuration
    auth_provider: AuthProviderName = Field(
        default=AuthProviderName.SUPABASE,
        description="Credential backend to use (supabase, cognito or memory)",
    )
    request_timeout: float = Field(
        default=10.0, description="Timeout in seconds for provider HTTP calls"
    )

    # Supabase configuration
    supabase_url: str | None = Field(
        default=None, description="Supabase project URL"
    )
    supabase_anon_key: str | None = Field(
        default=None, description="Supabase anon (public) API key"
    )

    # AWS Cognito configuration
    aws_region: str = Field(
        default="us-west-1",
        description="AWS region for Cognito (can also be set via AWS_REGION env var)",
    )
    cognito_user_pool_id: str | None = Field(
        default=None, description="Cognito User Pool ID"
    )
    cognito_client_id: str | None = Field(
        default=None, description="Cognito App Client ID"
    )
    cognito_client_secret: str | None = Field(
        default=None, description="Cognito App Client Secret"
    )

    # Cookie configuration - defaults to most secure settings
    cookie_secure: bool = Field(
        default=True,
        description="Set secure flag for cookies (True for HTTPS, False for HTTP)",
    )
    cookie_samesite: SameSite = Field(
        default=SameSite.LAX, description="SameSite setting for cookies"
    )
    cookie_domain: str | None = Field(
        default=None, description="Domain for cookies (None for current domain)"
    )
    cookie_httponly: bool = Field(
        default=True, description="Set HttpOnly flag for cookies (True for security)"
    )
    session_cookie_max_age: int = Field(
        default=TimeInSeconds.ONE_HOUR,
        description="Lifetime of the session token cookie in seconds",
    )
    refresh_cookie_max_age: int = Field(
        default=TimeInSeconds.THIRTY_DAYS,
        description="Lifetime of the refresh token cookie in seconds",
    )

    def supabase_auth_url(self) -> str:
        """Base URL of the Supabase GoTrue API."""
        if not self.supabase_url:
            raise ValueError("SUPABASE_URL must be set")
        return f"{self.supabase_url.rstrip('/')}/auth/v1"


# Global settings instance
_auth_settings: AuthSettings | None = None


def get_auth_settings() -> AuthSettings:
    """
    Get the global auth settings instance.

    Returns:
        AuthSettings: The global settings instance
    """
    global _auth_settings
    if _auth_settings is None:
        _auth_settings = AuthSettings()
        logger.info(
            "AuthSettings loaded", auth_provider=_auth_settings.auth_provider.value
        )
    return _auth_settings


def set_auth_settings(settings: AuthSettings | None) -> None:
    """
    Set the global auth settings instance.

    Args:
        settings: The settings to set, or None to reload from the environment
    """
    global _auth_settings
    _auth_settings = settings
