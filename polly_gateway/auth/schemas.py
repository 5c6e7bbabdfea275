"""
Auth-specific Pydantic schemas for request and response models.

This module contains the user and session snapshots handed out by the
credential backends, plus the request and response bodies of the auth API.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Core domain models
class User(BaseModel):
    """Immutable snapshot of a user record owned by the identity provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="User's unique identifier")
    email: str = Field(..., description="User's email address")
    user_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-held profile metadata set at sign-up",
    )
    email_confirmed: bool = Field(
        default=False, description="Whether user's email is confirmed"
    )
    created_at: datetime | None = Field(None, description="User creation timestamp")

    @property
    def name(self) -> str | None:
        """Display name attached at registration."""
        return self.user_metadata.get("name")


class Session(BaseModel):
    """Opaque session bundle issued by the identity provider."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., description="Access token")
    refresh_token: str | None = Field(None, description="Refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_at: datetime | None = Field(None, description="Token expiration timestamp")
    user: User | None = Field(None, description="User information")


# Request schemas
class LoginRequest(BaseModel):
    """Schema for password login requests."""

    email: str = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class RegisterRequest(LoginRequest):
    """Schema for registration requests."""

    name: str = Field(..., description="Display name stored as profile metadata")


# Response schemas
class AuthResponse(BaseModel):
    """Uniform result of every credential-mutating endpoint."""

    error: str | None = Field(None, description="Error message if operation failed")


class SessionStatusResponse(BaseModel):
    """Schema for the current-session lookup."""

    authenticated: bool = Field(..., description="Whether a session is current")
    expires_at: datetime | None = Field(None, description="Session expiry, if known")
    user: User | None = Field(None, description="Current user, if any")
