"""
Core authentication value types.

Credentials only live for the duration of a single action call, so their
``repr`` never includes the password.
"""

from dataclasses import dataclass, field

from polly_gateway.auth import schemas


@dataclass(frozen=True)
class Credentials:
    """Email and password submitted at login."""

    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class RegistrationData(Credentials):
    """Credentials plus the display name attached at account creation."""

    name: str


@dataclass(frozen=True)
class AuthResult:
    """Result of every credential action. ``error`` is None on success."""

    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> "AuthResult":
        return cls(error=None)

    @classmethod
    def failure(cls, message: str) -> "AuthResult":
        return cls(error=message)


@dataclass(frozen=True)
class ProviderResult:
    """Result of a credential backend call."""

    session: schemas.Session | None = None
    user: schemas.User | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class StoredTokens:
    """Session tokens kept between calls by a session store."""

    access_token: str = field(repr=False)
    refresh_token: str | None = field(default=None, repr=False)
