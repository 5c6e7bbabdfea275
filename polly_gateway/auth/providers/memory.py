"""
In-memory authentication provider for local development and tests.

Users and sessions live in process memory and vanish on restart. Error
messages follow Supabase's wording so clients behave the same against either
backend.
"""

import hashlib
import hmac
import os
import secrets
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from polly_gateway.auth import schemas
from polly_gateway.auth.base import AuthProvider
from polly_gateway.auth.constants import TimeInSeconds
from polly_gateway.auth.dataclasses import ProviderResult, RegistrationData
from polly_gateway.utils.logger import logger

PASSWORD_ITERATIONS = 100_000
MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid login credentials"
USER_ALREADY_REGISTERED = "User already registered"
WEAK_PASSWORD = f"Password should be at least {MIN_PASSWORD_LENGTH} characters."
INVALID_REFRESH_TOKEN = "Invalid Refresh Token: Refresh Token Not Found"


@dataclass
class _StoredUser:
    user: schemas.User
    password_salt: str
    password_hash: str


@dataclass
class _StoredSession:
    user_id: str
    expires_at: datetime
    refresh_token: str


def _hash_password(password: str, salt_hex: str) -> str:
    salt = bytes.fromhex(salt_hex)
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, PASSWORD_ITERATIONS
    ).hex()


class InMemoryAuthProvider(AuthProvider):
    """Process-local implementation of the AuthProvider interface."""

    def __init__(self, session_ttl_seconds: int = TimeInSeconds.ONE_HOUR):
        self.session_ttl = timedelta(seconds=session_ttl_seconds)
        self._users: dict[str, _StoredUser] = {}  # keyed by stripped, lowercased email
        self._sessions: dict[str, _StoredSession] = {}  # keyed by access token
        self._refresh_tokens: dict[str, str] = {}  # refresh token -> user id

    async def sign_in_with_password(self, email: str, password: str) -> ProviderResult:
        stored = self._users.get(email.strip().lower())
        if stored is None or not hmac.compare_digest(
            _hash_password(password, stored.password_salt), stored.password_hash
        ):
            return ProviderResult(error=INVALID_CREDENTIALS)

        session = self._issue_session(stored.user)
        return ProviderResult(session=session, user=session.user)

    async def sign_up(self, data: RegistrationData) -> ProviderResult:
        key = data.email.strip().lower()
        if key in self._users:
            return ProviderResult(error=USER_ALREADY_REGISTERED)
        if len(data.password) < MIN_PASSWORD_LENGTH:
            return ProviderResult(error=WEAK_PASSWORD)

        salt_hex = os.urandom(16).hex()
        user = schemas.User(
            id=str(uuid.uuid4()),
            email=data.email,
            user_metadata={"name": data.name},
            email_confirmed=True,
            created_at=datetime.now(UTC),
        )
        self._users[key] = _StoredUser(
            user=user,
            password_salt=salt_hex,
            password_hash=_hash_password(data.password, salt_hex),
        )
        logger.info("Registered in-memory user", user_id=user.id)

        session = self._issue_session(user)
        return ProviderResult(session=session, user=user)

    async def sign_out(self, access_token: str) -> ProviderResult:
        stored = self._sessions.pop(access_token, None)
        if stored is not None:
            self._refresh_tokens.pop(stored.refresh_token, None)
        return ProviderResult()

    async def get_user(self, access_token: str) -> schemas.User | None:
        stored = self._live_session(access_token)
        if stored is None:
            return None
        return self._user_by_id(stored.user_id)

    async def get_session(self, access_token: str) -> schemas.Session | None:
        stored = self._live_session(access_token)
        if stored is None:
            return None
        return schemas.Session(
            access_token=access_token,
            refresh_token=stored.refresh_token,
            expires_at=stored.expires_at,
            user=self._user_by_id(stored.user_id),
        )

    async def refresh_session(self, refresh_token: str) -> ProviderResult:
        user_id = self._refresh_tokens.pop(refresh_token, None)
        user = self._user_by_id(user_id) if user_id else None
        if user is None:
            return ProviderResult(error=INVALID_REFRESH_TOKEN)

        # Rotation: the old access token dies with its refresh token
        for token, stored in list(self._sessions.items()):
            if stored.refresh_token == refresh_token:
                del self._sessions[token]

        session = self._issue_session(user)
        return ProviderResult(session=session, user=user)

    # Helper methods

    def _issue_session(self, user: schemas.User) -> schemas.Session:
        access_token = secrets.token_urlsafe(32)
        refresh_token = secrets.token_urlsafe(32)
        expires_at = datetime.now(UTC) + self.session_ttl
        self._sessions[access_token] = _StoredSession(
            user_id=user.id, expires_at=expires_at, refresh_token=refresh_token
        )
        self._refresh_tokens[refresh_token] = user.id
        return schemas.Session(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            user=user,
        )

    def _live_session(self, access_token: str) -> _StoredSession | None:
        stored = self._sessions.get(access_token)
        if stored is None:
            return None
        if datetime.now(UTC) >= stored.expires_at:
            del self._sessions[access_token]
            return None
        return stored

    def _user_by_id(self, user_id: str) -> schemas.User | None:
        for stored in self._users.values():
            if stored.user.id == user_id:
                return stored.user
        return None
