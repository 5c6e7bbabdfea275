"""
Session context: the client-side holder of the currently known user.

One context is created per client and passed to whatever needs the current
identity. Only the context's own lifecycle methods change it; readers get a
copy of the user, never the held instance.

``UNKNOWN`` means "not resolved yet" and is distinct from ``ANONYMOUS``
("resolved, nobody is signed in"). Consumers such as the ownership guard must
not treat the former as the latter.
"""

import asyncio
from enum import Enum

from polly_gateway.auth import schemas
from polly_gateway.auth.actions import AuthActions
from polly_gateway.auth.dataclasses import AuthResult
from polly_gateway.utils.logger import logger


class SessionStatus(str, Enum):
    """Resolution state of the current identity."""

    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class SessionContext:
    def __init__(self, actions: AuthActions):
        self._actions = actions
        self._user: schemas.User | None = None
        self._status = SessionStatus.UNKNOWN
        self._lock = asyncio.Lock()
        # Bumped by clear() and close(); a resolution started under an older
        # generation is discarded when it completes
        self._generation = 0

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_resolved(self) -> bool:
        return self._status is not SessionStatus.UNKNOWN

    @property
    def user(self) -> schemas.User | None:
        """Snapshot of the current user; None while unknown or anonymous."""
        if self._user is None:
            return None
        return self._user.model_copy(deep=True)

    async def initialize(self) -> None:
        """Resolve the current user once. Later calls are no-ops."""
        await self._resolve(force=False)

    async def reload(self) -> None:
        """Re-resolve the current user from the identity provider."""
        self._user = None
        self._status = SessionStatus.UNKNOWN
        await self._resolve(force=True)

    def clear(self) -> None:
        """Forget the current user immediately."""
        self._generation += 1
        self._user = None
        self._status = SessionStatus.ANONYMOUS

    async def logout(self) -> AuthResult:
        result = await self._actions.logout()
        if result.ok:
            self.clear()
        return result

    async def close(self) -> None:
        """Tear the context down; it reads as unknown afterwards."""
        self._generation += 1
        self._user = None
        self._status = SessionStatus.UNKNOWN

    async def __aenter__(self) -> "SessionContext":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _resolve(self, force: bool) -> None:
        async with self._lock:
            if not force and self.is_resolved:
                return
            generation = self._generation
            user = await self._actions.get_current_user()
            if generation != self._generation:
                logger.debug("Discarding stale session resolution")
                return
            self._user = user
            self._status = (
                SessionStatus.AUTHENTICATED if user else SessionStatus.ANONYMOUS
            )
