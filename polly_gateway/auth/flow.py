"""
Login and registration flows.

A flow drives one form through ``IDLE -> SUBMITTING -> SUCCESS | FAILED``.
While a submission is pending further submits are ignored, so a double click
results in a single auth action. On success the flow performs a full
navigation to the landing route: the identity is re-resolved from the
provider before the next view reads it, rather than reusing cached state.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any

from polly_gateway.auth.actions import AuthActions
from polly_gateway.auth.constants import GENERIC_AUTH_ERROR
from polly_gateway.auth.dataclasses import AuthResult, Credentials, RegistrationData
from polly_gateway.auth.exceptions import AuthProviderUnavailableError, FormFieldError
from polly_gateway.auth.session_context import SessionContext
from polly_gateway.config import get_app_settings
from polly_gateway.utils.logger import logger


class FlowState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class Navigator(ABC):
    """Moves the client to another route."""

    current_path: str = "/"

    @abstractmethod
    async def navigate(self, path: str, *, full_reload: bool = False) -> None:
        pass

    async def reload(self) -> None:
        """Fully reload the current route."""
        await self.navigate(self.current_path, full_reload=True)


class SessionAwareNavigator(Navigator):
    """Navigator that re-resolves the session before a full reload lands.

    A full reload discards whatever identity the client had cached and asks
    the provider again, the in-process counterpart of a hard page load.
    """

    def __init__(self, session_context: SessionContext, current_path: str = "/"):
        self.session_context = session_context
        self.current_path = current_path
        self.history: list[str] = []

    async def navigate(self, path: str, *, full_reload: bool = False) -> None:
        if full_reload:
            await self.session_context.reload()
        self.history.append(path)
        self.current_path = path
        logger.debug("Navigated", path=path, full_reload=full_reload)


class AuthFlow(ABC):
    """Shared state machine of the login and registration forms."""

    fields: tuple[str, ...] = ()
    idle_label = ""
    pending_label = ""

    def __init__(
        self,
        actions: AuthActions,
        navigator: Navigator,
        landing_path: str | None = None,
    ):
        settings = get_app_settings()
        self.actions = actions
        self.navigator = navigator
        self.landing_path = landing_path or settings.landing_path
        self.register_path = settings.register_path
        self._state = FlowState.IDLE
        self._error: str | None = None

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def error(self) -> str | None:
        """Message to display, exactly as the provider worded it."""
        return self._error

    @property
    def form_enabled(self) -> bool:
        return self._state is not FlowState.SUBMITTING

    @property
    def submit_label(self) -> str:
        if self._state is FlowState.SUBMITTING:
            return self.pending_label
        return self.idle_label

    async def submit(self, form: Mapping[str, Any]) -> AuthResult | None:
        """
        Submit the form once.

        Returns:
            The action's result, or None when a submission is already pending.

        Raises:
            FormFieldError: If a required field is missing or not text
        """
        if self._state is FlowState.SUBMITTING:
            logger.debug("Ignoring submit while a submission is pending")
            return None

        values = self._extract(form)
        self._error = None
        self._state = FlowState.SUBMITTING

        try:
            result = await self._invoke(values)
        except AuthProviderUnavailableError:
            logger.exception("Auth provider unavailable during submit")
            self._fail(GENERIC_AUTH_ERROR)
            return AuthResult.failure(GENERIC_AUTH_ERROR)
        except Exception:
            logger.exception("Unexpected error during submit")
            self._fail(GENERIC_AUTH_ERROR)
            return AuthResult.failure(GENERIC_AUTH_ERROR)

        if result.error is not None:
            self._fail(result.error)
            return result

        self._state = FlowState.SUCCESS
        try:
            await self.navigator.navigate(self.landing_path, full_reload=True)
        except AuthProviderUnavailableError:
            # The action went through; the session context stays UNKNOWN
            logger.exception("Session re-resolution failed after submit")
        return result

    def _extract(self, form: Mapping[str, Any]) -> dict[str, str]:
        values = {}
        for field in self.fields:
            value = form.get(field)
            if not isinstance(value, str):
                raise FormFieldError(field)
            values[field] = value
        return values

    def _fail(self, message: str) -> None:
        self._error = message
        self._state = FlowState.FAILED

    @abstractmethod
    async def _invoke(self, values: dict[str, str]) -> AuthResult:
        pass


class LoginFlow(AuthFlow):
    fields = ("email", "password")
    idle_label = "Login"
    pending_label = "Logging in..."

    async def _invoke(self, values: dict[str, str]) -> AuthResult:
        return await self.actions.login(Credentials(**values))


class RegistrationFlow(AuthFlow):
    fields = ("name", "email", "password")
    idle_label = "Register"
    pending_label = "Registering..."

    async def _invoke(self, values: dict[str, str]) -> AuthResult:
        return await self.actions.register(RegistrationData(**values))
