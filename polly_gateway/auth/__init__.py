"""Identity, session and authorization for the Polly app."""

from .actions import AuthActions
from .dataclasses import AuthResult, Credentials, RegistrationData
from .flow import FlowState, LoginFlow, RegistrationFlow
from .ownership import can_modify
from .session_context import SessionContext, SessionStatus

__all__ = [
    "AuthActions",
    "AuthResult",
    "Credentials",
    "FlowState",
    "LoginFlow",
    "RegistrationData",
    "RegistrationFlow",
    "SessionContext",
    "SessionStatus",
    "can_modify",
]
