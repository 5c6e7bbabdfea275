"""
Auth router with login, registration and session endpoints.

Credential endpoints always answer 200 with ``{"error": ...}``; the session
cookies ride on the same response. Provider outages become 503 through the
application's exception handler.
"""

from fastapi import APIRouter, Depends

from polly_gateway.auth import schemas
from polly_gateway.auth.actions import AuthActions
from polly_gateway.auth.dataclasses import AuthResult, Credentials, RegistrationData
from polly_gateway.auth.dependencies import get_auth_actions

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _to_response(result: AuthResult) -> schemas.AuthResponse:
    return schemas.AuthResponse(error=result.error)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    body: schemas.LoginRequest,
    actions: AuthActions = Depends(get_auth_actions),
) -> schemas.AuthResponse:
    """
    Sign in with email and password.

    Sets the session cookies on success.
    """
    result = await actions.login(Credentials(email=body.email, password=body.password))
    return _to_response(result)


@router.post("/register", response_model=schemas.AuthResponse)
async def register(
    body: schemas.RegisterRequest,
    actions: AuthActions = Depends(get_auth_actions),
) -> schemas.AuthResponse:
    """
    Create an account with the display name stored as profile metadata.

    Sets the session cookies when the provider issues a session at sign-up.
    """
    result = await actions.register(
        RegistrationData(email=body.email, password=body.password, name=body.name)
    )
    return _to_response(result)


@router.post("/logout", response_model=schemas.AuthResponse)
async def logout(
    actions: AuthActions = Depends(get_auth_actions),
) -> schemas.AuthResponse:
    """Sign out the current session and clear cookies."""
    return _to_response(await actions.logout())


@router.post("/refresh", response_model=schemas.AuthResponse)
async def refresh(
    actions: AuthActions = Depends(get_auth_actions),
) -> schemas.AuthResponse:
    """Rotate the session cookies using the refresh token."""
    return _to_response(await actions.refresh())


@router.get("/me", response_model=schemas.User | None)
async def get_current_user_info(
    actions: AuthActions = Depends(get_auth_actions),
) -> schemas.User | None:
    """Profile of the signed-in user, or null."""
    return await actions.get_current_user()


@router.get("/session", response_model=schemas.SessionStatusResponse)
async def get_session(
    actions: AuthActions = Depends(get_auth_actions),
) -> schemas.SessionStatusResponse:
    """Whether a session is current, without exposing its tokens."""
    session = await actions.get_session()
    if session is None:
        return schemas.SessionStatusResponse(authenticated=False)
    return schemas.SessionStatusResponse(
        authenticated=True, expires_at=session.expires_at, user=session.user
    )
