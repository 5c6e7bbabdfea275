"""
Authentication dependencies.

This module provides FastAPI dependencies for the configured credential
backend, the per-request auth actions and the current user.
"""

from fastapi import Depends, HTTPException, Request, Response, status

from polly_gateway.auth import schemas
from polly_gateway.auth.actions import AuthActions
from polly_gateway.auth.base import AuthProvider
from polly_gateway.auth.provider_factory import get_auth_provider
from polly_gateway.auth.session_store import CookieSessionStore


async def get_auth_provider_dependency() -> AuthProvider:
    """Dependency to get the configured auth provider."""
    try:
        return get_auth_provider()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to initialize auth provider: {str(e)}",
        ) from e


async def get_auth_actions(
    request: Request,
    response: Response,
    auth_provider: AuthProvider = Depends(get_auth_provider_dependency),
) -> AuthActions:
    """Auth actions bound to this request's session cookies."""
    return AuthActions(auth_provider, CookieSessionStore(request, response))


async def get_current_user_optional(
    actions: AuthActions = Depends(get_auth_actions),
) -> schemas.User | None:
    """
    Get the current user, or None if not authenticated.

    Provider outages are not swallowed here; they surface as 503.
    """
    return await actions.get_current_user()


async def get_current_user(
    user: schemas.User | None = Depends(get_current_user_optional),
) -> schemas.User:
    """
    Get the current user.

    Raises:
        HTTPException: 401 if no valid session accompanies the request
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user
