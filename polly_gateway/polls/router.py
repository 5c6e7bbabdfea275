"""
Poll router with the owner-only endpoints.

Every mutation re-checks ownership here, independent of whatever the client
chose to render.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from polly_gateway.auth import schemas
from polly_gateway.auth.dependencies import get_current_user, get_current_user_optional
from polly_gateway.polls.dependencies import get_poll_service
from polly_gateway.polls.exceptions import PollNotFoundError, PollPermissionError
from polly_gateway.polls.schemas import PollPermissionsResponse
from polly_gateway.polls.service import PollService

router = APIRouter(prefix="/polls", tags=["Polls"])


@router.get("/{poll_id}/permissions", response_model=PollPermissionsResponse)
async def get_poll_permissions(
    poll_id: str,
    current_user: schemas.User | None = Depends(get_current_user_optional),
    service: PollService = Depends(get_poll_service),
) -> PollPermissionsResponse:
    """Tell the caller whether to show edit/delete controls for a poll."""
    try:
        allowed = await service.can_modify(poll_id, current_user)
    except PollNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return PollPermissionsResponse(poll_id=poll_id, can_modify=allowed)


@router.delete("/{poll_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_poll(
    poll_id: str,
    current_user: schemas.User = Depends(get_current_user),
    service: PollService = Depends(get_poll_service),
) -> Response:
    """Delete a poll owned by the current user."""
    try:
        await service.delete_poll(poll_id, current_user)
    except PollNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except PollPermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
