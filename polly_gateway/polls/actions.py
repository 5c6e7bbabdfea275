"""
Owner controls on a poll card.

``PollActions`` decides whether the edit/delete controls are shown for a poll
and runs the delete with a confirmation step. While the session context is
still resolving, the controls are ``PENDING``: neither owner controls (the
identity is not confirmed) nor a read-only card (the viewer may well be the
owner).
"""

from collections.abc import Awaitable, Callable
from enum import Enum

from polly_gateway.auth.flow import Navigator
from polly_gateway.auth.ownership import can_modify
from polly_gateway.auth.session_context import SessionContext, SessionStatus
from polly_gateway.polls.schemas import PollRef
from polly_gateway.utils.logger import logger

DELETE_CONFIRMATION = "Are you sure you want to delete this poll?"


class ControlsVisibility(str, Enum):
    PENDING = "pending"
    OWNER = "owner"
    READ_ONLY = "read_only"


class PollActions:
    def __init__(
        self,
        poll: PollRef,
        session_context: SessionContext,
        delete_poll: Callable[[str], Awaitable[None]],
        confirm: Callable[[str], bool],
        navigator: Navigator,
    ):
        self.poll = poll
        self.session_context = session_context
        self._delete_poll = delete_poll
        self._confirm = confirm
        self.navigator = navigator

    @property
    def controls(self) -> ControlsVisibility:
        if self.session_context.status is SessionStatus.UNKNOWN:
            return ControlsVisibility.PENDING
        if can_modify(self.session_context.user, self.poll):
            return ControlsVisibility.OWNER
        return ControlsVisibility.READ_ONLY

    @property
    def show_mutation_controls(self) -> bool:
        return self.controls is ControlsVisibility.OWNER

    @property
    def detail_path(self) -> str:
        return f"/polls/{self.poll.id}"

    @property
    def edit_path(self) -> str:
        return f"/polls/{self.poll.id}/edit"

    async def delete(self) -> bool:
        """
        Delete the poll after the user confirms.

        Returns:
            True if the poll was deleted, False if the controls are hidden or
            the user declined.
        """
        if not self.show_mutation_controls:
            return False
        if not self._confirm(DELETE_CONFIRMATION):
            return False

        await self._delete_poll(self.poll.id)
        logger.info("Poll deleted from card", poll_id=self.poll.id)
        # Reload the current view so the list no longer shows the poll
        await self.navigator.reload()
        return True
