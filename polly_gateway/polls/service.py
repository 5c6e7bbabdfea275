"""Server-side poll operations that re-check ownership on every call."""

from polly_gateway.auth import schemas
from polly_gateway.auth.ownership import can_modify
from polly_gateway.polls.exceptions import PollNotFoundError, PollPermissionError
from polly_gateway.polls.schemas import PollRef
from polly_gateway.polls.store import PollStore
from polly_gateway.utils.logger import logger


class PollService:
    def __init__(self, store: PollStore):
        self.store = store

    async def get_poll(self, poll_id: str) -> PollRef:
        poll = await self.store.get(poll_id)
        if poll is None:
            raise PollNotFoundError(f"Poll '{poll_id}' not found", poll_id)
        return poll

    async def can_modify(self, poll_id: str, requester: schemas.User | None) -> bool:
        return can_modify(requester, await self.get_poll(poll_id))

    async def delete_poll(self, poll_id: str, requester: schemas.User | None) -> None:
        """
        Delete a poll on behalf of ``requester``.

        Raises:
            PollNotFoundError: If the poll does not exist
            PollPermissionError: If the requester is anonymous or not the owner
        """
        poll = await self.get_poll(poll_id)
        if not can_modify(requester, poll):
            logger.warning(
                "Denied poll deletion",
                poll_id=poll_id,
                requester_id=requester.id if requester else None,
            )
            raise PollPermissionError("Only the poll owner can delete it", poll_id)

        await self.store.delete(poll_id)
        logger.info("Poll deleted", poll_id=poll_id, owner_id=poll.owner_id)
