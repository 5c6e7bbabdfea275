"""
Poll storage seam.

Poll persistence belongs to the poll-management side of the app; this module
only defines what the ownership checks need from it, plus an in-memory store
for local development and tests.
"""

from abc import ABC, abstractmethod

from polly_gateway.polls.schemas import PollRef


class PollStore(ABC):
    """Lookup and deletion of polls by ID."""

    @abstractmethod
    async def get(self, poll_id: str) -> PollRef | None:
        """Return the poll's reference, or None if it does not exist."""
        pass

    @abstractmethod
    async def delete(self, poll_id: str) -> bool:
        """Delete a poll. Returns False if it did not exist."""
        pass


class InMemoryPollStore(PollStore):
    def __init__(self, polls: list[PollRef] | None = None):
        self._polls = {poll.id: poll for poll in polls or []}

    def add(self, poll: PollRef) -> None:
        self._polls[poll.id] = poll

    async def get(self, poll_id: str) -> PollRef | None:
        return self._polls.get(poll_id)

    async def delete(self, poll_id: str) -> bool:
        return self._polls.pop(poll_id, None) is not None

    def __contains__(self, poll_id: str) -> bool:
        return poll_id in self._polls
