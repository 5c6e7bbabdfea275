"""FastAPI dependencies for poll endpoints."""

from fastapi import Depends

from polly_gateway.polls.service import PollService
from polly_gateway.polls.store import InMemoryPollStore, PollStore


def get_poll_store() -> PollStore:
    """
    Get the process-wide poll store.

    The poll-management side of the app replaces this through
    ``app.dependency_overrides`` with its persistent store.
    """
    if not hasattr(get_poll_store, "_instance"):
        get_poll_store._instance = InMemoryPollStore()
    return get_poll_store._instance


def get_poll_service(store: PollStore = Depends(get_poll_store)) -> PollService:
    return PollService(store)
