"""
Ownership guard for resource mutation.

This is a rendering decision only. Every mutation endpoint re-checks
ownership on the server (see ``polly_gateway.polls.service``).
"""

from typing import Protocol

from polly_gateway.auth import schemas


class OwnedResource(Protocol):
    """Minimal shape of a resource whose mutation is owner-only."""

    @property
    def id(self) -> str: ...

    @property
    def owner_id(self) -> str: ...


def can_modify(current_user: schemas.User | None, resource: OwnedResource) -> bool:
    """True only when a user is known and owns the resource."""
    return current_user is not None and current_user.id == resource.owner_id
