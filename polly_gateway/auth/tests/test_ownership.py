"""Tests for the ownership guard predicate."""

from polly_gateway.auth.ownership import can_modify
from polly_gateway.auth.schemas import User
from polly_gateway.polls.schemas import PollRef


def test_anonymous_viewer_cannot_modify():
    assert can_modify(None, PollRef(id="p1", owner_id="1")) is False


def test_other_user_cannot_modify():
    user = User(id="1", email="a@x.com")

    assert can_modify(user, PollRef(id="p1", owner_id="2")) is False


def test_owner_can_modify():
    user = User(id="1", email="a@x.com")

    assert can_modify(user, PollRef(id="p1", owner_id="1")) is True
