"""Custom exceptions for the polls package."""


class PollError(Exception):
    """Base exception for poll operations."""

    def __init__(self, message: str, poll_id: str) -> None:
        super().__init__(message)
        self.message = message
        self.poll_id = poll_id


class PollNotFoundError(PollError):
    """Raised when a poll does not exist."""

    pass


class PollPermissionError(PollError):
    """Raised when the requester does not own the poll."""

    pass
