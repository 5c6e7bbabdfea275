"""Custom exceptions for the auth package."""


class AuthError(Exception):
    """Base exception for all auth-related errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthProviderUnavailableError(AuthError):
    """Raised when the identity provider cannot be reached or fails internally.

    Credential rejections never use this exception; they come back as an
    error string in the provider result.
    """

    pass


class FormFieldError(ValueError):
    """Raised when a submitted form lacks a required text field."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Form field '{field}' is missing or not text")
        self.field = field
