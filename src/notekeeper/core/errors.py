"""Domain errors raised by services and rendered by the API layer.

Every error kind carries its own HTTP status so the exception handler in
``notekeeper.main`` can map it without inspecting the message.
"""

from __future__ import annotations

from typing import Any

from fastapi import status

__all__ = [
    "AccountError",
    "ConflictError",
    "ExpiredError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "MismatchError",
    "NotFoundError",
    "TooManyAttemptsError",
    "ValidationFailedError",
]


class AccountError(Exception):
    """Base class for errors surfaced verbatim to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def name(self) -> str:
        return type(self).__name__

    def extra(self) -> dict[str, Any]:
        """Additional response fields for this error kind."""
        return {}


class NotFoundError(AccountError):
    """No active record exists for the given owner, request id or entity."""

    status_code = status.HTTP_404_NOT_FOUND


class ExpiredError(AccountError):
    """A code or reset link was presented after its expiry."""

    status_code = status.HTTP_403_FORBIDDEN


class MismatchError(AccountError):
    """The supplied one-time code does not match the stored one."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AccountError):
    """The resource already exists (active challenge, taken e-mail, ...)."""

    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(AccountError):
    """The caller may not perform this action."""

    status_code = status.HTTP_403_FORBIDDEN


class InvalidCredentialsError(AccountError):
    """Password check failed."""

    status_code = status.HTTP_401_UNAUTHORIZED


class TooManyAttemptsError(AccountError):
    """Reissue rejected while a lockout window is active."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, wait_hours: int, wait_minutes: int) -> None:
        super().__init__(
            f"Too many attempts, please retry in {wait_hours} hours "
            f"and {wait_minutes} minutes"
        )
        self.wait_hours = wait_hours
        self.wait_minutes = wait_minutes

    def extra(self) -> dict[str, Any]:
        return {"wait_hours": self.wait_hours, "wait_minutes": self.wait_minutes}


class ValidationFailedError(AccountError):
    """Cross-field validation failed; ``errors`` maps field names to messages."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Validation failed")
        self.errors = errors

    def extra(self) -> dict[str, Any]:
        return {"errors": self.errors}
