"""Exception types shared by the editor, the event endpoints, and the pages."""

from __future__ import annotations

from typing import Iterable, List


class ClubAppError(Exception):
    """Base class for failures raised by the club applications helpers."""


class ValidationError(ClubAppError):
    """Raised when an application draft fails validation."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or "Application is not valid.")


class AuthorizationError(ClubAppError):
    """Raised when the caller is not an admin of the target project."""


class NotFoundError(ClubAppError):
    """Raised when an identifier does not resolve to a stored record."""


class InvalidInputError(ClubAppError):
    """Raised when an endpoint receives malformed input."""


class GateStateError(ClubAppError):
    """Raised on a publish gate transition that is not allowed from the current state."""


class UnknownQuestionFieldError(ClubAppError, ValueError):
    """Raised when a question update names a field the editor does not manage."""


__all__ = [
    "AuthorizationError",
    "ClubAppError",
    "GateStateError",
    "InvalidInputError",
    "NotFoundError",
    "UnknownQuestionFieldError",
    "ValidationError",
]
