"""Summary: Error kinds and explicit operation outcomes.

Importance: Forces callers to handle expected failures instead of catching exceptions.
Alternatives: Raise domain exceptions and map them in exception handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar


T = TypeVar("T")


class ErrorKind(str, Enum):
    """Summary: Expected failure categories across auth and task flows.

    Importance: Gives every failure a stable name, status code, and client message.
    Alternatives: Use one exception class per failure.
    """

    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    ENRICHMENT_UNAVAILABLE = "enrichment_unavailable"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_STATUS_CODES = {
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.EXPIRED_TOKEN: 401,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ENRICHMENT_UNAVAILABLE: 502,
}

_MESSAGES = {
    ErrorKind.INVALID_CREDENTIALS: "Invalid username or password",
    ErrorKind.INVALID_TOKEN: "Invalid token",
    ErrorKind.EXPIRED_TOKEN: "Token has expired",
    ErrorKind.UNAUTHORIZED: "Not authenticated",
    ErrorKind.NOT_FOUND: "Task not found",
    ErrorKind.ENRICHMENT_UNAVAILABLE: "Suggestion service unavailable",
}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Summary: Result of an operation that may fail in an expected way.

    Importance: Carries either a value or an ErrorKind, never both.
    Alternatives: Return None on failure and lose the reason.
    """

    value: T | None = None
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @staticmethod
    def success(value: T) -> "Outcome[T]":
        return Outcome(value=value)

    @staticmethod
    def failure(error: ErrorKind) -> "Outcome[T]":
        return Outcome(error=error)
