"""Application-level failure kinds and exception types.

Admission failures (rate limit, validation, duplicates, quota, ownership) are
returned by services as ``BookmarkFailure`` values. Exceptions are reserved for
the HTTP boundary and for unexpected infrastructure problems.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TypedDict


class FailureKind(str, Enum):
    """Stable, machine-readable reasons a bookmark operation can be rejected."""

    RATE_LIMITED = "rate_limited"
    TIME_MUST_BE_PROVIDED = "time_must_be_provided"
    INVALID_TARGET = "invalid_target"
    INVALID_PARAMETERS = "invalid_parameters"
    NAME_TOO_LONG = "name_too_long"
    ALREADY_BOOKMARKED = "already_bookmarked"
    TOO_MANY = "too_many"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


@dataclass(frozen=True)
class BookmarkFailure:
    """Typed rejection returned by guards and the bookmark service.

    Attributes:
        kind: Why the operation was rejected.
        limit: Configured ceiling, set for quota and rate limit failures.
        retry_after_seconds: Seconds until the rate limit window resets.
        target_kind: "post" or "topic" for duplicate failures.
        param: Offending request field for ``invalid_parameters``.
    """

    kind: FailureKind
    limit: int | None = None
    retry_after_seconds: int | None = None
    target_kind: str | None = None
    param: str | None = None


class ErrorDetails(TypedDict, total=False):
    """Structured error context returned to clients."""

    limit: int


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return 400

    @property
    def errors(self) -> list[str]:
        return [self.message]


class AuthenticationAppError(AppError):
    """Raised when the requester identity is missing or unusable."""

    @property
    def status_code(self) -> int:
        return 403


class PersistenceAppError(AppError):
    """Raised when the bookmark store fails unexpectedly (connection loss etc.)."""

    @property
    def status_code(self) -> int:
        return 500


@dataclass
class BookmarkAppError(AppError):
    """A reported ``BookmarkFailure`` on its way to the HTTP response.

    Attributes:
        http_status: Transport status chosen by the error reporter.
        messages: Ordered, user-facing messages; never empty.
    """

    http_status: int = 400
    messages: list[str] = field(default_factory=list)
    headers: dict[str, str] | None = None

    @property
    def status_code(self) -> int:
        return self.http_status

    @property
    def errors(self) -> list[str]:
        return list(self.messages) or [self.message]
