"""Translate ``BookmarkFailure`` values into HTTP status codes and messages."""

from __future__ import annotations

from dataclasses import dataclass

from bookmark_api.core.errors import BookmarkAppError, BookmarkFailure, FailureKind
from bookmark_api.core.messages import t

STATUS_BY_KIND: dict[FailureKind, int] = {
    FailureKind.RATE_LIMITED: 429,
    FailureKind.TIME_MUST_BE_PROVIDED: 400,
    FailureKind.INVALID_TARGET: 400,
    FailureKind.INVALID_PARAMETERS: 400,
    FailureKind.NAME_TOO_LONG: 400,
    FailureKind.ALREADY_BOOKMARKED: 400,
    FailureKind.TOO_MANY: 400,
    FailureKind.NOT_FOUND: 404,
    FailureKind.FORBIDDEN: 403,
    FailureKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class ErrorReport:
    status_code: int
    errors: list[str]
    headers: dict[str, str] | None = None


class ErrorReporter:
    """Map failure kinds to a status code and an ordered list of messages.

    Args:
        user_bookmarks_url: Link to the user's bookmark list, quoted in the
            ``too_many`` message.
        include_rate_limit_headers: Add Retry-After/X-RateLimit-* on 429.
    """

    def __init__(self, *, user_bookmarks_url: str, include_rate_limit_headers: bool = True) -> None:
        self._user_bookmarks_url = user_bookmarks_url
        self._include_rate_limit_headers = include_rate_limit_headers

    def _messages(self, failure: BookmarkFailure) -> list[str]:
        kind = failure.kind
        if kind is FailureKind.TOO_MANY:
            return [t("too_many", limit=failure.limit, user_bookmarks_url=self._user_bookmarks_url)]
        if kind is FailureKind.ALREADY_BOOKMARKED:
            key = "already_bookmarked_topic" if failure.target_kind == "topic" else "already_bookmarked"
            return [t(key)]
        if kind is FailureKind.NAME_TOO_LONG:
            return [t("name_too_long", max_length=failure.limit)]
        if kind is FailureKind.INVALID_PARAMETERS:
            return [t("invalid_parameters", param=failure.param or "request")]
        if kind is FailureKind.FORBIDDEN:
            return [t("invalid_access")]
        return [t(kind.value)]

    def report(self, failure: BookmarkFailure) -> ErrorReport:
        headers: dict[str, str] | None = None
        if (
            failure.kind is FailureKind.RATE_LIMITED
            and self._include_rate_limit_headers
            and failure.retry_after_seconds is not None
        ):
            headers = {"Retry-After": str(failure.retry_after_seconds)}
            if failure.limit is not None:
                headers["X-RateLimit-Limit"] = str(failure.limit)

        return ErrorReport(
            status_code=STATUS_BY_KIND[failure.kind],
            errors=self._messages(failure),
            headers=headers,
        )

    def to_exception(self, failure: BookmarkFailure) -> BookmarkAppError:
        """Build the exception the HTTP layer raises for ``failure``."""
        report = self.report(failure)
        details = {"limit": failure.limit} if failure.limit is not None else None
        return BookmarkAppError(
            code=failure.kind.value,
            message=report.errors[0],
            details=details,
            http_status=report.status_code,
            messages=report.errors,
            headers=report.headers,
        )
