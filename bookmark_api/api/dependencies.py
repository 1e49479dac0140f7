"""FastAPI dependencies wiring the bookmark service to the HTTP layer.

The service and its stores are process-wide so rate limit counters and
bookmarks survive across requests. Tests swap them with
``app.dependency_overrides`` or ``reset_bookmark_service``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Header

from bookmark_api.adapters.persistence.in_memory import InMemoryBookmarkRepository
from bookmark_api.adapters.rate_limit.in_memory import InMemoryCounterStore
from bookmark_api.core.config import EnvironmentLimitsProvider, settings
from bookmark_api.core.error_reporter import ErrorReporter
from bookmark_api.core.errors import AuthenticationAppError
from bookmark_api.core.messages import t
from bookmark_api.services.bookmark_service import BookmarkService
from bookmark_api.services.rate_limiter import RateLimiter
from bookmark_api.services.reminder_scheduler import LoggingReminderScheduler

logger = logging.getLogger(__name__)

_service: BookmarkService | None = None


def build_bookmark_service() -> BookmarkService:
    """Assemble a BookmarkService from current settings and in-memory stores."""
    cfg = settings.bookmarks
    return BookmarkService(
        repository=InMemoryBookmarkRepository(),
        rate_limiter=RateLimiter(InMemoryCounterStore()),
        limits=EnvironmentLimitsProvider(),
        scheduler=LoggingReminderScheduler(),
        rate_limit_enabled=cfg.rate_limit_enabled,
        window_seconds=cfg.rate_limit_window_seconds,
        name_max_length=cfg.name_max_length,
    )


def get_bookmark_service() -> BookmarkService:
    global _service

    if _service is None:
        _service = build_bookmark_service()
    return _service


def reset_bookmark_service() -> None:
    """Drop the process-wide service; the next request builds a fresh one."""
    global _service

    _service = None


def get_error_reporter() -> ErrorReporter:
    return ErrorReporter(user_bookmarks_url=settings.bookmarks.user_bookmarks_url)


async def get_requester_id(
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> str:
    """Identity of the caller, as asserted by the upstream auth gateway.

    Raises:
        AuthenticationAppError: 403 when the header is missing or blank.
    """
    requester_id = (x_user_id or "").strip()
    if not requester_id:
        logger.warning("auth.missing_requester", extra={"header": "X-User-Id"})
        raise AuthenticationAppError(
            code="invalid_access",
            message=t("invalid_access"),
        )
    return requester_id
