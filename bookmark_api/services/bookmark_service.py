"""Bookmark creation and deletion with admission checks.

Creation runs, in order:
1. Rate limiter (per owner, per window) - always first, even for bad payloads
2. Field parsing - reminder time and type, target ids, name type and length
3. Duplicate guard - same owner and target already bookmarked
4. Quota guard - owner already at ``max_per_user``
5. Insert, then hand the reminder to the scheduler

The first failing step wins. Admission failures are returned as
``BookmarkFailure`` values; only storage breakage raises
(``PersistenceAppError``).
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, NamedTuple, TypeVar

from bookmark_api.adapters.persistence.base import (
    AbstractBookmarkRepository,
    DuplicateBookmarkError,
)
from bookmark_api.core.config import AbstractLimitsProvider
from bookmark_api.core.errors import BookmarkFailure, FailureKind, PersistenceAppError
from bookmark_api.schemas.bookmark import (
    Bookmark,
    BookmarkTarget,
    ReminderType,
    parse_target_id,
)
from bookmark_api.services.guards import DuplicateGuard, QuotaGuard
from bookmark_api.services.rate_limiter import RateLimiter
from bookmark_api.services.reminder_policy import ReminderPolicy, parse_reminder_type
from bookmark_api.services.reminder_scheduler import AbstractReminderScheduler
from bookmark_api.utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)

CREATE_ACTION = "create_bookmark"
DEFAULT_WINDOW_SECONDS = 86_400

T = TypeVar("T")


class _CreateFields(NamedTuple):
    target: BookmarkTarget
    reminder_type: ReminderType | None
    reminder_at: object
    name: str | None


class BookmarkService:
    """Orchestrates guarded bookmark creation and owner-scoped deletion."""

    def __init__(
        self,
        *,
        repository: AbstractBookmarkRepository,
        rate_limiter: RateLimiter,
        limits: AbstractLimitsProvider,
        reminder_policy: ReminderPolicy | None = None,
        scheduler: AbstractReminderScheduler | None = None,
        clock: Clock = utc_now,
        rate_limit_enabled: bool = True,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        name_max_length: int = 100,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._repository = repository
        self._rate_limiter = rate_limiter
        self._limits = limits
        self._reminder_policy = reminder_policy or ReminderPolicy()
        self._duplicate_guard = DuplicateGuard(repository)
        self._quota_guard = QuotaGuard(repository)
        self._scheduler = scheduler
        self._clock = clock
        self._rate_limit_enabled = rate_limit_enabled
        self._window_seconds = window_seconds
        self._name_max_length = name_max_length
        self._id_factory = id_factory

    def _store(self, operation: str, call: Callable[[], T]) -> T:
        """Run a repository call, turning unexpected failures into PersistenceAppError."""
        try:
            return call()
        except (DuplicateBookmarkError, PersistenceAppError):
            raise
        except Exception as exc:
            logger.error(
                "bookmark.persistence_failed",
                extra={"operation": operation, "error_type": type(exc).__name__},
                exc_info=True,
            )
            raise PersistenceAppError(
                code="persistence_error",
                message=f"Bookmark storage failed during {operation}",
            ) from exc

    def _parse_fields(
        self,
        post_id: object,
        topic_id: object,
        reminder_type: object,
        reminder_at: object,
        name: object,
    ) -> _CreateFields | BookmarkFailure:
        """Turn raw request values into typed fields, or the first failure."""
        failure = self._reminder_policy.validate(reminder_type, reminder_at)
        if failure is not None:
            return failure
        try:
            parsed_type = parse_reminder_type(reminder_type)
        except ValueError:
            return BookmarkFailure(kind=FailureKind.INVALID_PARAMETERS, param="reminder_type")

        # A post wins, so a malformed topic_id next to a valid post_id is ignored.
        try:
            parsed_post = parse_target_id(post_id)
        except ValueError:
            return BookmarkFailure(kind=FailureKind.INVALID_PARAMETERS, param="post_id")
        parsed_topic = None
        if parsed_post is None:
            try:
                parsed_topic = parse_target_id(topic_id)
            except ValueError:
                return BookmarkFailure(kind=FailureKind.INVALID_PARAMETERS, param="topic_id")
        target = BookmarkTarget.resolve(parsed_post, parsed_topic)
        if target is None:
            return BookmarkFailure(kind=FailureKind.INVALID_TARGET)

        if name is not None and not isinstance(name, str):
            return BookmarkFailure(kind=FailureKind.INVALID_PARAMETERS, param="name")
        if name is not None and len(name) > self._name_max_length:
            return BookmarkFailure(kind=FailureKind.NAME_TOO_LONG, limit=self._name_max_length)
        return _CreateFields(target, parsed_type, reminder_at, name)

    def create(
        self,
        owner_id: str,
        *,
        post_id: object = None,
        topic_id: object = None,
        reminder_type: object = None,
        reminder_at: object = None,
        name: object = None,
    ) -> Bookmark | BookmarkFailure:
        """Create a bookmark for ``owner_id`` if every admission check passes.

        Args:
            owner_id: Requesting user; becomes the bookmark owner.
            post_id: Post to bookmark. When set, ``topic_id`` is ignored.
            topic_id: Topic to bookmark when no post is given.
            reminder_type: Optional reminder intent.
            reminder_at: ISO-8601 reminder time, required by time-based types.
            name: Optional label.

        Returns:
            The persisted Bookmark, or the first BookmarkFailure encountered.

        Raises:
            PersistenceAppError: If the store fails unexpectedly.
        """
        limits = self._limits.current()

        if self._rate_limit_enabled:
            decision = self._rate_limiter.admit(
                owner_id,
                CREATE_ACTION,
                window_seconds=self._window_seconds,
                max_count=limits.max_per_day,
            )
            if not decision.allowed:
                return BookmarkFailure(
                    kind=FailureKind.RATE_LIMITED,
                    limit=decision.limit,
                    retry_after_seconds=decision.retry_after_seconds,
                )

        fields = self._parse_fields(post_id, topic_id, reminder_type, reminder_at, name)
        if isinstance(fields, BookmarkFailure):
            logger.info(
                "bookmark.rejected",
                extra={"owner_id": owner_id, "reason": fields.kind.value, "param": fields.param},
            )
            return fields
        target = fields.target

        failure = self._store(
            "find_bookmark", lambda: self._duplicate_guard.check(owner_id, target)
        ) or self._store(
            "count_bookmarks", lambda: self._quota_guard.check(owner_id, limits.max_per_user)
        )
        if failure is not None:
            logger.info(
                "bookmark.rejected",
                extra={
                    "owner_id": owner_id,
                    "reason": failure.kind.value,
                    "target": target.kind,
                },
            )
            return failure

        stored_type, stored_at = self._reminder_policy.normalize(
            fields.reminder_type, fields.reminder_at
        )
        bookmark = Bookmark(
            id=self._id_factory(),
            owner_id=owner_id,
            post_id=target.post_id,
            topic_id=target.topic_id,
            name=fields.name,
            reminder_type=stored_type,
            reminder_at=stored_at,
            created_at=self._clock(),
        )

        try:
            bookmark = self._store("insert", lambda: self._repository.insert(bookmark))
        except DuplicateBookmarkError:
            # Lost a race with an identical concurrent create.
            logger.info(
                "bookmark.rejected",
                extra={"owner_id": owner_id, "reason": "already_bookmarked", "race": True},
            )
            return BookmarkFailure(kind=FailureKind.ALREADY_BOOKMARKED, target_kind=target.kind)

        logger.info(
            "bookmark.created",
            extra={
                "bookmark_id": bookmark.id,
                "owner_id": owner_id,
                "target": target.kind,
                "has_reminder": bookmark.reminder_at is not None,
            },
        )

        if self._scheduler is not None and bookmark.reminder_at is not None:
            self._scheduler.schedule(bookmark)

        return bookmark

    def delete(self, requester_id: str, bookmark_id: str) -> BookmarkFailure | None:
        """Permanently delete a bookmark owned by ``requester_id``.

        Returns:
            None on success; ``not_found`` if the id is unknown, ``forbidden``
            if it belongs to someone else (the bookmark is left untouched).

        Raises:
            PersistenceAppError: If the store fails unexpectedly.
        """
        bookmark = self._store("find_by_id", lambda: self._repository.find_by_id(bookmark_id))
        if bookmark is None:
            return BookmarkFailure(kind=FailureKind.NOT_FOUND)

        if bookmark.owner_id != requester_id:
            logger.warning(
                "bookmark.delete_forbidden",
                extra={"bookmark_id": bookmark_id, "requester_id": requester_id},
            )
            return BookmarkFailure(kind=FailureKind.FORBIDDEN)

        self._store("delete", lambda: self._repository.delete(bookmark_id))
        logger.info(
            "bookmark.deleted",
            extra={"bookmark_id": bookmark_id, "owner_id": requester_id},
        )
        return None

    def list_for(self, requester_id: str) -> list[Bookmark]:
        """Return the requester's own bookmarks, newest first."""
        return self._store(
            "list_for_owner", lambda: self._repository.list_for_owner(requester_id)
        )
