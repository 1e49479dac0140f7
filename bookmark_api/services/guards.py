"""Pre-insert guards for bookmark creation."""

from __future__ import annotations

from bookmark_api.adapters.persistence.base import AbstractBookmarkRepository
from bookmark_api.core.errors import BookmarkFailure, FailureKind
from bookmark_api.schemas.bookmark import BookmarkTarget


class DuplicateGuard:
    """Reject a second bookmark for the same (owner, target).

    Reminder fields play no part in the comparison.
    """

    def __init__(self, repository: AbstractBookmarkRepository) -> None:
        self._repository = repository

    def check(self, owner_id: str, target: BookmarkTarget) -> BookmarkFailure | None:
        if self._repository.find_bookmark(owner_id, target) is not None:
            return BookmarkFailure(kind=FailureKind.ALREADY_BOOKMARKED, target_kind=target.kind)
        return None


class QuotaGuard:
    """Reject creation once the owner holds ``max_per_user`` bookmarks."""

    def __init__(self, repository: AbstractBookmarkRepository) -> None:
        self._repository = repository

    def check(self, owner_id: str, max_per_user: int) -> BookmarkFailure | None:
        if self._repository.count_bookmarks(owner_id) >= max_per_user:
            return BookmarkFailure(kind=FailureKind.TOO_MANY, limit=max_per_user)
        return None
