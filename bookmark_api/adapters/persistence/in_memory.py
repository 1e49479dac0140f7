"""In-memory bookmark repository.

Keeps a primary index by id and a unique index by (owner, target) so that
concurrent inserts for the same pair cannot both succeed.
"""

from __future__ import annotations

import threading

from bookmark_api.adapters.persistence.base import (
    AbstractBookmarkRepository,
    DuplicateBookmarkError,
)
from bookmark_api.schemas.bookmark import Bookmark, BookmarkTarget

_UniqueKey = tuple[str, str, int]


def _unique_key(owner_id: str, target: BookmarkTarget) -> _UniqueKey:
    kind, target_id = target.key
    return (owner_id, kind, target_id)


class InMemoryBookmarkRepository(AbstractBookmarkRepository):
    """Thread-safe dict-backed store, suitable for tests and single workers."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_id: dict[str, Bookmark] = {}
        self._by_owner_target: dict[_UniqueKey, str] = {}

    def find_bookmark(self, owner_id: str, target: BookmarkTarget) -> Bookmark | None:
        with self._lock:
            bookmark_id = self._by_owner_target.get(_unique_key(owner_id, target))
            return self._by_id.get(bookmark_id) if bookmark_id else None

    def count_bookmarks(self, owner_id: str) -> int:
        with self._lock:
            return sum(1 for b in self._by_id.values() if b.owner_id == owner_id)

    def insert(self, bookmark: Bookmark) -> Bookmark:
        key = _unique_key(bookmark.owner_id, bookmark.target)
        with self._lock:
            if key in self._by_owner_target:
                raise DuplicateBookmarkError(bookmark.owner_id, bookmark.target)
            if bookmark.id in self._by_id:
                raise ValueError(f"bookmark id {bookmark.id} already in use")
            self._by_id[bookmark.id] = bookmark
            self._by_owner_target[key] = bookmark.id
        return bookmark

    def find_by_id(self, bookmark_id: str) -> Bookmark | None:
        with self._lock:
            return self._by_id.get(bookmark_id)

    def delete(self, bookmark_id: str) -> None:
        with self._lock:
            bookmark = self._by_id.pop(bookmark_id, None)
            if bookmark is not None:
                self._by_owner_target.pop(_unique_key(bookmark.owner_id, bookmark.target), None)

    def list_for_owner(self, owner_id: str) -> list[Bookmark]:
        with self._lock:
            owned = [b for b in self._by_id.values() if b.owner_id == owner_id]
        return sorted(owned, key=lambda b: b.created_at, reverse=True)
