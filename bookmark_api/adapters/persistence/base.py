"""Bookmark repository interface.

Services depend on this abstraction only; concrete stores (in-memory, SQL)
live next to it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bookmark_api.schemas.bookmark import Bookmark, BookmarkTarget


class DuplicateBookmarkError(Exception):
    """Raised by ``insert`` when (owner, target) is already stored."""

    def __init__(self, owner_id: str, target: BookmarkTarget) -> None:
        super().__init__(f"bookmark already exists for {target.kind} {target.key[1]}")
        self.owner_id = owner_id
        self.target = target


class AbstractBookmarkRepository(ABC):
    """Persistence contract consumed by the bookmark guards and service.

    Implementations must raise ``DuplicateBookmarkError`` from ``insert`` when
    the (owner, target) pair already exists. Any other failure should surface
    as ``PersistenceAppError``.
    """

    @abstractmethod
    def find_bookmark(self, owner_id: str, target: BookmarkTarget) -> Bookmark | None:
        raise NotImplementedError

    @abstractmethod
    def count_bookmarks(self, owner_id: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def insert(self, bookmark: Bookmark) -> Bookmark:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, bookmark_id: str) -> Bookmark | None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, bookmark_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_owner(self, owner_id: str) -> list[Bookmark]:
        """Return the owner's bookmarks, newest first."""
        raise NotImplementedError
