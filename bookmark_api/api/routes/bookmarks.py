"""Bookmark endpoints: create, delete and list the requester's own bookmarks."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from bookmark_api.api.dependencies import (
    get_bookmark_service,
    get_error_reporter,
    get_requester_id,
)
from bookmark_api.core.error_reporter import ErrorReporter
from bookmark_api.core.errors import BookmarkFailure
from bookmark_api.schemas.bookmark import (
    BookmarkListResponse,
    BookmarkResponse,
    CreateBookmarkRequest,
    DeleteBookmarkResponse,
)
from bookmark_api.services.bookmark_service import BookmarkService

router = APIRouter(tags=["Bookmarks"])

RequesterId = Annotated[str, Depends(get_requester_id)]
Service = Annotated[BookmarkService, Depends(get_bookmark_service)]
Reporter = Annotated[ErrorReporter, Depends(get_error_reporter)]


@router.post("/bookmarks", response_model=BookmarkResponse)
def create_bookmark(
    payload: CreateBookmarkRequest,
    requester_id: RequesterId,
    service: Service,
    reporter: Reporter,
) -> BookmarkResponse:
    """Bookmark a post or topic, optionally with a reminder.

    Raises:
        BookmarkAppError: 429 when rate limited; 400 for missing reminder time,
            malformed fields, duplicates or exceeded quota.
    """
    result = service.create(
        requester_id,
        post_id=payload.post_id,
        topic_id=payload.topic_id,
        reminder_type=payload.reminder_type,
        reminder_at=payload.reminder_at,
        name=payload.name,
    )
    if isinstance(result, BookmarkFailure):
        raise reporter.to_exception(result)
    return BookmarkResponse.from_domain(result)


@router.delete("/bookmarks/{bookmark_id}", response_model=DeleteBookmarkResponse)
def delete_bookmark(
    bookmark_id: str,
    requester_id: RequesterId,
    service: Service,
    reporter: Reporter,
) -> DeleteBookmarkResponse:
    """Delete one of the requester's bookmarks (404 unknown, 403 not owner)."""
    failure = service.delete(requester_id, bookmark_id)
    if failure is not None:
        raise reporter.to_exception(failure)
    return DeleteBookmarkResponse()


@router.get("/bookmarks", response_model=BookmarkListResponse)
def list_bookmarks(requester_id: RequesterId, service: Service) -> BookmarkListResponse:
    bookmarks = service.list_for(requester_id)
    return BookmarkListResponse(
        bookmarks=[BookmarkResponse.from_domain(b) for b in bookmarks]
    )
