"""Bookmark domain model and API schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ReminderType(str, Enum):
    """Scheduling intent attached to a bookmark."""

    AT_DESIRED_TIME = "at_desired_time"
    LATER_TODAY = "later_today"
    NEXT_BUSINESS_DAY = "next_business_day"
    TOMORROW = "tomorrow"
    NEXT_WEEK = "next_week"
    NEXT_MONTH = "next_month"
    CUSTOM = "custom"
    START_OF_NEXT_BUSINESS_WEEK = "start_of_next_business_week"
    LATER_THIS_WEEK = "later_this_week"
    LAST_CUSTOM = "last_custom"
    NONE = "none"


def parse_target_id(value: object) -> int | None:
    """Coerce a raw post/topic id to a positive int.

    Raises:
        ValueError: If ``value`` is present but not a positive integer.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"invalid id: {value!r}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise ValueError(f"invalid id: {value!r}")
    if parsed < 1:
        raise ValueError(f"invalid id: {value!r}")
    return parsed


class BookmarkTarget(BaseModel):
    """The single post or topic a bookmark points at.

    Use ``resolve`` to build one from raw request ids: a post wins over a
    topic, so exactly one of the two fields is ever set.
    """

    model_config = ConfigDict(frozen=True)

    post_id: int | None = None
    topic_id: int | None = None

    @classmethod
    def resolve(cls, post_id: object, topic_id: object) -> "BookmarkTarget | None":
        """Build the target from raw ids; None when neither is given.

        Raises:
            ValueError: If the id that would be used is malformed.
        """
        parsed_post = parse_target_id(post_id)
        if parsed_post is not None:
            return cls(post_id=parsed_post)
        parsed_topic = parse_target_id(topic_id)
        if parsed_topic is not None:
            return cls(topic_id=parsed_topic)
        return None

    @property
    def kind(self) -> str:
        return "post" if self.post_id is not None else "topic"

    @property
    def key(self) -> tuple[str, int]:
        """Identity used for duplicate detection."""
        if self.post_id is not None:
            return ("post", self.post_id)
        if self.topic_id is None:
            raise ValueError("bookmark target has neither post nor topic")
        return ("topic", self.topic_id)


class Bookmark(BaseModel):
    """A user's saved reference to a post or topic."""

    id: str
    owner_id: str
    post_id: int | None = None
    topic_id: int | None = None
    name: str | None = None
    reminder_type: ReminderType | None = None
    reminder_at: datetime | None = None
    created_at: datetime

    @property
    def target(self) -> BookmarkTarget:
        return BookmarkTarget(post_id=self.post_id, topic_id=self.topic_id)


class CreateBookmarkRequest(BaseModel):
    """Payload for ``POST /bookmarks``.

    Fields are deliberately loose: the rate limiter has to count every
    attempt, so malformed values are rejected by the bookmark service after
    admission instead of by schema validation.
    """

    post_id: Any = Field(None, description="Post id (integer). Takes precedence over topic_id.")
    topic_id: Any = Field(None, description="Topic id (integer), used when no post is given.")
    reminder_type: Any = Field(
        None,
        description="One of the ReminderType values; every type except 'none' needs reminder_at.",
    )
    reminder_at: Any = Field(None, description="ISO-8601 timestamp for the reminder.")
    name: Any = Field(None, description="Optional label (string) shown in the bookmark list.")


class BookmarkResponse(BaseModel):
    """Bookmark as returned to API clients."""

    id: str
    post_id: int | None = None
    topic_id: int | None = None
    name: str | None = None
    reminder_type: ReminderType | None = None
    reminder_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_domain(cls, bookmark: Bookmark) -> "BookmarkResponse":
        return cls(**bookmark.model_dump(exclude={"owner_id"}))


class BookmarkListResponse(BaseModel):
    bookmarks: list[BookmarkResponse] = Field(default_factory=list)


class DeleteBookmarkResponse(BaseModel):
    success: Literal["OK"] = "OK"
