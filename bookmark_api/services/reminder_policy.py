"""Reminder type / reminder time validation."""

from __future__ import annotations

from datetime import datetime, timezone

from bookmark_api.core.errors import BookmarkFailure, FailureKind
from bookmark_api.schemas.bookmark import ReminderType

# Whether each reminder type needs an explicit reminder_at.
REQUIRES_TIME: dict[ReminderType, bool] = {
    ReminderType.AT_DESIRED_TIME: True,
    ReminderType.LATER_TODAY: True,
    ReminderType.NEXT_BUSINESS_DAY: True,
    ReminderType.TOMORROW: True,
    ReminderType.NEXT_WEEK: True,
    ReminderType.NEXT_MONTH: True,
    ReminderType.CUSTOM: True,
    ReminderType.START_OF_NEXT_BUSINESS_WEEK: True,
    ReminderType.LATER_THIS_WEEK: True,
    ReminderType.LAST_CUSTOM: True,
    ReminderType.NONE: False,
}


def parse_reminder_type(value: ReminderType | str | None) -> ReminderType | None:
    """Map a raw reminder type to the enum.

    Raises:
        ValueError: If ``value`` is not a known reminder type.
    """
    if value is None or isinstance(value, ReminderType):
        return value
    if not isinstance(value, str):
        raise ValueError(f"unknown reminder type: {value!r}")
    return ReminderType(value)


def parse_reminder_at(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Returns None for missing, blank, non-string or unparsable input.
    """
    if isinstance(value, datetime):
        parsed = value
    elif not isinstance(value, str):
        return None
    else:
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ReminderPolicy:
    """Check that time-based reminders come with a usable timestamp."""

    def __init__(self, requires_time: dict[ReminderType, bool] | None = None) -> None:
        self._requires_time = dict(REQUIRES_TIME if requires_time is None else requires_time)

    def requires_time(self, reminder_type: ReminderType | str | None) -> bool:
        """Unknown types count as time-based."""
        if reminder_type is None:
            return False
        try:
            known = parse_reminder_type(reminder_type)
        except ValueError:
            return True
        return self._requires_time.get(known, True)

    def validate(
        self,
        reminder_type: ReminderType | str | None,
        reminder_at: object,
    ) -> BookmarkFailure | None:
        """Return a ``time_must_be_provided`` failure, or None when valid.

        Reminder times in the past are accepted here.
        """
        if not self.requires_time(reminder_type):
            return None
        if parse_reminder_at(reminder_at) is None:
            return BookmarkFailure(kind=FailureKind.TIME_MUST_BE_PROVIDED)
        return None

    def normalize(
        self,
        reminder_type: ReminderType | None,
        reminder_at: object,
    ) -> tuple[ReminderType | None, datetime | None]:
        """Values to persist: no-time types drop reminder_at, ``none`` maps to None."""
        if reminder_type is None or reminder_type is ReminderType.NONE:
            return None, None
        if not self.requires_time(reminder_type):
            return reminder_type, None
        return reminder_type, parse_reminder_at(reminder_at)
