"""Hand-off point for reminder delivery.

Delivery itself lives elsewhere; the service only announces persisted
reminders through this interface.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from bookmark_api.schemas.bookmark import Bookmark

logger = logging.getLogger(__name__)


class AbstractReminderScheduler(ABC):
    @abstractmethod
    def schedule(self, bookmark: Bookmark) -> None:
        """Register the bookmark's reminder for later delivery."""
        raise NotImplementedError


class LoggingReminderScheduler(AbstractReminderScheduler):
    """Record reminder intent in the log only."""

    def schedule(self, bookmark: Bookmark) -> None:
        logger.info(
            "reminder.scheduled",
            extra={
                "bookmark_id": bookmark.id,
                "owner_id": bookmark.owner_id,
                "reminder_type": bookmark.reminder_type.value if bookmark.reminder_type else None,
                "reminder_at": bookmark.reminder_at.isoformat() if bookmark.reminder_at else None,
            },
        )
