"""Fixed-window per-actor rate limiter.

Each attempt increments the counter first and then compares it with the
limit. Denied attempts are not rolled back, so hammering the endpoint keeps
the actor locked out until the window rolls over.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from bookmark_api.adapters.rate_limit.base import AbstractCounterStore
from bookmark_api.utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single ``admit`` call.

    Attributes:
        allowed: Whether the action may proceed.
        limit: Effective max count for the window (never below 1).
        count: Counter value after this attempt.
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    count: int
    reset_at: int
    retry_after_seconds: int | None


def effective_limit(max_count: int) -> int:
    """Clamp zero or negative limits to 1 so the limiter is never skipped."""
    return max(1, int(max_count))


class RateLimiter:
    """Admit or deny actions per (actor, action) within fixed windows."""

    def __init__(self, store: AbstractCounterStore, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def admit(
        self,
        actor_id: str,
        action_key: str,
        *,
        window_seconds: int,
        max_count: int,
    ) -> RateLimitResult:
        """Count one attempt and decide whether it is within the limit.

        Args:
            actor_id: Who is acting (the bookmark owner).
            action_key: Which action is being limited (e.g., ``create_bookmark``).
            window_seconds: Bucket size; buckets align to the UNIX epoch, so a
                86400-second window is a UTC calendar day.
            max_count: Attempts allowed per bucket; values below 1 count as 1.

        Returns:
            RateLimitResult describing the decision.

        Raises:
            ValueError: If window_seconds is not positive.
        """
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        limit = effective_limit(max_count)
        now = self._clock().timestamp()
        window_start = int(now // window_seconds) * window_seconds
        reset_at = window_start + window_seconds

        count = self._store.increment(f"{action_key}:{actor_id}", window_start=window_start)
        if count <= limit:
            return RateLimitResult(
                allowed=True,
                limit=limit,
                count=count,
                reset_at=reset_at,
                retry_after_seconds=None,
            )

        retry_after = max(0, int(math.ceil(reset_at - now)))
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "actor_id": actor_id,
                "action": action_key,
                "limit": limit,
                "count": count,
                "window_s": window_seconds,
                "retry_after_s": retry_after,
            },
        )
        return RateLimitResult(
            allowed=False,
            limit=limit,
            count=count,
            reset_at=reset_at,
            retry_after_seconds=retry_after,
        )

    def clear(self) -> None:
        self._store.clear()
