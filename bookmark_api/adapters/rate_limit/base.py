"""Counter store interface used by the rate limiter."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractCounterStore(ABC):
    """Atomic per-key, per-window counters."""

    @abstractmethod
    def increment(self, key: str, *, window_start: int, amount: int = 1) -> int:
        """Add ``amount`` to the counter for ``key`` and return the new total.

        A ``window_start`` different from the stored one starts a fresh
        counter, so each window bucket counts from zero.

        Args:
            key: Namespaced counter key (actor and action).
            window_start: Epoch seconds at which the current bucket began.
            amount: Units to add (default 1).

        Returns:
            The counter value after the increment.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop every counter."""
        raise NotImplementedError
