"""In-memory counter store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from bookmark_api.adapters.rate_limit.base import AbstractCounterStore


@dataclass
class _WindowState:
    window_start: int
    count: int


class InMemoryCounterStore(AbstractCounterStore):
    """Counter store backed by a dict guarded by a lock.

    Important:
        Counters are lost on restart and not shared between workers.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state_by_key: dict[str, _WindowState] = {}

    def increment(self, key: str, *, window_start: int, amount: int = 1) -> int:
        if amount < 1:
            raise ValueError("amount must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            state = self._state_by_key.get(key)
            if state is None or state.window_start != window_start:
                state = _WindowState(window_start=window_start, count=0)
                self._state_by_key[key] = state
            state.count += amount
            return state.count

    def clear(self) -> None:
        with self._lock:
            self._state_by_key.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_key)
