"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``bookmark_api`` import so the
global settings object picks them up.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("BOOKMARK_BASE_URL", "http://forum.test")
os.environ.setdefault("BOOKMARK_MAX_PER_DAY", "20")
os.environ.setdefault("BOOKMARK_MAX_PER_USER", "2000")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone  # noqa: E402
from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402

from bookmark_api.adapters.persistence.in_memory import InMemoryBookmarkRepository  # noqa: E402
from bookmark_api.adapters.rate_limit.in_memory import InMemoryCounterStore  # noqa: E402
from bookmark_api.core.config import StaticLimitsProvider  # noqa: E402
from bookmark_api.services.bookmark_service import BookmarkService  # noqa: E402
from bookmark_api.services.rate_limiter import RateLimiter  # noqa: E402

FIXED_NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> Mock:
    """Deterministic clock returning FIXED_NOW until changed."""
    return Mock(return_value=FIXED_NOW)


@pytest.fixture
def repository() -> InMemoryBookmarkRepository:
    return InMemoryBookmarkRepository()


@pytest.fixture
def counter_store() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest.fixture
def limits() -> StaticLimitsProvider:
    return StaticLimitsProvider(max_per_day=20, max_per_user=2000)


@pytest.fixture
def scheduler() -> Mock:
    return Mock()


@pytest.fixture
def service(
    repository: InMemoryBookmarkRepository,
    counter_store: InMemoryCounterStore,
    limits: StaticLimitsProvider,
    scheduler: Mock,
    clock: Mock,
) -> BookmarkService:
    return BookmarkService(
        repository=repository,
        rate_limiter=RateLimiter(counter_store, clock=clock),
        limits=limits,
        scheduler=scheduler,
        clock=clock,
    )
