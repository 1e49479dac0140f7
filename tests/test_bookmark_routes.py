"""HTTP-level tests for /bookmarks.

The bookmark service is replaced per test with fresh in-memory stores and
static limits, so each test starts with no bookmarks and no counters.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from bookmark_api.adapters.persistence.in_memory import InMemoryBookmarkRepository
from bookmark_api.adapters.rate_limit.in_memory import InMemoryCounterStore
from bookmark_api.api.dependencies import get_bookmark_service
from bookmark_api.core.config import StaticLimitsProvider, settings
from bookmark_api.core.messages import t
from bookmark_api.main import app
from bookmark_api.schemas.bookmark import Bookmark, BookmarkTarget
from bookmark_api.services.bookmark_service import BookmarkService
from bookmark_api.services.rate_limiter import RateLimiter

CURRENT_USER = {"X-User-Id": "user-1"}


def _reminder_at() -> str:
    return (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()


@pytest.fixture
def route_repository() -> InMemoryBookmarkRepository:
    return InMemoryBookmarkRepository()


@pytest.fixture
def route_limits() -> StaticLimitsProvider:
    return StaticLimitsProvider(max_per_day=20, max_per_user=2000)


@pytest.fixture
def client(
    route_repository: InMemoryBookmarkRepository, route_limits: StaticLimitsProvider
) -> Iterator[TestClient]:
    service = BookmarkService(
        repository=route_repository,
        rate_limiter=RateLimiter(InMemoryCounterStore()),
        limits=route_limits,
    )
    app.dependency_overrides[get_bookmark_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _seed(repository: InMemoryBookmarkRepository, owner_id: str, post_id: int) -> Bookmark:
    return repository.insert(
        Bookmark(
            id=f"seed-{owner_id}-{post_id}",
            owner_id=owner_id,
            post_id=post_id,
            created_at=datetime.now(timezone.utc),
        )
    )


class TestCreate:
    def test_creates_a_bookmark_for_a_post(
        self, client: TestClient, route_repository: InMemoryBookmarkRepository
    ) -> None:
        response = client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "tomorrow", "reminder_at": _reminder_at()},
            headers=CURRENT_USER,
        )

        assert response.status_code == 200
        assert response.json()["post_id"] == 11
        assert route_repository.find_bookmark("user-1", BookmarkTarget(post_id=11)) is not None

    def test_creates_a_bookmark_for_the_topic(
        self, client: TestClient, route_repository: InMemoryBookmarkRepository
    ) -> None:
        response = client.post(
            "/bookmarks",
            json={
                "post_id": None,
                "topic_id": 3,
                "reminder_type": "tomorrow",
                "reminder_at": _reminder_at(),
            },
            headers=CURRENT_USER,
        )

        assert response.status_code == 200
        stored = route_repository.find_bookmark("user-1", BookmarkTarget(topic_id=3))
        assert stored is not None
        assert stored.post_id is None

    def test_rate_limits_creates(self, client: TestClient, route_limits: StaticLimitsProvider) -> None:
        route_limits.update(max_per_day=1)

        first = client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "tomorrow", "reminder_at": _reminder_at()},
            headers=CURRENT_USER,
        )
        assert first.status_code == 200

        second = client.post("/bookmarks", json={"post_id": 12}, headers=CURRENT_USER)
        assert second.status_code == 429
        assert second.json()["errors"] == [t("rate_limited")]
        assert "Retry-After" in second.headers

    def test_max_bookmark_limit_returns_400(
        self, client: TestClient, route_limits: StaticLimitsProvider
    ) -> None:
        route_limits.update(max_per_user=1)

        client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "tomorrow", "reminder_at": _reminder_at()},
            headers=CURRENT_USER,
        )
        response = client.post("/bookmarks", json={"post_id": 12}, headers=CURRENT_USER)

        assert response.status_code == 400
        assert t(
            "too_many", user_bookmarks_url=settings.bookmarks.user_bookmarks_url, limit=1
        ) in response.json()["errors"]

    def test_already_bookmarked_post_returns_400(
        self, client: TestClient, route_repository: InMemoryBookmarkRepository
    ) -> None:
        _seed(route_repository, "user-1", 11)

        response = client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "tomorrow", "reminder_at": _reminder_at()},
            headers=CURRENT_USER,
        )

        assert response.status_code == 400
        assert t("already_bookmarked") in response.json()["errors"]

    def test_missing_reminder_at_returns_400(self, client: TestClient) -> None:
        response = client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "tomorrow"},
            headers=CURRENT_USER,
        )

        assert response.status_code == 400
        assert t("time_must_be_provided") in response.json()["errors"][0]

    def test_unknown_reminder_type_without_time_needs_a_time(self, client: TestClient) -> None:
        response = client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "someday"},
            headers=CURRENT_USER,
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [t("time_must_be_provided")]

    def test_unknown_reminder_type_with_time_is_invalid_parameters(
        self, client: TestClient
    ) -> None:
        response = client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "someday", "reminder_at": _reminder_at()},
            headers=CURRENT_USER,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_parameters"
        assert response.json()["errors"] == [t("invalid_parameters", param="reminder_type")]

    def test_malformed_post_id_is_invalid_parameters(self, client: TestClient) -> None:
        response = client.post("/bookmarks", json={"post_id": "abc"}, headers=CURRENT_USER)

        assert response.status_code == 400
        assert response.json()["errors"] == [t("invalid_parameters", param="post_id")]

    @pytest.mark.parametrize(
        "body",
        [
            {"post_id": 12, "reminder_type": "bogus"},
            {"post_id": 12, "reminder_type": "bogus", "reminder_at": "2026-03-11T12:00:00Z"},
            {"post_id": "abc"},
            {"topic_id": ["not", "an", "id"]},
            {"post_id": 12, "name": 42},
        ],
    )
    def test_rate_limit_answers_before_payload_validation(
        self, client: TestClient, route_limits: StaticLimitsProvider, body: dict
    ) -> None:
        route_limits.update(max_per_day=1)
        first = client.post(
            "/bookmarks",
            json={"post_id": 11, "reminder_type": "tomorrow", "reminder_at": _reminder_at()},
            headers=CURRENT_USER,
        )
        assert first.status_code == 200

        response = client.post("/bookmarks", json=body, headers=CURRENT_USER)

        assert response.status_code == 429
        assert response.json()["errors"] == [t("rate_limited")]

    def test_missing_requester_is_403(self, client: TestClient) -> None:
        response = client.post("/bookmarks", json={"post_id": 11})

        assert response.status_code == 403
        assert response.json()["errors"][0] == t("invalid_access")


class TestDestroy:
    def test_destroys_the_bookmark(
        self, client: TestClient, route_repository: InMemoryBookmarkRepository
    ) -> None:
        bookmark = _seed(route_repository, "user-1", 11)

        response = client.delete(f"/bookmarks/{bookmark.id}", headers=CURRENT_USER)

        assert response.status_code == 200
        assert response.json() == {"success": "OK"}
        assert route_repository.find_by_id(bookmark.id) is None

    def test_delete_response_is_documented(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()
        responses = schema["paths"]["/bookmarks/{bookmark_id}"]["delete"]["responses"]

        ref = responses["200"]["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/DeleteBookmarkResponse")

    def test_already_destroyed_returns_404(
        self, client: TestClient, route_repository: InMemoryBookmarkRepository
    ) -> None:
        bookmark = _seed(route_repository, "user-1", 11)
        route_repository.delete(bookmark.id)

        response = client.delete(f"/bookmarks/{bookmark.id}", headers=CURRENT_USER)

        assert response.status_code == 404
        assert t("not_found") in response.json()["errors"][0]

    def test_bookmark_of_another_user_returns_403(
        self, client: TestClient, route_repository: InMemoryBookmarkRepository
    ) -> None:
        bookmark = _seed(route_repository, "someone-else", 11)

        response = client.delete(f"/bookmarks/{bookmark.id}", headers=CURRENT_USER)

        assert response.status_code == 403
        assert t("invalid_access") in response.json()["errors"][0]
        assert route_repository.find_by_id(bookmark.id) is not None


def test_list_returns_only_own_bookmarks(
    client: TestClient, route_repository: InMemoryBookmarkRepository
) -> None:
    _seed(route_repository, "user-1", 11)
    _seed(route_repository, "someone-else", 12)

    response = client.get("/bookmarks", headers=CURRENT_USER)

    assert response.status_code == 200
    assert [b["post_id"] for b in response.json()["bookmarks"]] == [11]
    assert "owner_id" not in response.json()["bookmarks"][0]
