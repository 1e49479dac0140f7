"""Tests for global exception handlers.

Every error response must share the ``errors`` + ``error`` shape, use the
status code carried by the exception, and never leak internals.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from bookmark_api.core.errors import (
    AppError,
    AuthenticationAppError,
    BookmarkAppError,
    PersistenceAppError,
)
from bookmark_api.core.exception_handlers import setup_exception_handlers
from bookmark_api.core.messages import t


class _Payload(BaseModel):
    post_id: int


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/validation")
    async def raise_validation():
        raise AppError(code="bad_input", message="Bad input")

    @app.get("/auth")
    async def raise_auth():
        raise AuthenticationAppError(code="invalid_access", message=t("invalid_access"))

    @app.get("/bookmark")
    async def raise_bookmark():
        raise BookmarkAppError(
            code="rate_limited",
            message=t("rate_limited"),
            http_status=429,
            messages=[t("rate_limited")],
            headers={"Retry-After": "10"},
        )

    @app.get("/persistence")
    async def raise_persistence():
        raise PersistenceAppError(code="persistence_error", message="connection to db-01 lost")

    @app.post("/payload")
    async def accept_payload(payload: _Payload):
        return {"ok": True}

    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


def test_app_error_defaults_to_400(client: TestClient) -> None:
    response = client.get("/validation")

    assert response.status_code == 400
    data = response.json()
    assert data["errors"] == ["Bad input"]
    assert data["error"]["code"] == "bad_input"
    assert "request_id" in data["error"]


def test_authentication_error_returns_403(client: TestClient) -> None:
    response = client.get("/auth")

    assert response.status_code == 403
    assert response.json()["errors"][0] == t("invalid_access")


def test_bookmark_error_uses_its_status_and_headers(client: TestClient) -> None:
    response = client.get("/bookmark")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "10"
    assert response.json()["error"]["code"] == "rate_limited"


def test_persistence_error_is_500_without_internal_details(client: TestClient) -> None:
    response = client.get("/persistence")

    assert response.status_code == 500
    data = response.json()
    assert data["error"]["code"] == "internal"
    assert "db-01" not in response.text


def test_request_validation_is_400_with_field_messages(client: TestClient) -> None:
    response = client.post("/payload", json={"post_id": "not-a-number"})

    assert response.status_code == 400
    data = response.json()
    assert data["error"]["code"] == "invalid_parameters"
    assert data["errors"][0].startswith("post_id:")


def test_general_exception_handler_never_leaks_details() -> None:
    from bookmark_api.core.exception_handlers import general_exception_handler

    request = AsyncMock()
    request.url.path = "/test"
    request.method = "GET"

    response = asyncio.run(general_exception_handler(request, ValueError("secret detail")))

    data = json.loads(bytes(response.body).decode())
    assert response.status_code == 500
    assert data["error"]["code"] == "internal_server_error"
    assert "secret detail" not in json.dumps(data)
    assert "ValueError" not in json.dumps(data)


def test_handlers_registered(app_with_handlers: FastAPI) -> None:
    assert AppError in app_with_handlers.exception_handlers
    assert Exception in app_with_handlers.exception_handlers
