"""Application factory for the FastAPI app."""

from __future__ import annotations

from fastapi import FastAPI

from bookmark_api.api.routes import bookmarks_router, health_router
from bookmark_api.core.config import settings
from bookmark_api.core.exception_handlers import setup_exception_handlers
from bookmark_api.core.logging import configure_logging
from bookmark_api.core.middleware import request_id_middleware
from bookmark_api.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Bookmark API",
        description=(
            "Bookmark posts and topics with optional reminders. Creation is "
            "guarded by a per-user daily rate limit, reminder time validation, "
            "duplicate detection and a per-user bookmark quota."
        ),
        version="0.1.0",
    )

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(bookmarks_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
