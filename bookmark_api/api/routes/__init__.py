from __future__ import annotations

from bookmark_api.api.routes.bookmarks import router as bookmarks_router
from bookmark_api.api.routes.health import router as health_router

__all__ = ["bookmarks_router", "health_router"]
