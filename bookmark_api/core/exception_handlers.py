"""Global exception handlers for consistent error responses.

Every error body has the same shape::

    {"errors": ["..."], "error": {"code": "...", "message": "...", "request_id": "..."}}

``errors`` is the ordered list of user-facing messages; ``error`` carries the
machine-readable code for clients and tracing.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookmark_api.core.errors import AppError, BookmarkAppError, PersistenceAppError
from bookmark_api.core.logging import get_request_id
from bookmark_api.core.messages import t

logger = logging.getLogger(__name__)


def _error_body(code: str, messages: list[str], details: dict | None = None) -> dict:
    error_content: dict = {
        "code": code,
        "message": messages[0],
        "request_id": get_request_id(),
    }
    if details:
        error_content["details"] = details
    return {"errors": messages, "error": error_content}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError using its own status code and message list.

    PersistenceAppError is the only kind logged at error level and its
    message is replaced by a generic one.
    """
    status_code = exc.status_code

    if isinstance(exc, PersistenceAppError):
        logger.error(
            "persistence_error_handled",
            extra={
                "error_code": exc.code,
                "error_message": exc.message,
                "request_path": request.url.path,
                "request_method": request.method,
            },
        )
        return JSONResponse(
            status_code=status_code,
            content=_error_body("internal", [t("internal")]),
        )

    logger.info(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "has_details": bool(exc.details),
        },
    )

    headers = exc.headers if isinstance(exc, BookmarkAppError) else None
    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.code, exc.errors, dict(exc.details) if exc.details else None),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic validation errors into the common error shape (400)."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    return JSONResponse(
        status_code=400,
        content=_error_body("invalid_parameters", messages or ["Invalid parameters"]),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for unexpected errors; never leaks internals to the client."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=_error_body("internal_server_error", [t("internal")]),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
