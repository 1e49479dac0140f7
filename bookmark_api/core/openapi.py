"""OpenAPI metadata and customization utilities.

Documents the ``X-User-Id`` requester header as a security scheme, adds tag
descriptions and exempts health endpoints from it.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Bookmarks",
        "description": "Create, list and delete bookmarks on posts and topics.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Wrap FastAPI's OpenAPI generation to add the requester scheme and tags."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        security_schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "RequesterId",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-User-Id",
                "description": "Authenticated user id, set by the upstream gateway.",
            },
        )
        schema.setdefault("security", [{"RequesterId": []}])

        tags = schema.setdefault("tags", [])
        known = {tag.get("name") for tag in tags}
        tags.extend(tag for tag in TAGS_METADATA if tag["name"] not in known)

        for path, methods in schema.get("paths", {}).items():
            if path.endswith("/health"):
                for method_obj in methods.values():
                    if isinstance(method_obj, dict):
                        method_obj["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
