"""CORS policy for the ``/api`` routes."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# Refresh-Token must be allowed or browsers cannot call /refresh cross-origin.
ALLOWED_HEADERS = ("Authorization", "Content-Type", "Refresh-Token", "X-Request-ID")
EXPOSED_HEADERS = ("X-Request-ID",)


def _origins(raw: str | None) -> list[str]:
    return [origin.strip() for origin in (raw or "").split(",") if origin.strip()]


def init_app(app: Flask) -> None:
    """Apply ``CORS_ORIGINS`` (comma separated) to every API route.

    An empty value or ``*`` allows any origin without credentials; an explicit
    list allows credentials for those origins only.
    """
    origins = _origins(app.config.get("CORS_ORIGINS"))
    any_origin = origins in ([], ["*"])
    api_prefix = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")

    CORS(
        app,
        resources={f"{api_prefix}/*": {"origins": "*" if any_origin else origins}},
        allow_headers=list(ALLOWED_HEADERS),
        expose_headers=list(EXPOSED_HEADERS),
        supports_credentials=not any_origin,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
