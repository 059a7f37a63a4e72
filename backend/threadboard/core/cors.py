"""Cross-origin policy for the JSON API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from threadboard.core.logger import REQUEST_ID_HEADER

# Bearer tokens travel in ``Authorization``; nothing relies on cookies.
ALLOWED_HEADERS = ("Authorization", "Content-Type", REQUEST_ID_HEADER)


def parse_origins(raw: str | None) -> list[str] | str:
    """Turn ``CORS_ORIGINS`` into a list of origins, or ``"*"`` for any origin."""
    origins = [o.strip().rstrip("/") for o in (raw or "").split(",") if o.strip()]
    if not origins or "*" in origins:
        return "*"
    return origins


def init_app(app: Flask) -> None:
    """Apply CORS to every route below ``API_BASE_PREFIX``.

    Credentials are only advertised for an explicit origin list.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    prefix = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")

    CORS(
        app,
        resources={rf"{prefix}/*": {"origins": origins}},
        allow_headers=list(ALLOWED_HEADERS),
        expose_headers=[REQUEST_ID_HEADER],
        methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        supports_credentials=origins != "*",
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
