"""Cross-origin policy for the auth, user and mail resources."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def allowed_origins(raw: str | None) -> list[str] | str:
    """Parse ``CORS_ORIGINS``; blank or ``*`` means any origin."""
    origins = [item.strip() for item in (raw or "").split(",") if item.strip()]
    return "*" if not origins or origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """Apply CORS below ``API_BASE_PREFIX``.

    Credentials are only supported with an explicit origin list. The refresh
    token header is allowed next to ``Authorization``.
    """
    origins = allowed_origins(app.config.get("CORS_ORIGINS"))
    prefix = app.config.get("API_BASE_PREFIX", "").rstrip("/")
    CORS(
        app,
        resources={rf"{prefix}/*": {"origins": origins}},
        supports_credentials=origins != "*",
        allow_headers=[
            "Authorization",
            "Content-Type",
            app.config.get("REFRESH_TOKEN_HEADER", "refreshtoken"),
        ],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
