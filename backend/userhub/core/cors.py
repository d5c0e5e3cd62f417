"""Cross-origin policy for the user API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from userhub.core.logger import CORRELATION_HEADERS, REQUEST_ID_HEADER


def _split_origins(raw: str | None) -> list[str]:
    return [origin.strip() for origin in (raw or "").split(",") if origin.strip()]


def init_app(app: Flask) -> None:
    """Enable CORS on ``{API_BASE_PREFIX}/*`` and ``/health``.

    Browsers may send the correlation headers and read back
    ``X-Request-ID``. With a blank or ``"*"`` ``CORS_ORIGINS`` any origin is
    allowed and credentials are not.
    """
    origins = _split_origins(app.config.get("CORS_ORIGINS"))
    allow_any = origins in ([], ["*"])
    resource = {"origins": "*" if allow_any else origins}
    prefix = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")

    CORS(
        app,
        resources={f"{prefix}/*": resource, "/health": resource},
        allow_headers=["Content-Type", *CORRELATION_HEADERS],
        expose_headers=[REQUEST_ID_HEADER],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        supports_credentials=not allow_any,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
