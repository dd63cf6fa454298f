"""CORS policy for the token endpoints."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from tokenauth.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """Allow browser clients from ``CORS_ORIGINS`` to call ``/api/*``.

    A blank value or ``"*"`` opens the API to any origin and, in that case,
    credentials are never allowed. The correlation header is exposed so that
    front-ends can quote it in support requests.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        methods=["GET", "POST", "OPTIONS"],
        expose_headers=[REQUEST_ID_HEADER],
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
