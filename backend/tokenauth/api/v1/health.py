"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tokenauth.api.deps import json_response, timing
from tokenauth.core.extensions import db, get_redis

bp = Blueprint("health", __name__)


def _db_status() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        return "fail"
    return "ok"


def _store_status(db_status: str) -> str:
    if current_app.config.get("REFRESH_TOKEN_BACKEND", "sql") != "redis":
        return db_status
    try:
        get_redis().ping()
    except (RedisError, RuntimeError):
        current_app.logger.exception("healthcheck.redis_error")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and refresh-token store health."""

    db_status = _db_status()
    store_status = _store_status(db_status)
    payload = {
        "status": "ok" if store_status == "ok" else "degraded",
        "db": db_status,
        "store": store_status,
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
