"""Build the token service from application config."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from flask import Flask, current_app

from tokenauth.infra.jwt.jwt_access_token_issuer import JWTAccessTokenIssuer
from tokenauth.services._shared.ports import RefreshTokenRecordStore
from tokenauth.services.auth.service import TokenService
from tokenauth.services.tokens import (
    RefreshTokenGenerator,
    RefreshTokenHasher,
    RefreshTokenStore,
    RefreshTokenVerifier,
)

log = logging.getLogger(__name__)

EXTENSION_KEY = "token_service"
SUPPORTED_BACKENDS = ("sql", "redis")


def build_record_store(config: Mapping[str, Any]) -> RefreshTokenRecordStore:
    """Return the record store adapter selected by ``REFRESH_TOKEN_BACKEND``."""
    backend = str(config.get("REFRESH_TOKEN_BACKEND", "sql")).strip().lower()
    if backend == "sql":
        from tokenauth.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore

        return SQLRefreshTokenStore()
    if backend == "redis":
        from tokenauth.core.extensions import get_redis
        from tokenauth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        return RedisRefreshTokenStore(get_redis())
    raise RuntimeError(
        f"Unsupported REFRESH_TOKEN_BACKEND {backend!r}; expected one of {SUPPORTED_BACKENDS}"
    )


def build_token_service(
    config: Mapping[str, Any],
    records: RefreshTokenRecordStore,
) -> TokenService:
    """
    Wire every token component around ``records``.

    The issuer and the verifier capture their settings here, once; nothing
    reads configuration per request.
    """
    hasher = RefreshTokenHasher(rounds=int(config.get("BCRYPT_ROUNDS", 10)))
    issuer = JWTAccessTokenIssuer(
        secret=config.get("JWT_SECRET_KEY") or "",
        ttl=config["ACCESS_TOKEN_TTL"],
        algorithm=config.get("JWT_ALGORITHM", "HS512"),
    )
    return TokenService(
        issuer=issuer,
        generator=RefreshTokenGenerator(),
        store=RefreshTokenStore(
            records=records,
            hasher=hasher,
            single_active=bool(config.get("REFRESH_TOKEN_SINGLE_ACTIVE", False)),
        ),
        verifier=RefreshTokenVerifier(records=records, hasher=hasher),
    )


def init_app(app: Flask) -> None:
    """Attach a ready :class:`TokenService` under ``app.extensions``."""
    if not app.config.get("JWT_SECRET_KEY"):
        # Issuance will answer 500 until a secret is configured
        log.warning("JWT_SECRET_KEY is not set; access tokens cannot be signed")
    service = build_token_service(app.config, build_record_store(app.config))
    app.extensions[EXTENSION_KEY] = service
    log.debug(
        "token_service.ready",
        extra={"backend": app.config.get("REFRESH_TOKEN_BACKEND", "sql")},
    )


def get_token_service() -> TokenService:
    """Return the token service bound to the current application."""
    return current_app.extensions[EXTENSION_KEY]
