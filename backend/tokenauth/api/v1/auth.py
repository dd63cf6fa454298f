"""Token issuance, refresh and introspection endpoints."""

from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint
from flask_jwt_extended import get_jwt

from tokenauth.api.deps import (
    client_ip,
    get_token_service,
    json_body,
    json_response,
    no_store,
    require_auth,
    timing,
)
from tokenauth.schemas import (
    AccessTokenSchema,
    IssueTokenSchema,
    RefreshTokenSchema,
    TokenPairSchema,
    WhoAmISchema,
)
from tokenauth.services._shared.errors import ServiceError
from tokenauth.services.auth import IssueIn, RefreshIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

issue_schema = IssueTokenSchema()
refresh_schema = RefreshTokenSchema()
token_pair_schema = TokenPairSchema()
access_token_schema = AccessTokenSchema()
whoami_schema = WhoAmISchema()


@bp.post("/token")
@timing
def issue_token():
    """Issue an access token and a refresh token for ``user_id``."""

    data = issue_schema.load(json_body())
    service = get_token_service()
    try:
        pair = service.issue_pair(IssueIn(user_id=data["user_id"], client_ip=client_ip()))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return no_store(json_response(token_pair_schema.dump(pair)))


@bp.post("/refresh")
@timing
def refresh_token():
    """Consume a refresh token and return a new access token."""

    data = refresh_schema.load(json_body())
    service = get_token_service()
    dto = RefreshIn(
        user_id=data["user_id"],
        refresh_token=data["refresh_token"],
        client_ip=client_ip(),
    )
    try:
        out = service.refresh(dto)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return no_store(json_response(access_token_schema.dump(out)))


@bp.get("/whoami")
@require_auth
@timing
def whoami():
    """Return the identity carried by the presented access token."""

    claims = get_jwt()
    body = {
        "user_id": claims["sub"],
        "client_ip": claims.get("client_ip"),
        "expires_at": datetime.fromtimestamp(claims["exp"], tz=UTC),
    }
    return json_response(whoami_schema.dump(body))
