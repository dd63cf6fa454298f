# tokenauth/infra/jwt/jwt_access_token_issuer.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt

from tokenauth.services._shared.errors import SigningError
from tokenauth.services._shared.ports import AccessToken, AccessTokenIssuer

# Claim names kept compatible with flask-jwt-extended's verifier
SUBJECT_CLAIM = "sub"
BINDING_CLAIM = "client_ip"
ACCESS_TOKEN_TYPE = "access"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class JWTAccessTokenIssuer(AccessTokenIssuer):
    """
    HS512 access-token issuer backed by PyJWT.

    The secret is handed over at construction and never re-read; the instance is
    immutable and safe to share between request threads.

    :param secret: Symmetric signing key. Empty means "not configured".
    :param ttl: Token lifetime, 15 minutes by default.
    :param algorithm: HMAC algorithm; HS512 unless the verifier says otherwise.
    :param clock: UTC clock, injectable for tests.
    """

    secret: str | bytes = field(repr=False)
    ttl: timedelta = timedelta(minutes=15)
    algorithm: str = "HS512"
    clock: Callable[[], datetime] = _utcnow

    def issue(self, user_id: str, client_ip: str) -> AccessToken:
        if not self.secret:
            raise SigningError("JWT signing secret is not configured")

        now = self.clock()
        # JWT timestamps have second resolution
        expires_at = (now + self.ttl).replace(microsecond=0)
        claims = {
            SUBJECT_CLAIM: user_id,
            BINDING_CLAIM: client_ip,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid4().hex,
            "type": ACCESS_TOKEN_TYPE,
        }
        try:
            token = jwt.encode(claims, self.secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise SigningError(f"Failed to sign access token: {type(exc).__name__}") from exc

        return AccessToken(
            token=token,
            subject=user_id,
            binding=client_ip,
            expires_at=expires_at,
        )
