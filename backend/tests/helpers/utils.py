"""Tiny helpers shared across test modules."""

from __future__ import annotations

import jwt

USER_ID = "11111111-1111-4111-8111-111111111111"
CLIENT_IP = "10.0.0.1"


def unverified_claims(token: str) -> dict:
    """Decode a JWT payload without checking signature or expiry."""
    return jwt.decode(token, options={"verify_signature": False})


def post_from(client, path: str, payload: dict, *, ip: str = CLIENT_IP):
    """POST ``payload`` as JSON with ``ip`` as the peer address."""
    return client.post(path, json=payload, environ_base={"REMOTE_ADDR": ip})
