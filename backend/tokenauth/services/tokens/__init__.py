"""Refresh-token lifecycle components."""

from __future__ import annotations

from .generator import REFRESH_TOKEN_LENGTH, RefreshTokenGenerator
from .hashing import BCRYPT_MAX_INPUT_BYTES, RefreshTokenHasher, truncate_token
from .store import RefreshTokenStore
from .verifier import IpChange, IpChangeListener, RefreshTokenVerifier

__all__ = [
    "BCRYPT_MAX_INPUT_BYTES",
    "REFRESH_TOKEN_LENGTH",
    "IpChange",
    "IpChangeListener",
    "RefreshTokenGenerator",
    "RefreshTokenHasher",
    "RefreshTokenStore",
    "RefreshTokenVerifier",
    "truncate_token",
]
