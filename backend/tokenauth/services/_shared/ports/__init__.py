"""
tokenauth.services._shared.ports
================================

*Ports* (hexagonal interfaces) the token services depend on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.AccessTokenIssuer` and the :class:`~.AccessToken` value it returns.

- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenRecordStore` with its atomic ``consume_latest``
    contract, the :class:`~.ConsumeResult` outcome type and an in-memory
    implementation for unit tests.

Concrete adapters (SQL, Redis, JWT) live under ``tokenauth.infra``.
"""

from __future__ import annotations

from .refresh_token_store import (
    ConsumeOutcome,
    ConsumeResult,
    HashMatcher,
    InMemoryRefreshTokenStore,
    RefreshTokenRecordStore,
    RefreshTokenView,
)
from .token_provider import AccessToken, AccessTokenIssuer

__all__ = [
    "AccessToken",
    "AccessTokenIssuer",
    "ConsumeOutcome",
    "ConsumeResult",
    "HashMatcher",
    "InMemoryRefreshTokenStore",
    "RefreshTokenRecordStore",
    "RefreshTokenView",
]
