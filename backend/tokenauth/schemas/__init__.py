"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AccessTokenSchema,
    IssueTokenSchema,
    RefreshTokenSchema,
    TokenPairSchema,
    UUID4String,
    WhoAmISchema,
)

__all__ = [
    "AccessTokenSchema",
    "IssueTokenSchema",
    "RefreshTokenSchema",
    "TokenPairSchema",
    "UUID4String",
    "WhoAmISchema",
]
