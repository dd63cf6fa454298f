"""Repository package exposing persistence-layer access."""

from __future__ import annotations

from tokenauth.repositories.base import BaseRepository
from tokenauth.repositories.refresh_token import RefreshTokenRepository

__all__ = ["BaseRepository", "RefreshTokenRepository"]
