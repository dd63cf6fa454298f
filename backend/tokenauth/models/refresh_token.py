"""Persisted refresh-token records."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from tokenauth.core.extensions import db

from .base import PKMixin, ReprMixin


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshTokenRecord(PKMixin, ReprMixin, db.Model):
    """
    One issued refresh token, stored as a bcrypt digest.

    Fields
    ------
    user_id : str
        Opaque identifier of the token owner (UUID string in practice).
    refresh_token_hash : str
        bcrypt hash of the first 72 bytes of the raw token. The raw token is
        never stored.
    client_ip : str
        Client address observed when the token was issued.
    created_at : datetime
        Issuance timestamp; the verifier always works on the newest record.

    Notes
    -----
    No uniqueness constraint on ``user_id``: several records may coexist. The
    composite index serves the "latest record per user" lookup.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    refresh_token_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    client_ip: Mapped[str] = mapped_column(String(45), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        Index("ix_refresh_tokens_user_id_created_at", "user_id", "created_at"),
    )
