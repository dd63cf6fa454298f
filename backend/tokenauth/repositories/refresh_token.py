"""Refresh-token record repository."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, func, select

from tokenauth.models.refresh_token import RefreshTokenRecord
from tokenauth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshTokenRecord]):
    """Persistence-only access to ``refresh_tokens``.

    Deletions go through bulk ``DELETE`` statements so callers get the affected
    row count back; a zero count means another transaction got there first.
    """

    model = RefreshTokenRecord

    def latest_for_user(
        self, user_id: str, *, for_update: bool = False
    ) -> RefreshTokenRecord | None:
        """Return the most recently created record for ``user_id``.

        :param user_id: Owner identifier.
        :param for_update: Lock the selected row (``SELECT ... FOR UPDATE``)
            on dialects that support it.
        :returns: Newest record or ``None``.
        """
        stmt = (
            select(RefreshTokenRecord)
            .where(RefreshTokenRecord.user_id == user_id)
            .order_by(RefreshTokenRecord.created_at.desc(), RefreshTokenRecord.id.desc())
            .limit(1)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = self.session.execute(stmt).scalars().first()
        return cast(RefreshTokenRecord | None, result)

    def list_for_user(self, user_id: str) -> list[RefreshTokenRecord]:
        """Return every record of ``user_id``, newest first."""
        stmt = (
            select(RefreshTokenRecord)
            .where(RefreshTokenRecord.user_id == user_id)
            .order_by(RefreshTokenRecord.created_at.desc(), RefreshTokenRecord.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count()).where(RefreshTokenRecord.user_id == user_id)
        return int(self.session.execute(stmt).scalar_one())

    def delete_matching(self, user_id: str, token_hash: str) -> int:
        """Delete the record(s) of ``user_id`` carrying exactly ``token_hash``.

        :returns: Number of deleted rows.
        """
        stmt = (
            delete(RefreshTokenRecord)
            .where(
                RefreshTokenRecord.user_id == user_id,
                RefreshTokenRecord.refresh_token_hash == token_hash,
            )
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_for_user(self, user_id: str) -> int:
        """Delete every record of ``user_id``; returns the row count."""
        stmt = (
            delete(RefreshTokenRecord)
            .where(RefreshTokenRecord.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_created_before(self, cutoff: datetime) -> int:
        """Delete records issued strictly before ``cutoff``; returns the row count."""
        stmt = (
            delete(RefreshTokenRecord)
            .where(RefreshTokenRecord.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)
