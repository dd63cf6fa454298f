# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from tokenauth.models.refresh_token import RefreshTokenRecord
from tokenauth.services._shared.errors import StorageError
from tokenauth.services._shared.ports import (
    ConsumeOutcome,
    ConsumeResult,
    HashMatcher,
    RefreshTokenRecordStore,
    RefreshTokenView,
)
from tokenauth.uow import SQLAlchemyUnitOfWork


@dataclass(slots=True)
class SQLRefreshTokenStore(RefreshTokenRecordStore):
    """
    Relational refresh-token store.

    Every call runs in its own Unit of Work. ``consume_latest`` locks the newest
    row (``SELECT ... FOR UPDATE`` where the dialect supports it) and deletes it
    with a conditional ``DELETE``; the affected row count decides the winner, so
    two transactions racing on the same token can never both succeed.

    :param uow_factory: Builds the Unit of Work; requires an app context when
        the default Flask-scoped session is used.
    """

    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork

    def insert(
        self,
        *,
        user_id: str,
        token_hash: str,
        client_ip: str,
        created_at: datetime,
        replace_existing: bool = False,
    ) -> None:
        try:
            with self.uow_factory() as uow:
                if replace_existing:
                    uow.refresh_tokens.delete_for_user(user_id)
                uow.refresh_tokens.add(
                    RefreshTokenRecord(
                        user_id=user_id,
                        refresh_token_hash=token_hash,
                        client_ip=client_ip,
                        created_at=created_at,
                    )
                )
        except SQLAlchemyError as exc:
            raise StorageError("Failed to insert refresh token record") from exc

    def consume_latest(self, user_id: str, matches: HashMatcher) -> ConsumeResult:
        try:
            with self.uow_factory() as uow:
                repo = uow.refresh_tokens
                record = repo.latest_for_user(user_id, for_update=True)
                if record is None:
                    return ConsumeResult(ConsumeOutcome.NOT_FOUND)

                token_hash = record.refresh_token_hash
                view = RefreshTokenView(
                    user_id=record.user_id,
                    client_ip=record.client_ip,
                    created_at=record.created_at,
                )
                if not matches(token_hash):
                    return ConsumeResult(ConsumeOutcome.MISMATCH, view)

                if repo.delete_matching(user_id, token_hash) == 0:
                    return ConsumeResult(ConsumeOutcome.RACE_LOST, view)
                # Commit happens on block exit; a failed commit raises below.
                return ConsumeResult(ConsumeOutcome.CONSUMED, view)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to consume refresh token record") from exc

    def count_for_user(self, user_id: str) -> int:
        try:
            with self.uow_factory() as uow:
                return uow.refresh_tokens.count_for_user(user_id)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to count refresh token records") from exc

    def purge_created_before(self, cutoff: datetime) -> int:
        try:
            with self.uow_factory() as uow:
                return uow.refresh_tokens.delete_created_before(cutoff)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to purge refresh token records") from exc
