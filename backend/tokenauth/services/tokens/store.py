# tokenauth/services/tokens/store.py
from __future__ import annotations

import logging
from datetime import timedelta

from tokenauth.services._shared.base import BaseService
from tokenauth.services._shared.ports import RefreshTokenRecordStore
from tokenauth.services.tokens.hashing import RefreshTokenHasher

log = logging.getLogger(__name__)


class RefreshTokenStore(BaseService):
    """
    Owns the lifetime of stored refresh tokens.

    Only hashes reach the record store. By default a new token is added next to
    the user's older records; with ``single_active`` the older ones are dropped
    in the same atomic insert.
    """

    def __init__(
        self,
        *,
        records: RefreshTokenRecordStore,
        hasher: RefreshTokenHasher,
        single_active: bool = False,
    ) -> None:
        """
        :param records: Persistence port (SQL, Redis or in-memory).
        :param hasher: bcrypt hasher shared with the verifier.
        :param single_active: Keep at most one record per user.
        """
        self.records = records
        self.hasher = hasher
        self.single_active = single_active

    def persist(self, user_id: str, raw_token: str, client_ip: str) -> None:
        """
        Hash ``raw_token`` (first 72 bytes) and store it for ``user_id``.

        :raises HashingError: When bcrypt fails.
        :raises StorageError: When the insert fails.
        """
        token_hash = self.hasher.hash(raw_token)
        log.info(
            "refresh_token.storing",
            extra={"event": "refresh_token.storing", "user_id": user_id, "client_ip": client_ip},
        )
        self.records.insert(
            user_id=user_id,
            token_hash=token_hash,
            client_ip=client_ip,
            created_at=self.now_utc(),
            replace_existing=self.single_active,
        )
        log.info(
            "refresh_token.stored",
            extra={"event": "refresh_token.stored", "user_id": user_id},
        )

    def count_for_user(self, user_id: str) -> int:
        return self.records.count_for_user(user_id)

    def sweep(self, max_age: timedelta) -> int:
        """
        Delete records older than ``max_age``.

        Records that were never presented would otherwise stay forever.

        :returns: Number of deleted records.
        """
        removed = self.records.purge_created_before(self.now_utc() - max_age)
        log.info(
            "refresh_token.swept",
            extra={"event": "refresh_token.swept", "removed": removed},
        )
        return removed
