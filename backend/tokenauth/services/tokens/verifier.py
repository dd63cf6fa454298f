# tokenauth/services/tokens/verifier.py
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from tokenauth.services._shared.errors import InvalidTokenError, NotFoundError
from tokenauth.services._shared.ports import (
    ConsumeOutcome,
    RefreshTokenRecordStore,
)
from tokenauth.services.tokens.hashing import RefreshTokenHasher

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IpChange:
    """Advisory event: a refresh token came back from a different address."""

    user_id: str
    previous_ip: str
    client_ip: str


IpChangeListener = Callable[[IpChange], None]


class RefreshTokenVerifier:
    """
    Single-use verification of refresh tokens.

    The lookup of the newest record, the bcrypt comparison and the deletion
    happen inside the record store's atomic ``consume_latest``. A mismatch leaves
    the record in place; a match deletes it before success is reported.
    """

    def __init__(
        self,
        *,
        records: RefreshTokenRecordStore,
        hasher: RefreshTokenHasher,
        on_ip_change: IpChangeListener | None = None,
    ) -> None:
        """
        :param records: Persistence port shared with :class:`RefreshTokenStore`.
        :param hasher: bcrypt hasher shared with :class:`RefreshTokenStore`.
        :param on_ip_change: Optional hook notified of address changes, in
            addition to the warning log. It cannot veto the refresh.
        """
        self.records = records
        self.hasher = hasher
        self.on_ip_change = on_ip_change

    def verify_and_rotate(self, user_id: str, presented_token: str, client_ip: str) -> bool:
        """
        Consume the newest refresh token of ``user_id`` if it matches.

        :returns: ``True`` once the matched record is deleted.
        :raises NotFoundError: No record for the user, or a concurrent caller
            consumed it first.
        :raises InvalidTokenError: The token does not match the newest record.
        :raises HashingError: bcrypt could not check the stored hash.
        :raises StorageError: The datastore failed; nothing is reported consumed.
        """
        result = self.records.consume_latest(
            user_id, lambda token_hash: self.hasher.matches(presented_token, token_hash)
        )

        if result.outcome in (ConsumeOutcome.NOT_FOUND, ConsumeOutcome.RACE_LOST):
            log.warning(
                "refresh_token.not_found",
                extra={"event": "refresh_token.not_found", "user_id": user_id},
            )
            raise NotFoundError()

        if result.outcome is ConsumeOutcome.MISMATCH:
            log.warning(
                "refresh_token.mismatch",
                extra={"event": "refresh_token.mismatch", "user_id": user_id},
            )
            raise InvalidTokenError()

        assert result.record is not None
        if result.record.client_ip != client_ip:
            self._ip_changed(IpChange(user_id, result.record.client_ip, client_ip))

        log.info(
            "refresh_token.consumed",
            extra={"event": "refresh_token.consumed", "user_id": user_id},
        )
        return True

    def _ip_changed(self, change: IpChange) -> None:
        log.warning(
            "refresh_token.ip_changed",
            extra={
                "event": "ip_changed",
                "user_id": change.user_id,
                "previous_ip": change.previous_ip,
                "client_ip": change.client_ip,
            },
        )
        if self.on_ip_change is None:
            return
        # The token is already consumed; a failing hook must not turn that into an error.
        try:
            self.on_ip_change(change)
        except Exception:
            log.exception(
                "refresh_token.ip_change_hook_failed",
                extra={"event": "ip_changed", "user_id": change.user_id},
            )
