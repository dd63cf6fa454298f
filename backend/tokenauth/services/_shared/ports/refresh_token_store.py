from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Protocol

# Receives a stored bcrypt hash, answers whether the presented token matches it.
HashMatcher = Callable[[str], bool]


class ConsumeOutcome(Enum):
    """Outcome of an atomic consume attempt."""

    CONSUMED = auto()
    NOT_FOUND = auto()
    MISMATCH = auto()
    # The record matched but another caller deleted it first.
    RACE_LOST = auto()


@dataclass(frozen=True)
class RefreshTokenView:
    """
    Read-model for a stored refresh token (the hash is deliberately absent).

    :ivar user_id: Owner user id.
    :ivar client_ip: Address recorded at issuance.
    :ivar created_at: Issuance timestamp (UTC).
    """

    user_id: str
    client_ip: str
    created_at: datetime


@dataclass(frozen=True)
class ConsumeResult:
    """Outcome plus, when a record was inspected, its read-model."""

    outcome: ConsumeOutcome
    record: RefreshTokenView | None = None

    @property
    def consumed(self) -> bool:
        return self.outcome is ConsumeOutcome.CONSUMED


class RefreshTokenRecordStore(Protocol):
    """
    Persistence port for refresh-token records.

    ``consume_latest`` MUST be atomic: lookup of the newest record, the hash
    check and the deletion happen as one unit, and only the caller whose
    deletion removed the record gets ``CONSUMED``. Infrastructure failures are
    raised as ``StorageError``; exceptions raised by ``matches`` propagate
    unchanged and leave the store untouched.
    """

    def insert(
        self,
        *,
        user_id: str,
        token_hash: str,
        client_ip: str,
        created_at: datetime,
        replace_existing: bool = False,
    ) -> None:
        """
        Store a new record. With ``replace_existing`` the user's previous
        records are removed in the same atomic step.
        """

    def consume_latest(self, user_id: str, matches: HashMatcher) -> ConsumeResult:
        """Atomically check and delete the newest record of ``user_id``."""

    def count_for_user(self, user_id: str) -> int:
        """Number of stored records for ``user_id``."""

    def purge_created_before(self, cutoff: datetime) -> int:
        """Delete records issued before ``cutoff``; returns how many."""


@dataclass
class _Entry:
    seq: int
    token_hash: str
    client_ip: str
    created_at: datetime


@dataclass
class InMemoryRefreshTokenStore(RefreshTokenRecordStore):
    """
    In-memory record store with atomic consume.

    .. note::
       A single lock serializes every operation, which is what makes
       ``consume_latest`` atomic across threads in unit tests.
    """

    _by_user: dict[str, list[_Entry]] = field(default_factory=dict)
    _seq: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def insert(
        self,
        *,
        user_id: str,
        token_hash: str,
        client_ip: str,
        created_at: datetime,
        replace_existing: bool = False,
    ) -> None:
        with self._lock:
            self._seq += 1
            entries = [] if replace_existing else self._by_user.get(user_id, [])
            entries.append(
                _Entry(
                    seq=self._seq,
                    token_hash=token_hash,
                    client_ip=client_ip,
                    created_at=created_at,
                )
            )
            self._by_user[user_id] = entries

    def consume_latest(self, user_id: str, matches: HashMatcher) -> ConsumeResult:
        with self._lock:
            entries = self._by_user.get(user_id)
            if not entries:
                return ConsumeResult(ConsumeOutcome.NOT_FOUND)
            latest = max(entries, key=lambda e: (e.created_at, e.seq))
            view = RefreshTokenView(
                user_id=user_id, client_ip=latest.client_ip, created_at=latest.created_at
            )
            if not matches(latest.token_hash):
                return ConsumeResult(ConsumeOutcome.MISMATCH, view)
            entries.remove(latest)
            if not entries:
                del self._by_user[user_id]
            return ConsumeResult(ConsumeOutcome.CONSUMED, view)

    def count_for_user(self, user_id: str) -> int:
        with self._lock:
            return len(self._by_user.get(user_id, []))

    def purge_created_before(self, cutoff: datetime) -> int:
        removed = 0
        with self._lock:
            for user_id in list(self._by_user):
                kept = [e for e in self._by_user[user_id] if e.created_at >= cutoff]
                removed += len(self._by_user[user_id]) - len(kept)
                if kept:
                    self._by_user[user_id] = kept
                else:
                    del self._by_user[user_id]
        return removed
