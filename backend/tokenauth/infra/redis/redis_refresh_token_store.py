# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError, WatchError  # type: ignore[import-untyped]

from tokenauth.services._shared.errors import StorageError
from tokenauth.services._shared.ports import (
    ConsumeOutcome,
    ConsumeResult,
    HashMatcher,
    RefreshTokenRecordStore,
    RefreshTokenView,
)


def _b(s: bytes | None, default: str = "") -> str:
    return s.decode() if s is not None else default


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenRecordStore):
    """
    Redis-backed refresh-token store.

    Layout
    ------
    ``rt:{id}``
        Hash with ``user_id``, ``token_hash``, ``client_ip``, ``created_at``.
    ``rt:u:{user_id}``
        Sorted set of the user's record ids scored by ``created_at``.
    ``rt:all``
        Sorted set of every record id scored by ``created_at`` (sweeps).
    ``rt:seq``
        Counter producing zero-padded record ids, so equal scores still order
        by insertion.

    ``consume_latest`` uses WATCH/MULTI/EXEC: if another client touches the
    user's index or the record between the read and the delete, EXEC aborts and
    the whole check is re-run against the new state.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    SEQ_KEY = "rt:seq"
    ALL_KEY = "rt:all"

    # -------------------- helpers --------------------

    @staticmethod
    def _k(record_id: str) -> str:
        return f"rt:{record_id}"

    @staticmethod
    def _ku(user_id: str) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> float:
        # Naive datetimes are labelled UTC, not converted
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.timestamp()

    # -------------------- API ------------------------

    def insert(
        self,
        *,
        user_id: str,
        token_hash: str,
        client_ip: str,
        created_at: datetime,
        replace_existing: bool = False,
    ) -> None:
        score = self._to_ts(created_at)
        try:
            record_id = f"{int(self.r.incr(self.SEQ_KEY)):020d}"
            k_user = self._ku(user_id)
            with self.r.pipeline() as p:
                # Watch the user index so a concurrent insert/consume cannot
                # interleave with the replacement
                while True:
                    try:
                        p.watch(k_user)
                        previous = (
                            [_b(m) for m in p.zrange(k_user, 0, -1)] if replace_existing else []
                        )
                        p.multi()
                        for old_id in previous:
                            p.delete(self._k(old_id))
                            p.zrem(k_user, old_id)
                            p.zrem(self.ALL_KEY, old_id)
                        p.hset(
                            self._k(record_id),
                            mapping={
                                "user_id": user_id,
                                "token_hash": token_hash,
                                "client_ip": client_ip,
                                "created_at": repr(score),
                            },
                        )
                        p.zadd(k_user, {record_id: score})
                        p.zadd(self.ALL_KEY, {record_id: score})
                        p.execute()
                        return
                    except WatchError:
                        continue
        except RedisError as exc:
            raise StorageError("Failed to insert refresh token record") from exc

    def consume_latest(self, user_id: str, matches: HashMatcher) -> ConsumeResult:
        k_user = self._ku(user_id)
        try:
            with self.r.pipeline() as p:
                while True:
                    try:
                        p.watch(k_user)
                        newest = p.zrevrange(k_user, 0, 0)
                        if not newest:
                            p.unwatch()
                            return ConsumeResult(ConsumeOutcome.NOT_FOUND)

                        record_id = _b(newest[0])
                        k_rec = self._k(record_id)
                        p.watch(k_rec)
                        h = p.hgetall(k_rec)
                        if not h:
                            # Dangling index entry: drop it and look again
                            p.multi()
                            p.zrem(k_user, record_id)
                            p.zrem(self.ALL_KEY, record_id)
                            p.execute()
                            continue

                        view = RefreshTokenView(
                            user_id=_b(h.get(b"user_id"), user_id),
                            client_ip=_b(h.get(b"client_ip")),
                            created_at=datetime.fromtimestamp(
                                float(_b(h.get(b"created_at"), "0")), tz=UTC
                            ),
                        )
                        if not matches(_b(h.get(b"token_hash"))):
                            p.unwatch()
                            return ConsumeResult(ConsumeOutcome.MISMATCH, view)

                        p.multi()
                        p.delete(k_rec)
                        p.zrem(k_user, record_id)
                        p.zrem(self.ALL_KEY, record_id)
                        deleted, _, _ = p.execute()
                        if not deleted:
                            return ConsumeResult(ConsumeOutcome.RACE_LOST, view)
                        return ConsumeResult(ConsumeOutcome.CONSUMED, view)
                    except WatchError:
                        # Concurrent modification detected; re-run the check
                        continue
        except RedisError as exc:
            raise StorageError("Failed to consume refresh token record") from exc

    def count_for_user(self, user_id: str) -> int:
        try:
            return int(self.r.zcard(self._ku(user_id)))
        except RedisError as exc:
            raise StorageError("Failed to count refresh token records") from exc

    def purge_created_before(self, cutoff: datetime) -> int:
        try:
            stale = [
                _b(m)
                for m in self.r.zrangebyscore(self.ALL_KEY, "-inf", f"({self._to_ts(cutoff)!r}")
            ]
            if not stale:
                return 0
            owners = self.r.pipeline(transaction=False)
            for record_id in stale:
                owners.hget(self._k(record_id), "user_id")
            user_ids = owners.execute()

            pipe = self.r.pipeline(transaction=True)
            for record_id, uid in zip(stale, user_ids, strict=True):
                if uid is not None:
                    pipe.zrem(self._ku(_b(uid)), record_id)
                pipe.delete(self._k(record_id))
            pipe.zrem(self.ALL_KEY, *stale)
            pipe.execute()
            return len(stale)
        except RedisError as exc:
            raise StorageError("Failed to purge refresh token records") from exc
