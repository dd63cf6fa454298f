"""Unit tests for RefreshTokenStore (persist / sweep) over the in-memory port."""

from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time

from tests.helpers.utils import CLIENT_IP, USER_ID
from tokenauth.services._shared.errors import HashingError, StorageError
from tokenauth.services._shared.ports import InMemoryRefreshTokenStore
from tokenauth.services.tokens import (
    RefreshTokenGenerator,
    RefreshTokenHasher,
    RefreshTokenStore,
)


@pytest.fixture()
def records() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def store(records, hasher) -> RefreshTokenStore:
    return RefreshTokenStore(records=records, hasher=hasher)


def test_persist_stores_hash_not_token(store, records, hasher):
    token = RefreshTokenGenerator().generate()

    store.persist(USER_ID, token, CLIENT_IP)

    assert store.count_for_user(USER_ID) == 1
    entry = records._by_user[USER_ID][0]
    assert entry.token_hash != token
    assert hasher.matches(token, entry.token_hash)
    assert entry.client_ip == CLIENT_IP


def test_persist_keeps_previous_records_by_default(store):
    store.persist(USER_ID, "first", CLIENT_IP)
    store.persist(USER_ID, "second", CLIENT_IP)

    assert store.count_for_user(USER_ID) == 2


def test_single_active_replaces_previous_records(records, hasher):
    store = RefreshTokenStore(records=records, hasher=hasher, single_active=True)

    store.persist(USER_ID, "first", CLIENT_IP)
    store.persist(USER_ID, "second", CLIENT_IP)

    assert store.count_for_user(USER_ID) == 1
    assert hasher.matches("second", records._by_user[USER_ID][0].token_hash)


def test_hashing_failure_stores_nothing(records):
    store = RefreshTokenStore(records=records, hasher=RefreshTokenHasher(rounds=1))

    with pytest.raises(HashingError):
        store.persist(USER_ID, "token", CLIENT_IP)
    assert store.count_for_user(USER_ID) == 0


def test_storage_failure_propagates(hasher):
    class FailingRecords(InMemoryRefreshTokenStore):
        def insert(self, **kwargs):
            raise StorageError("connection refused")

    store = RefreshTokenStore(records=FailingRecords(), hasher=hasher)

    with pytest.raises(StorageError):
        store.persist(USER_ID, "token", CLIENT_IP)


def test_sweep_removes_only_old_records(store):
    with freeze_time("2026-01-01 00:00:00") as frozen:
        store.persist(USER_ID, "old", CLIENT_IP)
        frozen.tick(timedelta(days=20))
        store.persist(USER_ID, "recent", CLIENT_IP)
        frozen.tick(timedelta(days=15))

        removed = store.sweep(timedelta(days=30))

    assert removed == 1
    assert store.count_for_user(USER_ID) == 1


def test_persist_logs_without_token_material(store, caplog):
    caplog.set_level("INFO")
    token = RefreshTokenGenerator().generate()

    store.persist(USER_ID, token, CLIENT_IP)

    stored = [r for r in caplog.records if getattr(r, "event", None) == "refresh_token.stored"]
    assert stored and stored[0].user_id == USER_ID
    assert token not in caplog.text
    assert token[:72] not in caplog.text
