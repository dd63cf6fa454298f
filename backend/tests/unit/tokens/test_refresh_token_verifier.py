"""Unit tests for RefreshTokenVerifier.verify_and_rotate."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from tests.helpers.utils import CLIENT_IP, USER_ID
from tokenauth.services._shared.errors import (
    HashingError,
    InvalidTokenError,
    NotFoundError,
)
from tokenauth.services._shared.ports import (
    ConsumeOutcome,
    ConsumeResult,
    InMemoryRefreshTokenStore,
)
from tokenauth.services.tokens import (
    IpChange,
    RefreshTokenGenerator,
    RefreshTokenStore,
    RefreshTokenVerifier,
)


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def records() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def store(records, hasher) -> RefreshTokenStore:
    return RefreshTokenStore(records=records, hasher=hasher)


@pytest.fixture()
def verifier(records, hasher) -> RefreshTokenVerifier:
    return RefreshTokenVerifier(records=records, hasher=hasher)


@pytest.fixture()
def token(store) -> str:
    raw = RefreshTokenGenerator().generate()
    store.persist(USER_ID, raw, CLIENT_IP)
    return raw


# -------------------------------- Tests ----------------------------------- #
def test_valid_token_is_consumed(verifier, store, token):
    assert verifier.verify_and_rotate(USER_ID, token, CLIENT_IP) is True
    assert store.count_for_user(USER_ID) == 0


def test_second_use_is_not_found(verifier, token):
    verifier.verify_and_rotate(USER_ID, token, CLIENT_IP)

    with pytest.raises(NotFoundError):
        verifier.verify_and_rotate(USER_ID, token, CLIENT_IP)


def test_unknown_user_is_not_found(verifier):
    with pytest.raises(NotFoundError):
        verifier.verify_and_rotate(USER_ID, "anything", CLIENT_IP)


def test_mismatch_is_invalid_and_keeps_the_record(verifier, store, token):
    with pytest.raises(InvalidTokenError):
        verifier.verify_and_rotate(USER_ID, RefreshTokenGenerator().generate(), CLIENT_IP)

    assert store.count_for_user(USER_ID) == 1
    # The genuine token still works afterwards
    assert verifier.verify_and_rotate(USER_ID, token, CLIENT_IP) is True


def test_only_the_newest_token_is_accepted(verifier, store, token):
    newer = RefreshTokenGenerator().generate()
    store.persist(USER_ID, newer, CLIENT_IP)

    with pytest.raises(InvalidTokenError):
        verifier.verify_and_rotate(USER_ID, token, CLIENT_IP)
    assert verifier.verify_and_rotate(USER_ID, newer, CLIENT_IP) is True


def test_differing_tail_beyond_72_bytes_still_matches(verifier, token):
    presented = token[:72] + "A" * (len(token) - 72)
    assert verifier.verify_and_rotate(USER_ID, presented, CLIENT_IP) is True


def test_ip_change_is_advisory(verifier, store, token, caplog):
    caplog.set_level(logging.WARNING)

    assert verifier.verify_and_rotate(USER_ID, token, "192.168.1.50") is True

    warnings = [r for r in caplog.records if getattr(r, "event", None) == "ip_changed"]
    assert len(warnings) == 1
    assert warnings[0].levelno == logging.WARNING
    assert warnings[0].previous_ip == CLIENT_IP
    assert warnings[0].client_ip == "192.168.1.50"
    assert store.count_for_user(USER_ID) == 0
    assert token not in caplog.text


def test_same_ip_logs_no_ip_change(verifier, token, caplog):
    caplog.set_level(logging.WARNING)

    verifier.verify_and_rotate(USER_ID, token, CLIENT_IP)

    assert not [r for r in caplog.records if getattr(r, "event", None) == "ip_changed"]


def test_ip_change_hook_receives_event_and_cannot_veto(records, hasher, store, token):
    seen: list[IpChange] = []

    def hook(change: IpChange) -> None:
        seen.append(change)
        raise RuntimeError("listener down")

    verifier = RefreshTokenVerifier(records=records, hasher=hasher, on_ip_change=hook)

    assert verifier.verify_and_rotate(USER_ID, token, "172.16.0.9") is True
    assert seen == [IpChange(USER_ID, CLIENT_IP, "172.16.0.9")]


def test_race_lost_is_reported_as_not_found(hasher):
    class LosingRecords(InMemoryRefreshTokenStore):
        def consume_latest(self, user_id, matches):
            return ConsumeResult(ConsumeOutcome.RACE_LOST)

    verifier = RefreshTokenVerifier(records=LosingRecords(), hasher=hasher)

    with pytest.raises(NotFoundError):
        verifier.verify_and_rotate(USER_ID, "token", CLIENT_IP)


def test_corrupt_stored_hash_is_a_hashing_error(records, hasher):
    records.insert(
        user_id=USER_ID,
        token_hash="garbage",
        client_ip=CLIENT_IP,
        created_at=RefreshTokenStore.now_utc(),
    )
    verifier = RefreshTokenVerifier(records=records, hasher=hasher)

    with pytest.raises(HashingError):
        verifier.verify_and_rotate(USER_ID, "token", CLIENT_IP)
    assert records.count_for_user(USER_ID) == 1


def test_concurrent_presentations_yield_exactly_one_success(verifier, store, token):
    workers = 8
    barrier = threading.Barrier(workers)

    def attempt() -> str:
        barrier.wait()
        try:
            verifier.verify_and_rotate(USER_ID, token, CLIENT_IP)
        except NotFoundError:
            return "not_found"
        return "ok"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = [f.result() for f in [pool.submit(attempt) for _ in range(workers)]]

    assert outcomes.count("ok") == 1
    assert outcomes.count("not_found") == workers - 1
    assert store.count_for_user(USER_ID) == 0
