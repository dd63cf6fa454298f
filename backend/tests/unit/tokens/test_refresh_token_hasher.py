"""Unit tests for bcrypt hashing of refresh tokens."""

from __future__ import annotations

import pytest

from tokenauth.services._shared.errors import HashingError
from tokenauth.services.tokens import (
    BCRYPT_MAX_INPUT_BYTES,
    RefreshTokenGenerator,
    RefreshTokenHasher,
    truncate_token,
)


def test_truncate_keeps_first_72_bytes():
    token = "a" * 72 + "b" * 16

    assert truncate_token(token) == b"a" * BCRYPT_MAX_INPUT_BYTES
    assert truncate_token("short") == b"short"


def test_hash_is_salted_bcrypt(hasher):
    token = RefreshTokenGenerator().generate()

    first = hasher.hash(token)
    second = hasher.hash(token)

    assert first.startswith("$2")
    assert first != second
    assert token not in first


def test_matches_round_trip(hasher):
    token = RefreshTokenGenerator().generate()
    stored = hasher.hash(token)

    assert hasher.matches(token, stored) is True
    assert hasher.matches(RefreshTokenGenerator().generate(), stored) is False


def test_only_the_first_72_bytes_are_significant(hasher):
    token = RefreshTokenGenerator().generate()
    stored = hasher.hash(token)

    tampered_tail = token[:72] + "X" * (len(token) - 72)
    tampered_head = "X" + token[1:]

    assert hasher.matches(tampered_tail, stored) is True
    assert hasher.matches(tampered_head, stored) is False


def test_invalid_cost_raises_hashing_error():
    with pytest.raises(HashingError):
        RefreshTokenHasher(rounds=2).hash("token")


def test_corrupt_stored_hash_raises_hashing_error(hasher):
    with pytest.raises(HashingError) as excinfo:
        hasher.matches("token", "not-a-bcrypt-hash")
    assert "not-a-bcrypt-hash" not in str(excinfo.value)
