"""Unit tests for environment-driven configuration helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tokenauth.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("yes", True), ("On", True), ("0", False), ("nope", False)],
)
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("TOKENAUTH_FLAG", raw)
    assert env_bool("TOKENAUTH_FLAG") is expected


def test_env_bool_and_int_defaults(monkeypatch):
    monkeypatch.delenv("TOKENAUTH_FLAG", raising=False)
    monkeypatch.setenv("TOKENAUTH_NUM", " ")

    assert env_bool("TOKENAUTH_FLAG", True) is True
    assert env_int("TOKENAUTH_NUM", 7) == 7


@pytest.mark.parametrize(
    ("app_env", "expected"),
    [
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_selects_by_app_env(monkeypatch, app_env, expected):
    monkeypatch.setenv("APP_ENV", app_env)
    assert get_config() is expected


def test_token_defaults():
    assert TestingConfig.JWT_ALGORITHM == "HS512"
    assert TestingConfig.ACCESS_TOKEN_TTL == timedelta(minutes=15)
    assert TestingConfig.JWT_ACCESS_TOKEN_EXPIRES == TestingConfig.ACCESS_TOKEN_TTL
    assert TestingConfig.REFRESH_TOKEN_BACKEND == "sql"
