"""Tests for the ``flask refresh-tokens`` command group."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from tests.factories.refresh_token import RefreshTokenRecordFactory
from tests.helpers.utils import USER_ID


def test_count_prints_records_for_user(cli_runner, session):
    RefreshTokenRecordFactory.create_batch(2, user_id=USER_ID)
    RefreshTokenRecordFactory()
    session.commit()

    result = cli_runner.invoke(args=["refresh-tokens", "count", USER_ID])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "2"


def test_sweep_uses_explicit_age(cli_runner, session):
    now = datetime.now(UTC)
    RefreshTokenRecordFactory(user_id=USER_ID, created_at=now - timedelta(days=10))
    RefreshTokenRecordFactory(user_id=USER_ID, created_at=now - timedelta(hours=1))
    session.commit()

    result = cli_runner.invoke(args=["refresh-tokens", "sweep", "--max-age-days", "7"])

    assert result.exit_code == 0, result.output
    assert "Removed 1 refresh token(s)" in result.output
    count = cli_runner.invoke(args=["refresh-tokens", "count", USER_ID])
    assert count.output.strip() == "1"


def test_sweep_defaults_to_configured_age(cli_runner, session, app):
    now = datetime.now(UTC)
    max_age = app.config["REFRESH_TOKEN_MAX_AGE_DAYS"]
    RefreshTokenRecordFactory(created_at=now - timedelta(days=max_age + 1))
    RefreshTokenRecordFactory(created_at=now - timedelta(days=max_age - 1))
    session.commit()

    result = cli_runner.invoke(args=["refresh-tokens", "sweep"])

    assert result.exit_code == 0, result.output
    assert f"Removed 1 refresh token(s) older than {max_age} day(s)." in result.output


def test_sweep_rejects_negative_age(cli_runner):
    result = cli_runner.invoke(args=["refresh-tokens", "sweep", "--max-age-days", "-1"])
    assert result.exit_code != 0
