"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from tokenauth.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    original = logging.getLogger().level
    try:
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
    finally:
        logging.getLogger().setLevel(original)


def test_json_formatter_keeps_structured_extras() -> None:
    record = logging.LogRecord(
        name="tokenauth.services.tokens.verifier",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="refresh_token.ip_changed",
        args=(),
        exc_info=None,
    )
    record.event = "ip_changed"
    record.user_id = "u-1"
    record.previous_ip = "10.0.0.1"
    record.client_ip = "10.0.0.2"
    record.refresh_token = "must-not-appear"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["event"] == "ip_changed"
    assert payload["previous_ip"] == "10.0.0.1"
    assert payload["client_ip"] == "10.0.0.2"
    assert "refresh_token" not in payload


def test_request_id_is_echoed(client) -> None:
    response = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
