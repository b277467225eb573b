"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from lumir_auth.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    configure_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG

    configure_logging("info")
    assert logging.getLogger().level == logging.INFO


def test_json_formatter_copies_location_tag_and_status() -> None:
    record = logging.LogRecord("lumir_auth.test", logging.WARNING, __file__, 1, "boom", (), None)
    record.at = "AuthService.sign_in"
    record.status = 400
    record.request_id = "req-1"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "boom"
    assert payload["level"] == "WARNING"
    assert payload["at"] == "AuthService.sign_in"
    assert payload["status"] == 400
    assert payload["request_id"] == "req-1"
    assert "elapsed_ms" not in payload


def test_request_id_header_is_echoed(client) -> None:
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


def test_request_id_is_generated_when_absent(client) -> None:
    resp = client.get("/health")
    assert resp.headers["X-Request-ID"]
