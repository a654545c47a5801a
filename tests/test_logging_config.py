from __future__ import annotations

import json
import logging

import pytest

from receiptgate.logging_config import JsonFormatter, _sanitize_obj, _sanitize_str, setup_logging
from receiptgate.utils.correlation import clear_correlation_id, set_correlation_id


def test_sanitize_authorization_bearer_masked() -> None:
    out = _sanitize_str("Authorization: Bearer ABCDEFGHIJKLMNOP")
    assert "Bearer [REDACTED]" in out


def test_sanitize_webhook_url_token_masked() -> None:
    out = _sanitize_str("set webhook https://receipts.example.com/bot123456789:AAH-secret_part/")
    assert "/bot[REDACTED]" in out
    assert "AAH-secret_part" not in out


def test_sanitize_bare_bot_token_masked() -> None:
    token = "123456789:" + "A" * 35
    assert _sanitize_str(f"Unauthorized for {token}") == "Unauthorized for [REDACTED]"


def test_sanitize_download_url_token_masked() -> None:
    out = _sanitize_str("GET /download/abc-123/0f1e2d3c-secret HTTP/1.1")
    assert "/download/abc-123/[REDACTED]" in out
    assert "0f1e2d3c-secret" not in out


def test_sanitize_nested_objects() -> None:
    obj = {
        "token": "0f1e2d3c-4b5a-6978-8877-665544332211",
        "autokey": "s3cret",
        "nested": [{"path": "/download/abc/zzz-secret"}],
        "id": "abc",
    }
    out = _sanitize_obj(obj)
    assert out["token"] == "***2211"
    assert out["autokey"] == "***cret"
    assert out["nested"][0]["path"] == "/download/abc/[REDACTED]"
    assert out["id"] == "abc"


def test_json_formatter_includes_correlation_and_extra() -> None:
    record = logging.LogRecord("receiptgate.test", logging.INFO, __file__, 1, "submission created", None, None)
    record.extra = {"id": "abc", "token": "abcdefgh"}  # type: ignore[attr-defined]
    set_correlation_id("req-1")
    try:
        payload = json.loads(JsonFormatter().format(record))
    finally:
        clear_correlation_id()
    assert payload["message"] == "submission created"
    assert payload["correlation_id"] == "req-1"
    assert payload["id"] == "abc"
    assert payload["token"] == "***efgh"


def test_access_log_level_warning_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("LOG_TO_FILE", "0")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    setup_logging()
    assert logging.getLogger("aiohttp.access").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
