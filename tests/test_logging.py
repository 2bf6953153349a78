import io
import json
import logging
import sys

import pytest

from utils.logging import (
    get_conversation_id,
    get_logger,
    get_request_id,
    set_request_context,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    set_request_context(None, None)


def _capture(monkeypatch):
    buf = io.StringIO()
    monkeypatch.setattr(sys, "stdout", buf)
    setup_logging("INFO")
    return buf


def test_json_logging_and_context(monkeypatch):
    buf = _capture(monkeypatch)
    set_request_context(request_id="req-123", conversation_id="c42")
    log = get_logger(__name__)
    log.info("Session state changed", extra={"to_state": "Working"})
    data = json.loads(buf.getvalue().strip())
    assert data["level"] == "INFO"
    assert data["message"] == "Session state changed"
    assert data["request_id"] == "req-123"
    assert data["conversation_id"] == "c42"
    assert data["to_state"] == "Working"


def test_context_can_be_cleared():
    set_request_context(request_id="r", conversation_id="c")
    set_request_context(None, None)
    assert get_request_id() is None
    assert get_conversation_id() is None


def test_secrets_redacted(monkeypatch):
    buf = _capture(monkeypatch)
    log = get_logger(__name__)
    log.info("using token=abc123 and 123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsaw1")
    log.info("extra secret", extra={"api_key": "key", "bot_token": "t"})
    first, second = [json.loads(line) for line in buf.getvalue().strip().splitlines()]
    assert "token=***" in first["message"]
    assert "AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsaw1" not in first["message"]
    assert second["api_key"] == "***"
    assert second["bot_token"] == "***"


def test_none_values_dropped(monkeypatch):
    buf = _capture(monkeypatch)
    get_logger(__name__).info("no context")
    data = json.loads(buf.getvalue().strip())
    assert "request_id" not in data
    assert "conversation_id" not in data
