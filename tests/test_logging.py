"""
Tests for logging configuration.
"""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from simple_jwt.errors import InvalidTokenError
from simple_jwt.logging import (
    add_component_context,
    add_trace_context,
    configure_logging,
    loggable_id,
    redact_tokens,
)


def test_component_context():
    event = add_component_context(None, "info", {"logger": "simple_jwt.manager", "event": "x"})

    assert event["component"] == "manager"


def test_component_context_without_dotted_name():
    event = add_component_context(None, "info", {"logger": "root", "event": "x"})

    assert "component" not in event


def test_trace_context_without_active_span():
    event = add_trace_context(None, "info", {"event": "x"})

    assert "trace_id" not in event
    assert "span_id" not in event


def test_loggable_id_masks_wire_tokens_only():
    text = "eyJ0eXAiOiJKV1QifQ.eyJzdWIiOiI0MiJ9.c2ln"

    masked = loggable_id(text)

    assert masked.startswith("sha256:")
    assert len(masked) == len("sha256:") + 16
    assert loggable_id(text) == masked
    assert loggable_id("0123456789abcdef0123456789abcdef") == "0123456789abcdef0123456789abcdef"
    assert loggable_id("auth.example") == "auth.example"
    assert loggable_id(None) is None


def test_redact_tokens():
    text = "eyJ0eXAiOiJKV1QifQ.eyJzdWIiOiI0MiJ9.c2ln"
    event = redact_tokens(None, "info", {"event": "Token revoked", "jti": text, "sub": "42"})

    assert event == {"event": "Token revoked", "jti": loggable_id(text), "sub": "42"}


def test_configure_logging():
    configure_logging("debug")
    try:
        config = structlog.get_config()

        assert add_trace_context in config["processors"]
        assert config["processors"].index(redact_tokens) == len(config["processors"]) - 2
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert config["logger_factory"].__class__ is structlog.stdlib.LoggerFactory
        assert logging.getLogger("simple_jwt").level == logging.DEBUG
    finally:
        structlog.reset_defaults()
        logging.getLogger("simple_jwt").setLevel(logging.NOTSET)


def test_manager_log_events(manager):
    with capture_logs() as logs:
        token = manager.issue({"sub": "42"})
        manager.add_revocation(token.jti)
        with pytest.raises(InvalidTokenError):
            manager.parse("not-a-token")

    assert {"event": "Token issued", "jti": token.jti, "sub": "42", "log_level": "debug"} in logs
    assert {"event": "Token revoked", "jti": token.jti, "log_level": "info"} in logs
    assert {"event": "Token rejected", "reason": "INVALID_TOKEN", "jti": None, "log_level": "warning"} in logs
