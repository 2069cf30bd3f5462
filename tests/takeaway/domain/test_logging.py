"""Tests for the logging helpers."""

import pytest
import structlog
from takeaway.utils.logging import bind_request_context, clear_request_context, get_log_level


@pytest.mark.parametrize(
    "environment,expected",
    [("production", "INFO"), ("staging", "INFO"), ("development", "DEBUG"), ("test", "WARNING"), ("qa", "INFO")],
)
def test_level_follows_environment(monkeypatch, environment, expected):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("ENVIRONMENT", environment)
    assert get_log_level() == expected


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"


def test_request_context_is_bound_and_cleared():
    bind_request_context("POST", "/orders", session_id="sess-log-001")
    assert structlog.contextvars.get_contextvars() == {
        "http_method": "POST",
        "path": "/orders",
        "session_id": "sess-log-001",
    }

    clear_request_context()
    assert structlog.contextvars.get_contextvars() == {}


def test_session_is_optional():
    bind_request_context("GET", "/health")
    try:
        assert "session_id" not in structlog.contextvars.get_contextvars()
    finally:
        clear_request_context()
