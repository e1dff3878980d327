"""Structured logging helpers: null handler, trace binding, event payloads."""

from __future__ import annotations

import logging

import pytest

from lib_cached_config import bind_trace_id, get_logger
from lib_cached_config.observability import TRACE_ID, log_info, log_warning, make_event, trace_scope


def test_null_handler_present() -> None:
    logger = get_logger()
    assert logger.name == "lib_cached_config"
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="lib_cached_config")
    bind_trace_id("boot-123")
    try:
        log_info("source_loaded", source="engine", path=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert record.getMessage() == "source_loaded"
    assert getattr(record, "context") == {"trace_id": "boot-123", "source": "engine", "path": None}


def test_warning_level(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_cached_config")
    log_warning("parse_cache_read_failed", domain="app-ini-config")
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert getattr(record, "context")["domain"] == "app-ini-config"


def test_bind_trace_id_clears_context() -> None:
    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    event = make_event("engine", "/srv/app/config/engine.ini", {"cache_hit": False})
    assert event == {"source": "engine", "path": "/srv/app/config/engine.ini", "cache_hit": False}
    assert make_event("engine", None) == {"source": "engine", "path": None}


def test_trace_scope_restores_previous_identifier() -> None:
    bind_trace_id("outer")
    try:
        with trace_scope("inner") as bound:
            assert bound == "inner"
            assert TRACE_ID.get() == "inner"
        assert TRACE_ID.get() == "outer"
    finally:
        bind_trace_id(None)


def test_disabled_level_emits_nothing(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_cached_config")
    log_info("source_loaded", source="engine")
    assert caplog.records == []
