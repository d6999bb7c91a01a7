"""Tests for structured logging configuration."""

import logging

import pytest
import structlog

from hookgate.logging_config import bind_request_context, clear_request_context, configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_configure_logging_json(restore_logging):
    configure_logging(log_level="debug", json_output=True)

    assert len(restore_logging.handlers) == 1
    formatter = restore_logging.handlers[0].formatter
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
    assert isinstance(formatter.processors[-1], structlog.processors.JSONRenderer)
    assert restore_logging.level == logging.DEBUG


def test_configure_logging_unknown_level_defaults_to_info(restore_logging):
    configure_logging(log_level="chatty")
    assert restore_logging.level == logging.INFO


def test_request_context_binding():
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id="trc_1")

    bind_request_context("d-1", "push")
    assert structlog.contextvars.get_contextvars() == {
        "trace_id": "trc_1",
        "delivery_id": "d-1",
        "event_type": "push",
    }

    clear_request_context()
    assert structlog.contextvars.get_contextvars() == {"trace_id": "trc_1"}
    structlog.contextvars.clear_contextvars()
