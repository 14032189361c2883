"""Tests for structlog setup."""

import io
import json
import logging

import pytest
import structlog

from src.timetable.logging import get_logger, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


def test_json_renderer_selected(restore_logging):
    setup_logging(json_output=True, log_level="warning")
    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
    assert logging.getLogger().level == logging.WARNING


def test_console_renderer_by_default(restore_logging):
    setup_logging()
    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)


def test_get_logger_returns_bindable_logger():
    assert hasattr(get_logger("timetable.test"), "bind")


def test_events_and_stdlib_records_share_one_stream(restore_logging):
    stream = io.StringIO()
    setup_logging(json_output=True, stream=stream)

    get_logger("timetable.test").info("routine_added", key="Monday_A1")
    logging.getLogger("pydantic_settings").warning("env file missing")

    first, second = (json.loads(line) for line in stream.getvalue().splitlines())
    assert first["event"] == "routine_added"
    assert first["key"] == "Monday_A1"
    assert second["event"] == "env file missing"
    assert second["level"] == "warning"


def test_unknown_level_falls_back_to_info(restore_logging):
    setup_logging(log_level="loud", stream=io.StringIO())
    assert logging.getLogger().level == logging.INFO
