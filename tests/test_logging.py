"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from habitpulse.config import TestingConfig
from habitpulse.logging_config import ROOT_LOGGER_NAME, JSONFormatter, get_logger, setup_logging
from habitpulse.services import import_entries, notifications, reports, tracking, users


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _record(**overrides) -> logging.LogRecord:
    fields = dict(
        name="habitpulse.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    fields.update(overrides)
    record = logging.LogRecord(**fields)
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits the core fields as one JSON object."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "habitpulse.test"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Boom", exc_info=exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert log_data["exception"]["message"] == "Test error"
    assert "Traceback" in log_data["exception"]["traceback"]


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.habit_id = 7
    record.date = "2024-05-15"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"habit_id": 7, "date": "2024-05-15"}


def test_setup_logging(tmp_path):
    """Console plus rotating JSON file under DATA_DIR/logs."""
    config = TestingConfig(tmp_path)
    config.LOG_LEVEL = logging.INFO

    logger = setup_logging(config)

    assert logger.name == "habitpulse"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2

    log_file = tmp_path / "logs" / "habitpulse.log"
    assert log_file.exists()

    get_logger("tracking").info("Entry recorded", extra={"habit_id": 3})
    for handler in logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    recorded = [line for line in lines if line["message"] == "Entry recorded"]
    assert recorded
    assert recorded[0]["logger"] == "habitpulse.tracking"
    assert recorded[0]["extra"] == {"habit_id": 3}


def test_setup_logging_is_idempotent(tmp_path):
    config = TestingConfig(tmp_path)

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    assert get_logger("reports").name == "habitpulse.reports"
    package_logger = logging.getLogger("habitpulse")

    assert get_logger("reports").parent is package_logger


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, dev_mode):
    config = TestingConfig(tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        h
        for h in logger.handlers
        if isinstance(h, logging.StreamHandler)
        and not isinstance(h, logging.handlers.RotatingFileHandler)
    )
    assert console_handler.level == (logging.INFO if dev_mode else logging.WARNING)


def test_unknown_log_level_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITPULSE_LOG_LEVEL", "chatty")

    with pytest.raises(ValueError, match="HABITPULSE_LOG_LEVEL"):
        TestingConfig(tmp_path)


def test_service_loggers_are_package_children(tmp_path):
    setup_logging(TestingConfig(tmp_path))

    for module, area in [
        (import_entries, "import_entries"),
        (notifications, "notifications"),
        (reports, "reports"),
        (tracking, "tracking"),
        (users, "users"),
    ]:
        assert module.logger is get_logger(area)
