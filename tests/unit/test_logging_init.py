from __future__ import annotations

import logging
from io import StringIO
from unittest.mock import patch

from gold_repricer.logging.error_log import ErrorLogBuffer
from gold_repricer.logging.init import (
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    set_debug,
    setup_logging,
)
from gold_repricer.models.error_record import ErrorRecord


def test_setup_logging_creates_logger_with_labeled_formatter():
    """setup_logging creates the application logger with one stdout handler."""
    reset_logging()
    logger = setup_logging()

    assert logger.name == "gold_repricer"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1

    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert isinstance(handler.formatter, LabeledFormatter)


def test_logging_labeled_prefixes():
    """Log output carries INFO|WARN|ERROR|SUMMARY prefixes."""
    captured_output = StringIO()

    logger = logging.getLogger("test_gold_repricer")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logging.addLevelName(25, "SUMMARY")
    handler = logging.StreamHandler(captured_output)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(25, "Test summary message")

    lines = captured_output.getvalue().strip().split('\n')

    assert len(lines) == 4
    assert lines[0] == "INFO Test info message"
    assert lines[1] == "WARN Test warning message"
    assert lines[2] == "ERROR Test error message"
    assert lines[3] == "SUMMARY Test summary message"


def test_get_logger_returns_configured_logger():
    reset_logging()
    setup_logger = setup_logging()
    logger = get_logger()

    assert logger is setup_logger
    assert logger.name == "gold_repricer"


def test_setup_logging_idempotent():
    """Calling setup_logging multiple times is safe."""
    reset_logging()
    logger1 = setup_logging()
    logger2 = setup_logging()

    assert logger1 is logger2
    assert len(logger1.handlers) == 1


def test_module_loggers_reach_application_handler(capsys):
    """Service modules log through logging.getLogger(__name__)."""
    reset_logging()
    setup_logging()

    logging.getLogger("gold_repricer.services.repricer").warning("row 3 rejected")

    out = capsys.readouterr().out
    assert "WARN row 3 rejected" in out


def test_set_debug_lowers_logger_and_handlers(capsys):
    reset_logging()
    logger = setup_logging()
    set_debug(logger)

    logger.debug("debug mode enabled")
    assert "DEBUG debug mode enabled" in capsys.readouterr().out
    assert all(h.level == logging.DEBUG for h in logger.handlers)

    reset_logging()
    assert setup_logging().level == logging.INFO


def test_summary_level_logging():
    """Custom SUMMARY level (25) is registered and used."""
    reset_logging()
    logger = setup_logging()

    assert logging.getLevelName(25) == "SUMMARY"

    with patch.object(logger, '_log') as mock_log:
        logger.log(25, "rows=3 repriced=2 skipped=1 invalid=0 spot_price=6809180 elapsed_sec=0.5")
        mock_log.assert_called_once()


def test_log_summary_convenience_function(capsys):
    reset_logging()
    setup_logging()

    log_summary("rows=3 repriced=2 skipped=1 invalid=0 spot_price=6809180 elapsed_sec=0.5")

    lines = capsys.readouterr().out.strip().split('\n')
    assert lines[-1] == (
        "SUMMARY rows=3 repriced=2 skipped=1 invalid=0 spot_price=6809180 elapsed_sec=0.5"
    )


def test_error_log_buffer_integration():
    """Logger and ErrorLogBuffer coexist."""
    reset_logging()
    logger = setup_logging()
    error_buffer = ErrorLogBuffer()

    record = ErrorRecord.create("inventory.xlsx", "products", 4, "INVALID_INPUT", "weight: must not be negative")
    error_buffer.append(record)

    assert len(error_buffer) == 1
    logger.info("Processing inventory.xlsx")
