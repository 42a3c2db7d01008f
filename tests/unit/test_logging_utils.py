#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_logging_utils.py
"""Unit tests for configure_logging and the debug timer."""

import logging

import pytest

from roundmark import render
from roundmark.logging_utils import configure_logging
from roundmark.utils.decorators import debug_timer


@pytest.fixture
def restore_root_logger():
    """Restore root handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_by_name(self, restore_root_logger):
        """Test string levels are resolved."""
        logger = configure_logging("debug")
        assert logger is restore_root_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        """Test unknown names use INFO."""
        assert configure_logging("chatty").level == logging.INFO

    def test_numeric_level(self, restore_root_logger):
        """Test numeric levels are used directly."""
        assert configure_logging(logging.WARNING).level == logging.WARNING

    def test_trace_format(self, restore_root_logger):
        """Test trace mode includes logger names."""
        logger = configure_logging("INFO", trace_mode=True)
        assert "%(name)s" in logger.handlers[0].formatter._fmt

    def test_log_file(self, restore_root_logger, tmp_path):
        """Test a file handler is added."""
        log_file = tmp_path / "roundmark.log"
        logger = configure_logging("INFO", log_file=str(log_file))
        assert len(logger.handlers) == 2
        logger.handlers[1].flush()
        assert "Logging to file" in log_file.read_text(encoding="utf-8")

    def test_unwritable_log_file(self, restore_root_logger, tmp_path):
        """Test a bad path keeps console logging only."""
        logger = configure_logging("INFO", log_file=str(tmp_path / "missing" / "x.log"))
        assert len(logger.handlers) == 1


@pytest.mark.unit
class TestDebugTimer:
    """Tests for debug_timer."""

    def test_logs_elapsed_time(self, caplog):
        """Test the timing message at DEBUG level."""
        logger = logging.getLogger("roundmark.test_timer")
        with caplog.at_level(logging.DEBUG, logger="roundmark.test_timer"):
            with debug_timer(logger, "Work"):
                pass
        assert any(record.message.startswith("Work completed in") for record in caplog.records)

    def test_silent_without_debug(self, caplog):
        """Test nothing is logged above DEBUG."""
        logger = logging.getLogger("roundmark.test_timer_quiet")
        with caplog.at_level(logging.INFO, logger="roundmark.test_timer_quiet"):
            with debug_timer(logger, "Work"):
                pass
        assert caplog.records == []

    def test_render_is_timed(self, caplog):
        """Test render logs its timing through the api logger."""
        with caplog.at_level(logging.DEBUG, logger="roundmark.api"):
            render("# Hi")
        assert any("Rendering markdown completed" in record.message for record in caplog.records)

    def test_error_in_block_propagates_untimed(self, caplog):
        """Test an exception inside the block reaches the caller and logs no timing."""
        logger = logging.getLogger("roundmark.test_timer_error")
        with caplog.at_level(logging.DEBUG, logger="roundmark.test_timer_error"):
            with pytest.raises(RuntimeError, match="boom"):
                with debug_timer(logger, "Work"):
                    raise RuntimeError("boom")
        assert not any("completed in" in record.message for record in caplog.records)
