"""Tests for logger module."""

import logging
from dronelog.logger import logger, set_debug_mode, setup_logger


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_default_logger(self):
        """Test creating logger with default settings."""
        test_logger = setup_logger("dronelog_test_default")
        assert test_logger.level == logging.INFO
        assert len(test_logger.handlers) == 1

    def test_logger_with_debug(self):
        """Test creating logger with debug enabled."""
        test_logger = setup_logger("dronelog_test_debug", debug=True)
        assert test_logger.level == logging.DEBUG
        assert test_logger.handlers[0].level == logging.DEBUG

    def test_format(self):
        """Test the level-prefixed message format."""
        test_logger = setup_logger("dronelog_test_format")
        formatter = test_logger.handlers[0].formatter
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        assert formatter.format(record) == "WARNING: careful"

    def test_no_duplicate_handlers(self):
        """Test calling setup_logger twice doesn't add handlers."""
        setup_logger("dronelog_test_duplicate")
        again = setup_logger("dronelog_test_duplicate")
        assert len(again.handlers) == 1


class TestSetDebugMode:
    """Tests for set_debug_mode function."""

    def test_toggle(self):
        """Test enabling and disabling debug output."""
        try:
            set_debug_mode(True)
            assert logger.level == logging.DEBUG
            assert all(h.level == logging.DEBUG for h in logger.handlers)
        finally:
            set_debug_mode(False)
        assert logger.level == logging.INFO
