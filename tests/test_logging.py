"""Tests for Clipformat structured logging."""

import logging

import structlog

from clipformat.logging import PACKAGE_LOGGER, bind_context, clear_context, configure_logging, get_logger


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_configure_with_defaults(self):
        """Should configure with the default level and text format."""
        configure_logging()
        logger = get_logger("test")
        logger.warning("test message")

    def test_configure_with_debug_level(self):
        """Should accept DEBUG level."""
        configure_logging(level="DEBUG")
        get_logger("test").debug("debug message")

    def test_configure_with_json_format(self):
        """Should accept json format."""
        configure_logging(level="INFO", format="json")
        get_logger("test").info("json format message")

    def test_configure_multiple_times(self):
        """Should handle multiple configuration calls."""
        configure_logging(level="INFO")
        configure_logging(level="ERROR", format="text")
        get_logger("test").error("after reconfigure")

    def test_level_applies_to_package_logger(self):
        """Module loggers under the package follow the configured level."""
        configure_logging(level="DEBUG")
        assert logging.getLogger("clipformat.patterns").getEffectiveLevel() == logging.DEBUG
        configure_logging(level="WARNING")
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING

    def test_unknown_level_falls_back(self):
        """Unknown levels fall back to WARNING instead of raising."""
        configure_logging(level="chatty")
        get_logger("test").warning("still works")


class TestGetLogger:
    """Tests for logger creation."""

    def test_get_logger_with_name(self):
        """Should create logger with specified name."""
        assert get_logger("clipformat.tests") is not None

    def test_loggers_are_callable(self):
        """Returned loggers expose the leveled methods recognizers use."""
        logger = get_logger("test")
        for level in ("debug", "info", "warning", "error"):
            assert callable(getattr(logger, level, None))


class TestContextBinding:
    """Tests for context variable binding."""

    def setup_method(self):
        """Clear context before each test."""
        clear_context()

    def teardown_method(self):
        """Clear context after each test."""
        clear_context()

    def test_bind_context(self):
        """Bound values appear in the context variables."""
        bind_context(action="process_seed", hotkey="cmd+shift+v")
        assert structlog.contextvars.get_contextvars() == {
            "action": "process_seed",
            "hotkey": "cmd+shift+v",
        }

    def test_clear_context(self):
        """clear_context removes every bound value."""
        bind_context(action="process")
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
