# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import unittest

from src.config.logging_config import setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Clean up the daily_deals logger before each test."""
        root_logger = logging.getLogger("daily_deals")
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

    tearDown = setUp

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_file_handler_level_debug(self) -> None:
        """File handler should be set to DEBUG level."""
        setup_logging()
        root_logger = logging.getLogger("daily_deals")
        file_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_default_warning(self) -> None:
        """Console handler defaults to WARNING."""
        setup_logging()
        stream_handlers = self._console_handlers()
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_console_level_override(self) -> None:
        """Servers can lower the console threshold to INFO."""
        setup_logging(logging.INFO)
        self.assertEqual(self._console_handlers()[0].level, logging.INFO)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        root_logger = logging.getLogger("daily_deals")
        count_before = len(root_logger.handlers)
        setup_logging()
        self.assertEqual(count_before, len(root_logger.handlers))

    def test_child_loggers_propagate(self) -> None:
        """Module loggers are children of the configured root."""
        setup_logging()
        child = logging.getLogger("daily_deals.scraper")
        self.assertEqual(child.getEffectiveLevel(), logging.DEBUG)

    def test_log_file_inside_logs_dir(self) -> None:
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")

    @staticmethod
    def _console_handlers() -> list[logging.Handler]:
        return [
            h
            for h in logging.getLogger("daily_deals").handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]


if __name__ == "__main__":
    unittest.main()
