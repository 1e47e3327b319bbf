# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from howmuch.config.logging_config import setup_logging
from howmuch.config.settings import Settings


def _reset_howmuch_logger() -> None:
    root_logger = logging.getLogger("howmuch")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        _reset_howmuch_logger()
        self._tmp = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self._tmp.name) / "logs"
        level_patch = patch.object(Settings, "CONSOLE_LOG_LEVEL", "WARNING")
        level_patch.start()
        self.addCleanup(level_patch.stop)

    def tearDown(self) -> None:
        _reset_howmuch_logger()
        self._tmp.cleanup()

    def test_setup_creates_log_file(self) -> None:
        log_path = setup_logging(self.logs_dir)
        self.assertTrue(log_path.exists())
        self.assertEqual(log_path.parent, self.logs_dir)

    def test_log_file_naming_convention(self) -> None:
        log_path = setup_logging(self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_handler_levels(self) -> None:
        """File handler logs DEBUG, console only WARNING."""
        setup_logging(self.logs_dir)
        root_logger = logging.getLogger("howmuch")
        self.assertEqual(root_logger.level, logging.DEBUG)

        file_handlers = [
            h for h in root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        stream_handlers = [
            h for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(file_handlers[0].level, logging.DEBUG)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        setup_logging(self.logs_dir)
        count_before = len(logging.getLogger("howmuch").handlers)
        setup_logging(self.logs_dir)
        self.assertEqual(
            len(logging.getLogger("howmuch").handlers), count_before,
        )

    def test_http_client_loggers_capped(self) -> None:
        logging.getLogger("httpx").setLevel(logging.DEBUG)
        setup_logging(self.logs_dir)
        self.assertEqual(
            logging.getLogger("httpx").level, logging.WARNING,
        )

    def test_console_level_from_settings(self) -> None:
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "INFO"):
            setup_logging(self.logs_dir)
        console = [
            h for h in logging.getLogger("howmuch").handlers
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(console[0].level, logging.INFO)

    def test_unknown_console_level_falls_back(self) -> None:
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "CHATTY"):
            setup_logging(self.logs_dir)
        console = [
            h for h in logging.getLogger("howmuch").handlers
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(console[0].level, logging.WARNING)

    def test_child_loggers_reach_the_file(self) -> None:
        log_path = setup_logging(self.logs_dir)
        logging.getLogger("howmuch.pricing").debug("pool assembled")
        for handler in logging.getLogger("howmuch").handlers:
            handler.flush()
        self.assertIn("pool assembled", log_path.read_text("utf-8"))


if __name__ == "__main__":
    unittest.main()
