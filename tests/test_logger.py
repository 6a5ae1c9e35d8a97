"""
Unit tests for the centralized logger setup.
"""

import logging

import pytest

from src.utils.logger import LOG_FORMAT, get_logger, set_global_log_level


@pytest.fixture
def restore_levels():
    """Put package loggers back to INFO after each test."""
    root_level = logging.root.level
    yield
    set_global_log_level(logging.INFO)
    logging.root.setLevel(root_level)


class TestGetLogger:

    def test_single_console_handler(self):
        logger = get_logger("src.tests.single_handler")
        again = get_logger("src.tests.single_handler")
        assert logger is again
        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt == LOG_FORMAT

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "visor.log"
        logger = get_logger("src.tests.file_handler", log_file=str(log_file))
        logger.info("Parsed 2 frames")
        for handler in logger.handlers:
            handler.flush()
        assert log_file.exists()
        assert "Parsed 2 frames" in log_file.read_text(encoding="utf-8")


class TestGlobalLevel:

    def test_package_loggers_follow_global_level(self, restore_levels):
        parser_logger = get_logger("src.orca.parser")
        upload_logger = get_logger("src.server.upload")

        set_global_log_level(logging.DEBUG)
        assert parser_logger.level == logging.DEBUG
        assert upload_logger.level == logging.DEBUG
        assert parser_logger.isEnabledFor(logging.DEBUG)

    def test_foreign_loggers_untouched(self, restore_levels):
        foreign = logging.getLogger("matplotlib.font_manager.visor_test")
        foreign.setLevel(logging.WARNING)
        set_global_log_level(logging.DEBUG)
        assert foreign.level == logging.WARNING
