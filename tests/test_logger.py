# tests/test_logger.py - Tests for logging setup
"""
Unit tests for setup_logging and ColoredFormatter.
"""

import logging

import pytest
from colorama import Fore
from querybar.utils.logger import ColoredFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestLogging:
    """Test cases for logging setup"""

    def test_colored_formatter_leaves_record_plain(self):
        record = logging.LogRecord('querybar', logging.WARNING, __file__, 1, "cap reached", None, None)

        text = ColoredFormatter('%(levelname)s %(message)s').format(record)

        assert text.startswith(Fore.YELLOW + 'WARNING')
        assert record.levelname == 'WARNING'

    def test_setup_logging_levels(self):
        setup_logging('debug')
        assert logging.getLogger().level == logging.DEBUG

        setup_logging('nonsense')
        assert logging.getLogger().level == logging.INFO

    def test_log_file_is_uncolored(self, tmp_path):
        log_file = tmp_path / 'querybar.log'
        setup_logging('INFO', str(log_file))

        logging.getLogger('querybar.test').warning("dropping query")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text()
        assert "querybar.test - WARNING - dropping query" in content
        assert '\x1b[' not in content
