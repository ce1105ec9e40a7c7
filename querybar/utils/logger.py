# querybar/utils/logger.py - Logging setup
"""
Logging setup for querybar: colored console output on stderr, plus an
optional plain-text log file.
"""

import logging
import sys
from typing import Optional
from colorama import Fore, Style


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColoredFormatter(logging.Formatter):
    """
    Formatter that wraps the level name in a colorama color.
    """

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        # Color a copy so other handlers still see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{Style.RESET_ALL}"
        return super().format(colored)


def _attach(root: logging.Logger, handler: logging.Handler,
            formatter: logging.Formatter, level: int):
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """
    Replace the root logger's handlers with querybar's.

    Args:
        level: Level name ('DEBUG', 'INFO', 'WARNING', 'ERROR'); unknown names mean INFO
        log_file: Also log, uncolored, to this file
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers = []

    # stderr keeps rendered reports on stdout clean
    _attach(root, logging.StreamHandler(sys.stderr),
            ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT), numeric_level)

    if log_file:
        _attach(root, logging.FileHandler(log_file),
                logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT), numeric_level)

    logging.debug(f"Logging initialized at {logging.getLevelName(numeric_level)} level")


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, usually get_logger(__name__)"""
    return logging.getLogger(name)
