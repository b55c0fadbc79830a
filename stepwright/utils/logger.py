"""Logging setup shared by every stepwright module"""
import logging
import os
from typing import Optional, Union

from colorama import Fore, Style, init as colorama_init

ROOT_LOGGER_NAME = 'stepwright'
DEFAULT_LEVEL = os.environ.get('STEPWRIGHT_LOG_LEVEL', 'INFO')

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColorFormatter(logging.Formatter):
    """Colors the level name for console output"""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno, '')
        original = record.levelname
        record.levelname = f"{color}{original}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(getattr(h, '_stepwright', False) for h in root.handlers):
        colorama_init()
        handler = logging.StreamHandler()
        handler.setFormatter(ColorFormatter(
            '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        handler._stepwright = True
        root.addHandler(handler)
        root.setLevel(_to_level(DEFAULT_LEVEL))
    return root


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger under the stepwright package logger"""
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: Optional[Union[str, int]]) -> None:
    """Change the level of every stepwright logger at once"""
    if level is None:
        return
    _configure_root().setLevel(_to_level(level))
