"""
virion/logger.py
Central logger for Virion

Usage:
    from virion.logger import logger

    logger.debug("Scene built", component="ORGANISM")
    logger.info("Generated 100 trait records", component="BATCH")
    logger.warning("Token ID clamped", component="VIEWER", details="spin box range")

Plain stdlib logging, no GUI imports: trait derivation and the CLI stay
headless. Front ends attach their own handlers with add_handler().
"""

import logging
import sys
from enum import IntEnum
from typing import Optional

LOGGER_NAME = "virion"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python logging."""
    DEBUG = logging.DEBUG      # 10
    INFO = logging.INFO        # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR      # 40


def format_message(msg: str, component: Optional[str] = None,
                   details: Optional[str] = None) -> str:
    """'[COMPONENT] message - details'"""
    parts = []
    if component:
        parts.append(f"[{component}]")
    parts.append(msg)
    if details:
        parts.append(f"- {details}")
    return " ".join(parts)


class VirionLogger:
    """
    Component-tagged wrapper over logging.getLogger("virion").

    The console handler writes to stderr (stdout carries CLI output) at
    WARNING unless raised with set_level(). Extra handlers (log file,
    viewer status line) are attached and detached at runtime.
    """

    def __init__(self):
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)  # handlers do the filtering
        self._logger.propagate = False

        self._console_handler = logging.StreamHandler(sys.stderr)
        self._console_handler.setLevel(logging.WARNING)
        self._console_handler.setFormatter(
            logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT)
        )
        self._logger.addHandler(self._console_handler)

        self._file_handler: Optional[logging.FileHandler] = None

    @property
    def level(self) -> int:
        """Current console level."""
        return self._console_handler.level

    def set_level(self, level: LogLevel):
        self._console_handler.setLevel(level)

    def add_handler(self, handler: logging.Handler):
        self._logger.addHandler(handler)

    def remove_handler(self, handler: logging.Handler):
        self._logger.removeHandler(handler)

    def enable_file_logging(self, filepath: str):
        """Mirror every record (DEBUG and up) to a file."""
        self.disable_file_logging()
        self._file_handler = logging.FileHandler(filepath)
        self._file_handler.setLevel(logging.DEBUG)
        self._file_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        self.add_handler(self._file_handler)

    def disable_file_logging(self):
        if self._file_handler:
            self.remove_handler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def debug(self, msg: str, component: Optional[str] = None,
              details: Optional[str] = None):
        self._logger.debug(format_message(msg, component, details))

    def info(self, msg: str, component: Optional[str] = None,
             details: Optional[str] = None):
        self._logger.info(format_message(msg, component, details))

    def warning(self, msg: str, component: Optional[str] = None,
                details: Optional[str] = None):
        self._logger.warning(format_message(msg, component, details))

    def traits(self, token_id: int, msg: str, details: Optional[str] = None):
        """Trait-derivation trace, DEBUG under component TRAITS."""
        self.debug(f"Token {token_id}: {msg}", component="TRAITS", details=details)


logger = VirionLogger()


def set_log_level(level: LogLevel):
    """Set the console log level."""
    logger.set_level(level)
