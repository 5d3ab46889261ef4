"""
Logging configuration for mssqlkit - readable, color-coded output.

KitLogger wraps a standard library logger with a colour console handler
and, when MSSQLKIT_LOG_DIR is set, a plain file handler. It exposes the
small surface the database layer needs (most importantly `error`), so any
object with an `error(message)` method can stand in for it.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

import colorama

# Initialize colorama for cross-platform color support
colorama.init()

LOG_DIR_ENV = "MSSQLKIT_LOG_DIR"
LOG_FILE_NAME = "mssqlkit.log"


class ColorFormatter(logging.Formatter):
    """Custom formatter with colors"""

    COLORS = {
        "INFO": colorama.Fore.BLUE,
        "WARNING": colorama.Fore.YELLOW,
        "ERROR": colorama.Fore.RED,
        "DEBUG": colorama.Fore.BLUE,
        "START": colorama.Fore.BLUE,
        "OK": colorama.Fore.GREEN,
    }

    def format(self, record):
        # Work on a copy so the file handler still sees plain text
        record = logging.makeLogRecord(record.__dict__)

        # Short component name (mssqlkit.connections.mssql -> mssql)
        component = record.name.rsplit(".", 1)[-1]
        white = colorama.Fore.WHITE
        reset = colorama.Style.RESET_ALL
        record.component = f"{white}[{component}]{reset} "

        if record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]
            record.levelname = f"{color}{record.levelname}{reset}"

        # Add color to message for START and OK prefixes
        if hasattr(record, "color_prefix"):
            color = self.COLORS.get(record.color_prefix, "")
            record.msg = f"{color}{record.msg}{reset}"

        return super().format(record)


class KitLogger:
    """
    Central logging class for mssqlkit.

    Console output is coloured; file output (opt-in through the
    MSSQLKIT_LOG_DIR environment variable) is plain text so it stays
    greppable.
    """

    FORMAT = "%(asctime)s  %(component)s%(message)s"
    FILE_FORMAT = "%(asctime)s  %(levelname)s  %(name)s  %(message)s"
    DATE_FORMAT = "%H:%M:%S"

    def __init__(self, name: str, log_dir: Optional[Union[str, Path]] = None):
        self.logger = logging.getLogger(name)

        # Only set up handlers if they haven't been set up already
        if not self.logger.handlers:
            self.logger.setLevel(logging.INFO)

            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.DEBUG)
            console_handler.setFormatter(
                ColorFormatter(self.FORMAT, datefmt=self.DATE_FORMAT)
            )
            self.logger.addHandler(console_handler)

            log_dir = log_dir or os.environ.get(LOG_DIR_ENV)
            if log_dir:
                log_path = Path(log_dir)
                log_path.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(
                    log_path / LOG_FILE_NAME, encoding="utf-8"
                )
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(
                    logging.Formatter(self.FILE_FORMAT, datefmt=self.DATE_FORMAT)
                )
                self.logger.addHandler(file_handler)

            # Prevent logs from being passed to root logger
            self.logger.propagate = False

    def set_level(self, level: Union[int, str]) -> None:
        """Change the level of the underlying logger."""
        self.logger.setLevel(level)

    def info(self, msg: str, color_prefix: Optional[str] = None) -> None:
        """Log info message with optional color prefix"""
        extra = {"color_prefix": color_prefix} if color_prefix else None
        self.logger.info(msg, extra=extra)

    def start(self, msg: str) -> None:
        self.info(f"START {msg}", color_prefix="START")

    def success(self, msg: str) -> None:
        self.info(f"OK {msg}", color_prefix="OK")

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)


def get_logger(name: str) -> KitLogger:
    """Get a configured logger instance."""
    return KitLogger(name)
