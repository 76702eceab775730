"""
Logging configuration for privlog.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import colorama

# Initialize colorama for cross-platform color support
colorama.init()

LOG_DIR_ENV = "PRIVLOG_LOG_DIR"


class ColorFormatter(logging.Formatter):
    """Custom formatter with colors"""

    # Color codes
    COLORS = {
        "INFO": colorama.Fore.GREEN,
        "WARNING": colorama.Fore.YELLOW,
        "ERROR": colorama.Fore.RED,
        "DEBUG": colorama.Fore.BLUE,
        "START": colorama.Fore.CYAN,
        "OK": colorama.Fore.GREEN,
    }

    def format(self, record):
        # Color a copy so other handlers see the plain record
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]
            record.levelname = f"{color}{record.levelname}{colorama.Style.RESET_ALL}"

        if hasattr(record, "color_prefix"):
            color = self.COLORS.get(record.color_prefix, "")
            record.msg = f"{color}{record.msg}{colorama.Style.RESET_ALL}"

        return super().format(record)


class PrivlogLogger:
    """Central logging class for privlog"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

        # Only set up handlers if they haven't been set up already
        if not self.logger.handlers:
            self.logger.setLevel(logging.INFO)

            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.DEBUG)
            console_handler.setFormatter(
                ColorFormatter(
                    "%(asctime)s  %(levelname)s  %(message)s", datefmt="%H:%M:%S"
                )
            )
            self.logger.addHandler(console_handler)

            # File output is opt-in; library code must not litter the cwd
            log_dir = os.getenv(LOG_DIR_ENV)
            if log_dir:
                log_path = Path(log_dir)
                log_path.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(
                    log_path / "privlog.log", encoding="utf-8"
                )
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(
                    logging.Formatter(
                        "%(asctime)s  %(name)s  %(levelname)s  %(message)s",
                        datefmt="%H:%M:%S",
                    )
                )
                self.logger.addHandler(file_handler)

            # Prevent logs from being passed to root logger
            self.logger.propagate = False

    @property
    def name(self) -> str:
        return self.logger.name

    def info(self, msg: str, color_prefix: Optional[str] = None) -> None:
        """Log info message with optional color prefix"""
        extra = {"color_prefix": color_prefix} if color_prefix else None
        self.logger.info(msg, extra=extra)

    def success(self, msg: str) -> None:
        """Log success message in green"""
        self.info(f"OK {msg}", color_prefix="OK")

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def set_level(self, level) -> None:
        """Set the level of the wrapped logger (name or number)."""
        if isinstance(level, str):
            level = getattr(logging, level.upper())
        self.logger.setLevel(level)


def get_logger(name: str) -> PrivlogLogger:
    """Get a configured logger instance."""
    return PrivlogLogger(name)
