"""
Logging system for the condition algebra.
Provides human-readable console logs and optional file output once
setup_logger() is called; until then the package logger only has a
NullHandler.

Library modules log through ``logging.getLogger(__name__)``; every such
logger sits under the ``strategy_conditions`` package logger configured here.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import get_config

PACKAGE_LOGGER_NAME = "strategy_conditions"


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        # Work on a copy so file handlers sharing the record stay plain
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class ConditionsLogger:
    """
    Central logger for the condition algebra.

    Wraps the package logger without touching its handlers; handlers are
    installed only by setup_logger().

    Features:
    - Console output with colors (after setup)
    - Optional dated file output (after setup)
    - Structured migration summaries
    """

    _instance: Optional['ConditionsLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if ConditionsLogger._initialized:
            return

        self.log_dir: Optional[Path] = None
        self.main_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

        ConditionsLogger._initialized = True

    def configure(self, log_level: str = "INFO", log_dir: Optional[str] = None) -> None:
        """Replace the package logger's handlers with console (and file) output."""
        self.log_dir = Path(log_dir) if log_dir else None
        logger = self.main_logger
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        # File handler (plain text, no colors)
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self.log_dir / f"conditions_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

    def migration(self, migrated: bool, warnings: int, created: int, **kwargs):
        """
        Log a timeframe migration run with structured format.

        Args:
            migrated: Whether the document changed
            warnings: Number of warnings collected
            created: Number of timeframe configs synthesized
            **kwargs: Additional fields (rewritten=3, mapped=2, ...)
        """
        parts = [
            "[MIGRATION]",
            f"migrated={migrated}",
            f"warnings={warnings}",
            f"created={created}",
        ]
        for key, value in kwargs.items():
            parts.append(f"{key}={value}")

        msg = " | ".join(parts)
        if warnings:
            self.main_logger.warning(msg)
        else:
            self.main_logger.info(msg)


# Silent until the host application or setup_logger() configures output
logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())

# Global logger instance
_logger: Optional[ConditionsLogger] = None


def get_logger() -> ConditionsLogger:
    """Get the global logger wrapper. Does not configure handlers or level."""
    global _logger
    if _logger is None:
        _logger = ConditionsLogger()
    return _logger


def setup_logger(log_level: Optional[str] = None, log_dir: Optional[str] = None) -> ConditionsLogger:
    """
    Install console (and optional file) handlers on the package logger.

    Arguments left as None come from configuration: CONDITIONS_LOG_LEVEL,
    and CONDITIONS_LOG_DIR when CONDITIONS_LOG_TO_FILE is on.
    """
    log_config = get_config().log
    if log_level is None:
        log_level = log_config.level
    if log_dir is None and log_config.log_to_file:
        log_dir = log_config.log_dir

    log = get_logger()
    log.configure(log_level, log_dir)
    return log
