"""
Logging configuration for torexit.

Console logging on stderr, optional rotating log files, and a per-type
error counter fed by the list refresh and lookup paths.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any

PACKAGE_LOGGER = "torexit"
DEFAULT_LOG_PATH = Path.home() / ".torexit" / "logs" / "torexit.log"

CONSOLE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
FILE_FORMAT = (
    '%(asctime)s | %(levelname)-8s | %(name)-28s | %(module_name)-12s | '
    '%(function_name)-20s | %(lineno)-4d | %(message)s'
)
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class StructuredFormatter(logging.Formatter):
    """Pipe-separated formatter for log files."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'module_name'):
            record.module_name = record.module
        if not hasattr(record, 'function_name'):
            record.function_name = record.funcName
        return super().format(record)


def _resolve_log_path(log_file: str | None, log_dir: str | None) -> Path:
    if log_file:
        return Path(log_file)
    if log_dir:
        return Path(log_dir) / "torexit.log"
    return DEFAULT_LOG_PATH


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_dir: str | None = None,
    max_bytes: int = 5242880,  # 5MB
    backup_count: int = 3,
    enable_console: bool = True,
    enable_file: bool = False,
) -> logging.Logger:
    """
    Configure the torexit package logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path (takes precedence over log_dir)
        log_dir: Directory for torexit.log (defaults to ~/.torexit/logs)
        max_bytes: File size that triggers rotation
        backup_count: Rotated files to keep
        enable_console: Log to stderr
        enable_file: Log to a rotating file

    Returns:
        The package logger
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    # stderr keeps command output on stdout clean
    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console_handler)

    if enable_file:
        log_path = _resolve_log_path(log_file, log_dir)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredFormatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_logging(
    debug: bool = False,
    log_to_file: bool = False,
    log_file: str | None = None,
    level: str = "WARNING",
) -> logging.Logger:
    """Logging setup used by the CLI; debug overrides level."""
    return setup_logging(
        level="DEBUG" if debug else level,
        log_file=log_file,
        enable_console=True,
        enable_file=log_to_file or log_file is not None,
    )


class ErrorTracker:
    """Count logged errors by type."""

    def __init__(self):
        self.errors: dict[str, int] = {}
        self.logger = logging.getLogger(__name__)

    def log_error(
        self,
        error_type: str,
        message: str,
        exception: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Log an error and bump its counter.

        Args:
            error_type: Counter key (e.g. 'feed_fetch_error', 'list_read_error')
            message: Human readable message
            exception: Exception to attach a traceback for
            context: Extra key/value data appended to the message
        """
        self.errors[error_type] = self.errors.get(error_type, 0) + 1

        log_msg = f"{error_type}: {message}"
        if context:
            log_msg += f" | Context: {context}"
        self.logger.error(log_msg, exc_info=exception)

    def get_error_counts(self) -> dict[str, int]:
        return self.errors.copy()

    def reset_counts(self) -> None:
        self.errors.clear()


_error_tracker = ErrorTracker()


def track_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Track an error on the process-wide tracker."""
    _error_tracker.log_error(error_type, message, exception, context)


def get_error_stats() -> dict[str, int]:
    return _error_tracker.get_error_counts()


def reset_error_stats() -> None:
    _error_tracker.reset_counts()
