"""Logging configuration for the application."""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path

from ..config import LOGS_DIR, settings

# Initialize logger
logger = logging.getLogger(__name__)


def _cleanup_old_logs(log_dir: Path, base_name: str, keep: int) -> int:
    """Delete rotated log files beyond the newest ``keep``.

    Returns:
        Number of files removed
    """
    rotated = sorted(
        (path for path in log_dir.glob(f"{base_name}.*") if path.is_file()),
        key=lambda path: path.stat().st_mtime,
        reverse=True,
    )

    removed = 0
    for stale in rotated[keep:]:
        try:
            stale.unlink()
            removed += 1
        except OSError as e:
            logger.warning(f"Could not remove rotated log {stale.name}: {e}")
    return removed


def _rotating_file_handler(level: str, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        LOGS_DIR / "app.log",
        when="midnight",
        interval=1,  # Create new file every day
        backupCount=settings.logging.backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging():
    """Set up logging configuration."""
    os.makedirs(LOGS_DIR, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all logs, handlers will filter

    # Remove existing handlers to prevent duplicates if logging was configured elsewhere
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.logging.log_level)
    console_handler.setFormatter(logging.Formatter(settings.logging.format))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(
        _rotating_file_handler(settings.logging.file_log_level, logging.Formatter(settings.logging.file_format))
    )

    removed = _cleanup_old_logs(LOGS_DIR, "app.log", settings.logging.backup_count)
    if removed:
        logger.info(f"Removed {removed} rotated log files")

    for logger_name, level in settings.logging.noisy_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


class EndpointLogFormatter(logging.Formatter):
    """Custom formatter for endpoint logs that handles structured data."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with the attached response summary."""
        record_copy = logging.makeLogRecord(record.__dict__)

        if hasattr(record_copy, "response"):
            response_info = record_copy.response  # type: ignore
            record_copy.msg = (
                f"{response_info['method']} {response_info['path']} -> {response_info['status_code']} "
                f"({response_info['duration_ms']:.2f}ms) client={json.dumps(response_info['client'])}"
            )

        return super().format(record_copy)


def setup_endpoint_logging():
    """Set up logging configuration for endpoint logging.

    Endpoint logs only go to the application log file, never to the console.
    """
    endpoint_logger = logging.getLogger("endpoint")
    endpoint_logger.handlers.clear()

    # Prevent propagation to root logger since we want separate handling
    endpoint_logger.propagate = False
    endpoint_logger.setLevel(settings.logging.file_log_level)

    os.makedirs(LOGS_DIR, exist_ok=True)
    endpoint_logger.addHandler(
        _rotating_file_handler(
            settings.logging.file_log_level,
            EndpointLogFormatter("%(asctime)s - endpoint - %(levelname)s - %(message)s"),
        )
    )
