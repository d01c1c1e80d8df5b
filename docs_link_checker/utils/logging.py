"""
Logging utilities with ISO 8601 timestamps and optional JSON output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED_ATTRS = {
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno', 'message', 'module',
    'msecs', 'msg', 'name', 'pathname', 'process', 'processName',
    'relativeCreated', 'stack_info', 'taskName', 'thread', 'threadName',
}


def _iso_time(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith('_')
    }


class StructuredFormatter(logging.Formatter):
    """
    Formatter that renders each record as a single JSON object.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_data = {
            'timestamp': _iso_time(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log_data.update(_extras(record))

        if record.exc_info:
            log_data['exc_info'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter: ``<iso time> | LEVEL | message``.

    Extra fields passed to the logger are appended as ``key=value`` pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        base_message = super().format(record)
        extras = _extras(record)
        if extras:
            pairs = " ".join(f"{key}={value}" for key, value in extras.items())
            base_message = f"{base_message} [{pairs}]"
        return f"{_iso_time(record)} | {record.levelname:<8} | {base_message}"


def setup_logger(
    name: str = "docs_link_checker",
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    structured: bool = False
) -> logging.Logger:
    """
    Set up and configure the package logger.

    Args:
        name: Name of the logger
        log_file: Path to the log file (optional)
        level: Log level
        structured: Emit one JSON object per record instead of plain text

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers if any
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter() if structured else ConsoleFormatter()

    # stdout is reserved for the JSON report
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_check(logger: logging.Logger, check) -> None:
    """
    Log a failing check with its location as structured fields.

    Args:
        logger: Logger instance
        check: The resolved check
    """
    logger.warning(
        f"{check.file}:{check.line} {check.url}: {check.message}",
        extra={
            'file': check.file,
            'line_number': check.line,
            'url': check.url,
            'check_message': check.message,
        }
    )
