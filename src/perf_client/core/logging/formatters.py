"""
Log formatters for console output and the run report file.

Provides text and JSON formatters.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict


# Standard LogRecord attributes that are not "extra" fields
_SKIP_FIELDS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'asctime', 'taskName', 'program',
}

REPORT_DATEFMT = '%Y.%m.%d %H:%M:%S'


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _SKIP_FIELDS and not key.startswith('_')
    }


class TextFormatter(logging.Formatter):
    """
    Plain text formatter used for stdout and the report file.

    Format: [timestamp] [level] program: message [extra_fields]

    Example output:
        [2024.01.15 10:30:45] [WARNING] exchange-perf: bad HTTP code 503 from GET https://... attempt=1
    """

    def __init__(self):
        """Initialize text formatter."""
        super().__init__(
            fmt='[%(asctime)s] [%(levelname)s] %(program)s: %(message)s',
            datefmt=REPORT_DATEFMT
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as text."""
        if not hasattr(record, 'program'):
            record.program = record.name

        base_msg = super().format(record)

        extra_fields = [f"{key}={value}" for key, value in _extra_fields(record).items()]
        if extra_fields:
            base_msg += " " + " ".join(extra_fields)

        return base_msg


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per line with timestamp, level, program,
    message and any extra fields. Useful when the report file is
    post-processed after a run.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "program": getattr(record, 'program', record.name),
            "message": record.getMessage(),
        }
        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Get formatter by type.

    Args:
        format_type: Format type (text, json)

    Returns:
        Formatter instance

    Raises:
        ValueError: If format_type is unknown
    """
    formatters = {
        "json": JSONFormatter,
        "text": TextFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(
            f"Unknown format type: {format_type}. "
            f"Available: {', '.join(formatters.keys())}"
        )

    return formatter_class()
