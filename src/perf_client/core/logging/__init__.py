"""
Logging system for perf client.

Console output on stdout plus an append-only run report file.

Example:
    >>> from perf_client.core.logging import PerfLogger, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(
    ...     level="INFO",
    ...     report_file="/tmp/perf/summary.txt",
    ... )
    >>> logger = PerfLogger(config)
    >>> logger.error("bad HTTP code 500", method="POST")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import PerfLogger, REPORT_LEVEL
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    ProgramNameFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_report_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "PerfLogger",
    "REPORT_LEVEL",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "ProgramNameFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_report_handler",
]
