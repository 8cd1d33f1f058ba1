"""
Logging configuration for perf client.

Provides configuration classes for console output and the run report file.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration for perf client logging.

    Console output goes to stdout (remote shells like pssh do not relay
    stderr). Retry and failure events are additionally appended to the
    report file, which is the audit trail of a long perf run.

    Attributes:
        level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (text, json)
        enable_console: Enable console (stdout) logging
        report_file: Path of the run report file (None = console only)
        verbose: Print per-call verbose messages (method, url, HTTP code)
        program_name: Name shown in every line (defaults to the driver binary)
        enable_correlation_id: Tag all lines of one API call with a call id
        extra_fields: Additional fields to add to every log entry

    Example:
        >>> config = LoggingConfig.create(
        ...     level="INFO",
        ...     report_file="/tmp/perf/summary.txt",
        ...     verbose=True
        ... )
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    report_file: Optional[str] = None
    verbose: bool = False
    program_name: Optional[str] = None
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        enable_console: bool = True,
        report_file: Optional[str] = None,
        verbose: bool = False,
        program_name: Optional[str] = None,
        enable_correlation_id: bool = True,
        extra_fields: Optional[Dict[str, Any]] = None
    ) -> "LoggingConfig":
        """
        Create LoggingConfig with string values.

        Args:
            level: Log level as string
            format: Log format as string (text, json)
            enable_console: Enable console logging
            report_file: Path of the report file
            verbose: Enable verbose messages
            program_name: Name shown in log lines
            enable_correlation_id: Add call ids
            extra_fields: Additional fields for logs

        Returns:
            LoggingConfig instance
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            enable_console=enable_console,
            report_file=report_file or None,
            verbose=verbose,
            program_name=program_name,
            enable_correlation_id=enable_correlation_id,
            extra_fields=extra_fields or {}
        )
