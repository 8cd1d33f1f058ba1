"""
Main logger for perf client.

Writes to stdout and appends retry/failure events to the run report file.
"""

import logging
import os
import sys
from typing import Optional, Any

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter, ProgramNameFilter
from .handlers import create_console_handler, create_report_handler
from ..exceptions import ExitCode, PerfRunAborted
from ...utils.sanitizer import mask_sensitive_data

# Retry and failure events are logged at WARNING and above
REPORT_LEVEL = logging.WARNING


class PerfLogger:
    """
    Main logger for perf client.

    Features:
    - stdout handler (level from config)
    - append-only report file handler (WARNING and above)
    - Correlation ID support
    - Masking of credentials in structured fields

    Example:
        >>> config = LoggingConfig.create(report_file="/tmp/perf/summary.txt")
        >>> logger = PerfLogger(config)
        >>> logger.warning("bad HTTP code 503, will retry", attempt=1)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "perf_client"):
        """
        Initialize logger.

        Args:
            config: Logging configuration (uses defaults if None)
            name: Logger name

        Raises:
            PerfRunAborted: If the report file can not be opened (FILE_IO_ERROR)
        """
        self.config = config or LoggingConfig()
        self.name = name
        self.program_name = self.config.program_name or os.path.basename(sys.argv[0] or "perf")
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

        # Remove existing handlers (if reinitializing)
        for handler in self._logger.handlers[:]:
            handler.close()
        self._logger.handlers.clear()

        filters = [ProgramNameFilter(self.program_name)]

        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())

        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            console_handler = create_console_handler(
                level=self._get_level(self.config.level),
                formatter=formatter,
                filters=filters
            )
            self._logger.addHandler(console_handler)

        if self.config.report_file:
            try:
                report_handler = create_report_handler(
                    file_path=self.config.report_file,
                    level=REPORT_LEVEL,
                    formatter=formatter,
                    filters=filters
                )
            except OSError as e:
                message = f"could not open {self.config.report_file}: {e}"
                print(f"Error: {message}")
                self.close()
                raise PerfRunAborted(ExitCode.FILE_IO_ERROR, message) from e
            self._logger.addHandler(report_handler)

    def _get_level(self, level: LogLevel) -> int:
        """Convert LogLevel enum to logging level int."""
        return getattr(logging, level.value)

    @property
    def report_file(self) -> Optional[str]:
        """Path of the run report file, if any."""
        return self.config.report_file

    # Proxy methods for convenient logging

    def verbose(self, message: str, **kwargs: Any) -> None:
        """
        Log a per-call message only when verbose output is enabled.

        Verbose lines go to stdout only, never to the report file.
        """
        if self.config.verbose:
            self._logger.info(message, extra=mask_sensitive_data(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._logger.debug(message, extra=mask_sensitive_data(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._logger.info(message, extra=mask_sensitive_data(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """
        Log warning message (also appended to the report file).

        Example:
            >>> logger.warning("error from HTTP request, will retry", attempt=2)
        """
        self._logger.warning(mask_sensitive_data(message), extra=mask_sensitive_data(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """
        Log error message (also appended to the report file).

        Example:
            >>> logger.error("bad HTTP code 500 from POST https://...")
        """
        self._logger.error(mask_sensitive_data(message), extra=mask_sensitive_data(kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log critical message (also appended to the report file)."""
        self._logger.critical(mask_sensitive_data(message), extra=mask_sensitive_data(kwargs))

    def close(self) -> None:
        """
        Flush and close all handlers.

        Idempotent - it can be safely called multiple times.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            except (OSError, ValueError):
                pass
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close logger on context exit."""
        self.close()
        return False
