"""
Log filters for adding context to log records.

Provides filters for call correlation ids, the program name and static
extra fields.
"""

import logging
import threading
from typing import Dict, Any, Optional


# Thread-local storage for correlation ID (one API call per worker thread)
_correlation_id_storage = threading.local()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set correlation ID for current thread.

    Example:
        >>> set_correlation_id("get-12345")
        >>> logger.warning("retrying")  # Will include correlation_id
    """
    _correlation_id_storage.value = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get correlation ID for current thread, or None if not set."""
    return getattr(_correlation_id_storage, 'value', None)


def clear_correlation_id() -> None:
    """Clear correlation ID for current thread."""
    if hasattr(_correlation_id_storage, 'value'):
        delattr(_correlation_id_storage, 'value')


class CorrelationIdFilter(logging.Filter):
    """
    Filter that adds correlation ID to log records.

    All retry lines of one logical call share the same id, which makes
    interleaved output of concurrent workers readable.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation ID to record if present."""
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id
        return True


class ProgramNameFilter(logging.Filter):
    """Filter that stamps the driver program name on every record."""

    def __init__(self, program_name: str):
        super().__init__()
        self.program_name = program_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.program = self.program_name
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Filter that adds extra static fields to all log records.

    Useful for adding run id, environment, driver instance, etc.

    Example:
        >>> filter = ExtraFieldsFilter({"run_id": "scale-42"})
        >>> handler.addFilter(filter)
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        """
        Initialize filter with extra fields.

        Args:
            extra_fields: Dictionary of fields to add to every log
        """
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        """Add extra fields to record."""
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
