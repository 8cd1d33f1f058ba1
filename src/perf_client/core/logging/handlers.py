"""
Log handlers for console output and the run report file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, List


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None
) -> logging.StreamHandler:
    """
    Create console (stdout) handler.

    Args:
        level: Log level (e.g. logging.INFO)
        formatter: Formatter instance
        filters: List of filters to add

    Returns:
        StreamHandler configured for console
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    if filters:
        for f in filters:
            handler.addFilter(f)

    return handler


def create_report_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None
) -> logging.FileHandler:
    """
    Create append-only handler for the run report file.

    The report is never rotated or truncated: several driver processes
    may append to the same file during one run.

    Args:
        file_path: Path to report file
        level: Log level
        formatter: Formatter instance
        filters: List of filters to add

    Returns:
        FileHandler in append mode

    Raises:
        OSError: If the file (or its directory) can not be created
    """
    report_dir = Path(file_path).parent
    report_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(
        filename=file_path,
        mode='a',
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)

    if filters:
        for f in filters:
            handler.addFilter(f)

    return handler
