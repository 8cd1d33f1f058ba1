"""
Tests for log handlers.

Tests create_console_handler and create_report_handler.
"""

import logging
import sys

import pytest

from src.perf_client.core.logging.filters import ProgramNameFilter
from src.perf_client.core.logging.formatters import TextFormatter
from src.perf_client.core.logging.handlers import create_console_handler, create_report_handler


def test_console_handler_writes_to_stdout():
    """Console output goes to stdout."""
    handler = create_console_handler(logging.INFO, TextFormatter(), [ProgramNameFilter("p")])

    assert handler.stream is sys.stdout
    assert handler.level == logging.INFO
    assert len(handler.filters) == 1


def test_report_handler_creates_directory(tmp_path):
    """Missing report directories are created."""
    path = tmp_path / "a" / "b" / "summary.txt"
    handler = create_report_handler(str(path), logging.WARNING, TextFormatter())
    handler.close()

    assert path.parent.is_dir()


def test_report_handler_appends(tmp_path):
    """Report is appended to, never truncated."""
    path = tmp_path / "summary.txt"
    path.write_text("previous run\n", encoding="utf-8")

    handler = create_report_handler(str(path), logging.WARNING, TextFormatter())
    logger = logging.getLogger("perf_client.test_handlers.append")
    logger.propagate = False
    logger.addHandler(handler)
    try:
        logger.warning("retrying")
    finally:
        logger.removeHandler(handler)
        handler.close()

    content = path.read_text(encoding="utf-8")
    assert content.startswith("previous run\n")
    assert "retrying" in content


def test_report_handler_unwritable(tmp_path):
    """A path under a regular file can not be opened."""
    blocker = tmp_path / "file"
    blocker.write_text("x")

    with pytest.raises(OSError):
        create_report_handler(str(blocker / "summary.txt"), logging.WARNING, TextFormatter())
