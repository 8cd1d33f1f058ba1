"""
Pytest configuration and fixtures for perf-client-core tests.
"""

import pytest
import responses as responses_lib

from src.perf_client.core import retry_engine
from src.perf_client.core.config import ClientConfig, RetryConfig
from src.perf_client.core.executor import RequestExecutor
from src.perf_client.core.logging.config import LoggingConfig
from src.perf_client.core.logging.filters import clear_correlation_id
from src.perf_client.core.session import PerfSession


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://exchange.example.com/v1"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def sleeps(monkeypatch):
    """Record retry pauses instead of sleeping."""
    calls = []
    monkeypatch.setattr(retry_engine.time, "sleep", lambda seconds: calls.append(seconds))
    return calls


@pytest.fixture
def report_file(tmp_path):
    """Path of the run report file inside a temporary directory."""
    return tmp_path / "perf" / "summary.txt"


@pytest.fixture
def logging_config(report_file):
    """
    LoggingConfig with the report file enabled and console output off.

    Use read_report() in tests to check what a run left in the report.
    """
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=False,
        report_file=str(report_file),
        program_name="perf-test",
    )


@pytest.fixture
def client_config(base_url, logging_config):
    """ClientConfig with 3 retries and 2s sleeps (sleeps are recorded, not slept)."""
    return ClientConfig(
        base_url=base_url,
        retry=RetryConfig(max_retries=3, sleep_seconds=2),
        logging=logging_config,
    )


@pytest.fixture
def perf_session(client_config, sleeps):
    """PerfSession over client_config."""
    session = PerfSession(client_config)
    yield session
    session.close()
    clear_correlation_id()


@pytest.fixture
def executor(perf_session):
    """RequestExecutor bound to perf_session."""
    return RequestExecutor(perf_session)


@pytest.fixture
def read_report(report_file):
    """Return the report file contents ('' if it was never written)."""
    def _read() -> str:
        if not report_file.exists():
            return ""
        return report_file.read_text(encoding="utf-8")
    return _read
