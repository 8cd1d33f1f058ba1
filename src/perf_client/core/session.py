# src/perf_client/core/session.py
"""
Explicit per-run state shared by all API calls of a perf driver.

Holds the pooled client, the total-operations counter, the run logger
and the retry tuning. Create it once and pass it to every executor.
"""
import threading
from typing import Any, Dict, Optional

import requests

from .client_factory import HTTPClientFactory
from .config import ClientConfig
from .decoder import ResponseDecoder
from .error_handler import ErrorHandler
from .logging import PerfLogger
from .retry_engine import RetryClassifier


class PerfSession:
    """
    Run-wide context for perf drivers.

    Thread-safe: worker threads share one session; the operation counter
    is lock-protected and the client is pooled.

    Example:
        >>> with PerfSession(ClientConfig(base_url="https://exchange/v1")) as session:
        ...     executor = RequestExecutor(session)
        ...     executor.get("admin/version")
        ...     print(session.total_ops)
    """

    def __init__(self, config: ClientConfig, logger: Optional[PerfLogger] = None):
        """
        Args:
            config: Client configuration (immutable)
            logger: Logger to use; built from config.logging when None

        Raises:
            PerfRunAborted: If the report file can not be opened
        """
        self._config = config
        self._owns_logger = logger is None
        self._logger = logger or PerfLogger(config.logging, name=f"perf_client.run.{id(self):x}")
        self._errors = ErrorHandler(self._logger)
        self._factory = HTTPClientFactory(config, self._errors)
        self._classifier = RetryClassifier(config.retry, self._logger)
        self._decoder = ResponseDecoder(self._errors)

        self._total_ops = 0
        self._ops_lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides: Any) -> 'PerfSession':
        """
        Build a session from environment variables (see env_config).

        Example:
            >>> session = PerfSession.from_env()
        """
        from .env_config import load_from_env

        return cls(load_from_env(env_file=env_file, **overrides))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ==================== Счётчики ====================

    def count_operation(self) -> int:
        """Register one HTTP attempt; returns the new total."""
        with self._ops_lock:
            self._total_ops += 1
            return self._total_ops

    @property
    def total_ops(self) -> int:
        """Total number of HTTP attempts made through this session."""
        with self._ops_lock:
            return self._total_ops

    def summary(self) -> Dict[str, Any]:
        """
        End-of-run numbers for the driver's final report.

        Returns:
            {"total_ops": int, "clients_created": int, "base_url": str,
             "max_retries": int, "sleep_seconds": float, "report_file": str | None}
        """
        return {
            "total_ops": self.total_ops,
            "clients_created": self._factory.created_count,
            "base_url": self._config.base_url,
            "max_retries": self._config.retry.max_retries,
            "sleep_seconds": self._config.retry.sleep_seconds,
            "report_file": self._logger.report_file,
        }

    # ==================== Компоненты ====================

    def get_client(self) -> requests.Session:
        """Pooled client (shared unless reuse is disabled)."""
        return self._factory.get_client()

    def release_client(self, client: requests.Session) -> None:
        """Hand back a client from get_client(); per-call clients are closed."""
        self._factory.release(client)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def logger(self) -> PerfLogger:
        return self._logger

    @property
    def errors(self) -> ErrorHandler:
        return self._errors

    @property
    def classifier(self) -> RetryClassifier:
        return self._classifier

    @property
    def decoder(self) -> ResponseDecoder:
        return self._decoder

    def close(self) -> None:
        """Release pooled connections and the report file. Idempotent."""
        if self._closed:
            return
        self._factory.close()
        if self._owns_logger:
            self._logger.close()
        self._closed = True
