"""Core perf client модули."""

from .config import (
    TimeoutConfig,
    RetryConfig,
    ConnectionPoolConfig,
    SecurityConfig,
    ClientConfig,
)
from .exceptions import (
    ExitCode,
    HTTP_CLIENT_ERROR,
    PerfClientException,
    PerfRunAborted,
    TemporaryError,
    FatalError,
    NetworkError,
    TimeoutError,
    ConnectionError,
    ServerError,
    HTTPError,
    InvalidResponseError,
    ConfigurationError,
    classify_requests_exception,
)
from .error_handler import ErrorHandler
from .retry_engine import AttemptState, RetryClassifier, RetryDecision, RETRYABLE_STATUS_CODES
from .client_factory import HTTPClientFactory, TransportAdapter
from .decoder import ResponseDecoder, RAW_BYTES, JSON_TEXT
from .session import PerfSession
from .executor import RequestExecutor, RequestSpec, ApiResult

__all__ = [
    # Config
    "TimeoutConfig",
    "RetryConfig",
    "ConnectionPoolConfig",
    "SecurityConfig",
    "ClientConfig",
    # Retry
    "AttemptState",
    "RetryClassifier",
    "RetryDecision",
    "RETRYABLE_STATUS_CODES",
    # Core
    "HTTPClientFactory",
    "TransportAdapter",
    "ResponseDecoder",
    "RAW_BYTES",
    "JSON_TEXT",
    "PerfSession",
    "RequestExecutor",
    "RequestSpec",
    "ApiResult",
    "ErrorHandler",
    # Exceptions
    "ExitCode",
    "HTTP_CLIENT_ERROR",
    "PerfClientException",
    "PerfRunAborted",
    "TemporaryError",
    "FatalError",
    "NetworkError",
    "TimeoutError",
    "ConnectionError",
    "ServerError",
    "HTTPError",
    "InvalidResponseError",
    "ConfigurationError",
    "classify_requests_exception",
]
