"""Perf Client - resilient HTTP request execution for perf/scale test drivers."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.config import (
    ClientConfig,
    TimeoutConfig,
    RetryConfig,
    ConnectionPoolConfig,
    SecurityConfig,
)
from .core.exceptions import (
    ExitCode,
    HTTP_CLIENT_ERROR,
    PerfClientException,
    PerfRunAborted,
)
from .core.decoder import RAW_BYTES, JSON_TEXT
from .core.session import PerfSession
from .core.executor import RequestExecutor, RequestSpec, ApiResult
from .core.env_config import load_from_env
from .core.logging import LoggingConfig

# NullHandler prevents "No handler found" warnings when used as a library
logging.getLogger('perf_client').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("perf-client-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Session / execution
    "PerfSession",
    "RequestExecutor",
    "RequestSpec",
    "ApiResult",
    "RAW_BYTES",
    "JSON_TEXT",
    "load_from_env",

    # Config
    "ClientConfig",
    "TimeoutConfig",
    "RetryConfig",
    "ConnectionPoolConfig",
    "SecurityConfig",
    "LoggingConfig",

    # Errors
    "ExitCode",
    "HTTP_CLIENT_ERROR",
    "PerfClientException",
    "PerfRunAborted",

    "__version__",
]
