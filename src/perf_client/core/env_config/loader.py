"""
Configuration loader from environment variables and .env files.

Main entry point for perf drivers.
"""

from typing import Any, NoReturn, Optional

from pydantic import ValidationError

from ..config import (
    ClientConfig,
    ConnectionPoolConfig,
    RetryConfig,
    SecurityConfig,
    TimeoutConfig,
)
from ..error_handler import ErrorHandler
from ..exceptions import ExitCode
from ..logging import LoggingConfig, PerfLogger
from ...utils.sanitizer import mask_sensitive_data
from .validator import BASE_URL_VAR, PerfSettings


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: Explicit config overrides (base_url, max_retries,
            sleep_seconds, reuse_client, skip_tls_verify, ca_bundle_path,
            report_file, verbose, log_level, log_format, program_name)

    Returns:
        ClientConfig instance

    Raises:
        PerfRunAborted: If a variable is invalid or the base URL is
            missing (CLI_INPUT_ERROR)

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(max_retries=0, verbose=True)
    """
    try:
        settings = PerfSettings(_env_file=env_file) if env_file else PerfSettings()
    except ValidationError as e:
        _abort(f"invalid environment configuration: {e}")

    base_url = overrides.get('base_url', settings.exchange_url)
    if not base_url:
        _abort(f"Environment variable {BASE_URL_VAR} must be set.")

    logging_config = LoggingConfig.create(
        level=overrides.get('log_level', "INFO"),
        format=overrides.get('log_format', "text"),
        report_file=overrides.get('report_file', settings.report_path),
        verbose=overrides.get('verbose', settings.verbose),
        program_name=overrides.get('program_name'),
    )

    return ClientConfig(
        base_url=base_url,
        timeout=TimeoutConfig(),
        retry=RetryConfig(
            max_retries=overrides.get('max_retries', settings.retry_max),
            sleep_seconds=overrides.get('sleep_seconds', settings.retry_sleep),
        ),
        pool=ConnectionPoolConfig(),
        security=SecurityConfig(
            skip_tls_verify=overrides.get('skip_tls_verify', settings.skip_tls_verify),
            ca_bundle_path=overrides.get('ca_bundle_path', settings.ca_bundle_path),
        ),
        reuse_client=overrides.get('reuse_client', settings.reuse_client),
        logging=logging_config,
    )


def _abort(message: str) -> NoReturn:
    """Report a configuration error on stdout and abort with CLI_INPUT_ERROR."""
    with PerfLogger(LoggingConfig(), name="perf_client.env_config") as logger:
        ErrorHandler(logger).fatal(ExitCode.CLI_INPUT_ERROR, message)


def print_config_summary(config: ClientConfig, mask_secrets: bool = True):
    """
    Print configuration summary.

    Useful at the start of a run so the report shows what was used.

    Args:
        config: Configuration to print
        mask_secrets: Mask credentials embedded in the base URL

    Example:
        >>> print_config_summary(load_from_env())
        ClientConfig:
          base_url: https://exchange.example.com/v1
          retry: max_retries=5, sleep=2s
          ...
    """
    base_url = mask_sensitive_data(config.base_url) if mask_secrets else config.base_url
    print("ClientConfig:")
    print(f"  base_url: {base_url}")
    print(f"  timeout: request={config.timeout.request}s, dial={config.timeout.dial}s, "
          f"response_header={config.timeout.response_header}s")
    print(f"  retry: max_retries={config.retry.max_retries}, sleep={config.retry.sleep_seconds}s")
    print(f"  pool: max_idle_connections={config.pool.max_idle_connections}, reuse_client={config.reuse_client}")
    print(f"  security: skip_tls_verify={config.security.skip_tls_verify}, "
          f"ca_bundle={config.security.ca_bundle_path}")

    if config.logging:
        print(f"  logging: level={config.logging.level.value}, verbose={config.logging.verbose}")
        if config.logging.report_file:
            print(f"    report: {config.logging.report_file}")
