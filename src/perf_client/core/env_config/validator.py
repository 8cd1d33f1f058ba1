"""
Pydantic validators for environment configuration.

Variable names are the ones the perf drivers already export, so no common
prefix is used: every field carries its own alias.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Env var names
BASE_URL_VAR = "HZN_EXCHANGE_URL"
RETRY_MAX_VAR = "EX_PERF_HTTP_RETRY_MAX"
RETRY_SLEEP_VAR = "EX_PERF_HTTP_RETRY_SLEEP"
DONT_REUSE_VAR = "EX_PERF_DONT_REUSE_HTTP_CLIENT"
SKIP_VERIFY_VAR = "HZN_SSL_SKIP_VERIFY"
CA_BUNDLE_VAR = "CURL_CA_BUNDLE"
REPORT_FILE_VAR = "EX_PERF_REPORT_FILE"
VERBOSE_VAR = "VERBOSE"
ORG_ID_VAR = "HZN_ORG_ID"


class PerfSettings(BaseSettings):
    """
    Perf client configuration from environment variables.

    Reads from:
    1. Environment variables
    2. .env file
    3. Defaults

    Empty variables count as unset.

    Example .env file:
        HZN_EXCHANGE_URL=https://exchange.example.com/v1
        EX_PERF_HTTP_RETRY_MAX=3
        EX_PERF_HTTP_RETRY_SLEEP=1
        EX_PERF_REPORT_FILE=/tmp/perf/summary.txt
        VERBOSE=true

    Usage:
        >>> settings = PerfSettings()
        >>> settings.exchange_url
        'https://exchange.example.com/v1'
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        env_ignore_empty=True,
        extra='ignore',
    )

    exchange_url: str = Field(default="", validation_alias=BASE_URL_VAR)

    # Retry
    retry_max: int = Field(default=5, ge=0, validation_alias=RETRY_MAX_VAR)
    retry_sleep: int = Field(default=2, ge=0, validation_alias=RETRY_SLEEP_VAR)

    # Any non-empty value switches these on
    dont_reuse_client: str = Field(default="", validation_alias=DONT_REUSE_VAR)
    ssl_skip_verify: str = Field(default="", validation_alias=SKIP_VERIFY_VAR)

    ca_bundle: str = Field(default="", validation_alias=CA_BUNDLE_VAR)
    report_file: str = Field(default="", validation_alias=REPORT_FILE_VAR)
    verbose_flag: str = Field(default="false", validation_alias=VERBOSE_VAR)
    org_id: str = Field(default="", validation_alias=ORG_ID_VAR)

    @property
    def reuse_client(self) -> bool:
        return not self.dont_reuse_client

    @property
    def skip_tls_verify(self) -> bool:
        return bool(self.ssl_skip_verify)

    @property
    def verbose(self) -> bool:
        return self.verbose_flag.strip().lower() == "true"

    @property
    def ca_bundle_path(self) -> Optional[str]:
        return self.ca_bundle or None

    @property
    def report_path(self) -> Optional[str]:
        return self.report_file or None
