# src/perf_client/utils/ids.py
"""Resource ids of the form "<org>/<id>"."""

from typing import NoReturn, Optional

from pydantic import ValidationError

from ..core.env_config.validator import ORG_ID_VAR, PerfSettings
from ..core.error_handler import ErrorHandler
from ..core.exceptions import ExitCode
from ..core.logging import LoggingConfig, PerfLogger


def _fail(message: str, logger: Optional[PerfLogger]) -> NoReturn:
    if logger is not None:
        ErrorHandler(logger).fatal(ExitCode.CLI_INPUT_ERROR, message)
    with PerfLogger(LoggingConfig(), name="perf_client.ids") as fallback:
        ErrorHandler(fallback).fatal(ExitCode.CLI_INPUT_ERROR, message)


def trim_org(resource_id: str, logger: Optional[PerfLogger] = None) -> str:
    """
    Remove the leading "<org>/" if present.

    Example:
        >>> trim_org("myorg/node1")
        'node1'
        >>> trim_org("node1")
        'node1'

    Raises:
        PerfRunAborted: If the id contains more than one '/' (CLI_INPUT_ERROR)
    """
    parts = resource_id.split("/")
    if len(parts) == 1:
        return resource_id
    if len(parts) == 2:
        return parts[1]
    _fail(f"can not remove org from id '{resource_id}' because it contains more than 1 '/'", logger)


def add_org(resource_id: str, org: Optional[str] = None, logger: Optional[PerfLogger] = None) -> str:
    """
    Prefix the id with an org unless it already has one.

    Args:
        resource_id: "id" or "org/id"
        org: Org to add; defaults to HZN_ORG_ID (environment or .env file)

    Raises:
        PerfRunAborted: If the id contains more than one '/', or no org is
            given and HZN_ORG_ID is not set (CLI_INPUT_ERROR)
    """
    parts = resource_id.split("/")
    if len(parts) == 2:
        return resource_id
    if len(parts) > 2:
        _fail(f"the id '{resource_id}' can not contain more than 1 '/'", logger)

    if org is None:
        try:
            org = PerfSettings().org_id
        except ValidationError as e:
            _fail(f"invalid environment configuration: {e}", logger)
        if not org:
            _fail(f"Environment variable {ORG_ID_VAR} must be set.", logger)
    return f"{org}/{resource_id}"
