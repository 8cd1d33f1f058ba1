"""
Environment configuration for perf drivers.

Example:
    >>> from perf_client.core.env_config import load_from_env
    >>>
    >>> config = load_from_env()
    >>> config = load_from_env(env_file="perf.env", max_retries=0)
"""

from .loader import load_from_env, print_config_summary
from .validator import PerfSettings, ORG_ID_VAR

__all__ = [
    "load_from_env",
    "print_config_summary",
    "PerfSettings",
    "ORG_ID_VAR",
]
