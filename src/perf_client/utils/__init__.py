"""
Utility modules for perf client.

commands and ids report through the core logger, import them as
submodules (perf_client.utils.commands, perf_client.utils.ids).
"""

from .sanitizer import mask_sensitive_data

__all__ = [
    'mask_sensitive_data',
]
