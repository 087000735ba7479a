"""
Logging Module
==============
structlog setup and log-safe identifier masking.
"""

from .structured import setup_logging, mask_identifier, service_name_var

__all__ = [
    "setup_logging",
    "mask_identifier",
    "service_name_var",
]
