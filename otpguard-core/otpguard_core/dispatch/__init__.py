"""
Dispatch Module
===============
Gateways delivering OTP codes to recipients.
"""

from .base import DispatchGateway, DispatchResult
from .http_gateway import HttpMailGateway
from .logging_gateway import LoggingGateway

__all__ = [
    "DispatchGateway",
    "DispatchResult",
    "HttpMailGateway",
    "LoggingGateway",
]
