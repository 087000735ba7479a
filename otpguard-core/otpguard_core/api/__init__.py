"""
HTTP API Module
===============
FastAPI routers for OTP request/verify, health and error mapping.
"""

from .errors import create_user_error_response, store_unavailable_handler
from .health import create_health_router
from .router import create_otp_router

__all__ = [
    "create_user_error_response",
    "store_unavailable_handler",
    "create_health_router",
    "create_otp_router",
]
