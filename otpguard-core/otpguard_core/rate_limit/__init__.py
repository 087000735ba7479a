"""
Rate Limiting Module
====================
Request guards protecting OTP issuance from flooding and brute force.
"""

from .models import RestrictionInfo, RestrictionReason
from .otp_limiter import OTPRateLimiter

__all__ = [
    "RestrictionInfo",
    "RestrictionReason",
    "OTPRateLimiter",
]
