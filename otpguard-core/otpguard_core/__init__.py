"""
OTPGuard Core Library
=====================
One-time passcode issuance and verification with abuse guards.
"""

__version__ = "0.1.0"

# Policy
from otpguard_core.policy import OTPPolicy, OTPKeys

# Store
from otpguard_core.store import (
    EphemeralStore,
    StoreUnavailableError,
    InMemoryStore,
    RedisStore,
)

# Rate Limiting
from otpguard_core.rate_limit import (
    OTPRateLimiter,
    RestrictionInfo,
    RestrictionReason,
)

# Dispatch
from otpguard_core.dispatch import (
    DispatchGateway,
    DispatchResult,
    HttpMailGateway,
    LoggingGateway,
)

# OTP
from otpguard_core.otp import (
    generate_otp,
    codes_match,
    OTPIssuer,
    OTPVerifier,
    OTPPurpose,
    DispatchContext,
    ErrorKind,
    IssueResult,
    RequestOutcome,
    VerifyOutcome,
    VerifyResult,
)

# Config
from otpguard_core.config import ServiceConfig, load_config

__all__ = [
    # Policy
    "OTPPolicy",
    "OTPKeys",
    # Store
    "EphemeralStore",
    "StoreUnavailableError",
    "InMemoryStore",
    "RedisStore",
    # Rate Limiting
    "OTPRateLimiter",
    "RestrictionInfo",
    "RestrictionReason",
    # Dispatch
    "DispatchGateway",
    "DispatchResult",
    "HttpMailGateway",
    "LoggingGateway",
    # OTP
    "generate_otp",
    "codes_match",
    "OTPIssuer",
    "OTPVerifier",
    "OTPPurpose",
    "DispatchContext",
    "ErrorKind",
    "IssueResult",
    "RequestOutcome",
    "VerifyOutcome",
    "VerifyResult",
    # Config
    "ServiceConfig",
    "load_config",
]
