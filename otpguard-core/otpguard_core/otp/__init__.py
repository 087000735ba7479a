"""
OTP Issuance and Verification
=============================
Code generation, issuance with abuse guards, and verification with lockout.
"""

from .models import (
    DispatchContext,
    ErrorKind,
    IssueResult,
    OTPPurpose,
    RequestOutcome,
    VerifyOutcome,
    VerifyResult,
)
from .generator import generate_otp, codes_match
from .state import Active, ChallengeState, Locked, NoChallenge, Transition, on_submit
from .issuer import OTPIssuer
from .verifier import OTPVerifier

__all__ = [
    # Models
    "DispatchContext",
    "ErrorKind",
    "IssueResult",
    "OTPPurpose",
    "RequestOutcome",
    "VerifyOutcome",
    "VerifyResult",
    # Generator
    "generate_otp",
    "codes_match",
    # State machine
    "Active",
    "ChallengeState",
    "Locked",
    "NoChallenge",
    "Transition",
    "on_submit",
    # Services
    "OTPIssuer",
    "OTPVerifier",
]
