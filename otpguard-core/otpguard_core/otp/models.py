"""
OTP Models
==========
Purposes and outcome types for OTP issuance and verification.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class OTPPurpose(str, Enum):
    """Why a code is being sent. Selects the mail template."""
    SIGNUP = "signup"
    PASSWORD_RESET = "password_reset"

    @property
    def template_id(self) -> str:
        return _TEMPLATES[self]

    @property
    def subject(self) -> str:
        return "Verify your email"


_TEMPLATES = {
    OTPPurpose.SIGNUP: "user-activation-mail",
    OTPPurpose.PASSWORD_RESET: "forgot-password-user-mail",
}


@dataclass
class DispatchContext:
    """What the dispatch gateway needs besides the recipient and the code."""
    subject: str
    template_id: str
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_purpose(cls, purpose: OTPPurpose, name: Optional[str] = None) -> "DispatchContext":
        data: Dict[str, Any] = {}
        if name:
            data["name"] = name
        return cls(subject=purpose.subject, template_id=purpose.template_id, data=data)


class ErrorKind(str, Enum):
    """Category of a non-successful outcome."""
    RATE_LIMITED = "rate_limited"
    VERIFICATION_FAILED = "verification_failed"
    CHALLENGE_EXPIRED = "challenge_expired"
    DELIVERY_FAILED = "delivery_failed"


class RequestOutcome(str, Enum):
    """Result of a request-code call."""
    ISSUED = "issued"
    ACCOUNT_LOCKED = "account_locked"
    SPAM_LOCKED = "spam_locked"
    COOLDOWN = "cooldown"
    DELIVERY_FAILED = "delivery_failed"


class VerifyOutcome(str, Enum):
    """Result of a verify-code call."""
    SUCCESS = "success"
    EXPIRED_OR_MISSING = "expired_or_missing"
    INVALID_CODE = "invalid_code"
    LOCKED = "locked"
    ACCOUNT_LOCKED = "account_locked"


_REQUEST_KINDS = {
    RequestOutcome.ACCOUNT_LOCKED: ErrorKind.RATE_LIMITED,
    RequestOutcome.SPAM_LOCKED: ErrorKind.RATE_LIMITED,
    RequestOutcome.COOLDOWN: ErrorKind.RATE_LIMITED,
    RequestOutcome.DELIVERY_FAILED: ErrorKind.DELIVERY_FAILED,
}

_VERIFY_KINDS = {
    VerifyOutcome.EXPIRED_OR_MISSING: ErrorKind.CHALLENGE_EXPIRED,
    VerifyOutcome.INVALID_CODE: ErrorKind.VERIFICATION_FAILED,
    VerifyOutcome.LOCKED: ErrorKind.RATE_LIMITED,
    VerifyOutcome.ACCOUNT_LOCKED: ErrorKind.RATE_LIMITED,
}


@dataclass
class IssueResult:
    """Outcome of a request-code call."""
    outcome: RequestOutcome
    message: str
    retry_after: Optional[int] = None  # Seconds until a new request may succeed
    error_code: Optional[str] = None  # Dispatch gateway error, if any

    @property
    def ok(self) -> bool:
        return self.outcome == RequestOutcome.ISSUED

    @property
    def kind(self) -> Optional[ErrorKind]:
        return _REQUEST_KINDS.get(self.outcome)


@dataclass
class VerifyResult:
    """Outcome of a verify-code call."""
    outcome: VerifyOutcome
    message: str
    attempts_left: Optional[int] = None
    retry_after: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.outcome == VerifyOutcome.SUCCESS

    @property
    def kind(self) -> Optional[ErrorKind]:
        return _VERIFY_KINDS.get(self.outcome)
