"""
Rate Limit Models
=================
Restriction reasons and check results for OTP request guards.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RestrictionReason(str, Enum):
    """Which guard blocked the request, in priority order."""
    ACCOUNT_LOCKED = "account_locked"
    SPAM_LOCKED = "spam_locked"
    COOLDOWN = "cooldown"


@dataclass
class RestrictionInfo:
    """Guard check result."""
    allowed: bool
    reason: Optional[RestrictionReason] = None
    message: str = ""
    retry_after: Optional[int] = None  # Seconds until retry allowed

    @classmethod
    def ok(cls) -> "RestrictionInfo":
        return cls(allowed=True)
