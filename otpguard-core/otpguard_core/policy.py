"""
OTP Policy and Key Layout
=========================
Lifetimes, thresholds and store key shapes shared by the limiter and the OTP flow.
"""

from dataclasses import dataclass


@dataclass
class OTPPolicy:
    """Lifetimes and thresholds for OTP issuance and verification."""
    code_length: int = 6
    code_ttl: int = 300  # 5 minutes
    cooldown_seconds: int = 60
    request_window_seconds: int = 3600
    max_requests: int = 2  # requests allowed per window; the next one spam-locks
    spam_lock_seconds: int = 3600
    max_failed_attempts: int = 2  # wrong guesses allowed; the next one locks
    lock_seconds: int = 2700  # 45 minutes


class OTPKeys:
    """
    Builds store keys for one identifier.

    Identifiers are trimmed and lower-cased so "A@x.com " and "a@x.com"
    share the same state.
    """

    def __init__(self, prefix: str = ""):
        self.prefix = f"{prefix}:" if prefix and not prefix.endswith(":") else prefix

    @staticmethod
    def normalize(identifier: str) -> str:
        return identifier.strip().lower()

    def _key(self, namespace: str, identifier: str) -> str:
        return f"{self.prefix}{namespace}:{self.normalize(identifier)}"

    def code(self, identifier: str) -> str:
        return self._key("otp", identifier)

    def cooldown(self, identifier: str) -> str:
        return self._key("otp_cooldown", identifier)

    def request_count(self, identifier: str) -> str:
        return self._key("otp_requests_count", identifier)

    def spam_lock(self, identifier: str) -> str:
        return self._key("otp_spam_lock", identifier)

    def attempts(self, identifier: str) -> str:
        return self._key("otp_attempts", identifier)

    def account_lock(self, identifier: str) -> str:
        return self._key("otp_lock", identifier)


def format_duration(seconds: int) -> str:
    """Render a lock duration for user-facing messages ("1 hour", "45 minutes")."""
    if seconds >= 3600 and seconds % 3600 == 0:
        hours = seconds // 3600
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    if seconds >= 60:
        minutes = seconds // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{seconds} seconds"
