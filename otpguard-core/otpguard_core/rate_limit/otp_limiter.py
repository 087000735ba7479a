"""
OTP Rate Limiter
================
Cooldown, spam lock and account lock guards kept in the ephemeral store.
"""

from typing import Optional

import structlog

from ..logging import mask_identifier
from ..policy import OTPKeys, OTPPolicy, format_duration
from ..store import EphemeralStore
from .models import RestrictionInfo, RestrictionReason

logger = structlog.get_logger(__name__)


class OTPRateLimiter:
    """
    Three independent guards per identifier.

    - Account lock: set by the verifier after repeated wrong codes
    - Spam lock: set here once the request counter passes policy.max_requests
    - Cooldown: set by the issuer after each code is stored
    """

    def __init__(
        self,
        store: EphemeralStore,
        policy: Optional[OTPPolicy] = None,
        keys: Optional[OTPKeys] = None,
    ):
        self.store = store
        self.policy = policy or OTPPolicy()
        self.keys = keys or OTPKeys()

    def blocked(self, reason: RestrictionReason) -> RestrictionInfo:
        """Build the blocked result for a reason with its message and wait time."""
        policy = self.policy
        if reason == RestrictionReason.ACCOUNT_LOCKED:
            return RestrictionInfo(
                allowed=False,
                reason=reason,
                message=(
                    "Account locked due to multiple failed attempts! "
                    f"Try again after {format_duration(policy.lock_seconds)}."
                ),
                retry_after=policy.lock_seconds,
            )
        if reason == RestrictionReason.SPAM_LOCKED:
            return RestrictionInfo(
                allowed=False,
                reason=reason,
                message=(
                    "Too many OTP requests! "
                    f"Try again after {format_duration(policy.spam_lock_seconds)}."
                ),
                retry_after=policy.spam_lock_seconds,
            )
        return RestrictionInfo(
            allowed=False,
            reason=reason,
            message=(
                f"Please wait {format_duration(policy.cooldown_seconds)} "
                "before requesting a new OTP."
            ),
            retry_after=policy.cooldown_seconds,
        )

    async def is_account_locked(self, identifier: str) -> bool:
        return await self.store.get(self.keys.account_lock(identifier)) is not None

    async def check_restrictions(self, identifier: str) -> RestrictionInfo:
        """
        Check account lock, spam lock and cooldown, in that order.

        Read-only. Returns the first active block.
        """
        guards = (
            (self.keys.account_lock(identifier), RestrictionReason.ACCOUNT_LOCKED),
            (self.keys.spam_lock(identifier), RestrictionReason.SPAM_LOCKED),
            (self.keys.cooldown(identifier), RestrictionReason.COOLDOWN),
        )
        for key, reason in guards:
            if await self.store.get(key) is not None:
                logger.info(
                    "otp_request_blocked",
                    identifier=mask_identifier(identifier),
                    reason=reason.value,
                )
                return self.blocked(reason)
        return RestrictionInfo.ok()

    async def track_request(self, identifier: str) -> RestrictionInfo:
        """
        Count a code request and spam-lock once the window is exhausted.

        The counter TTL is reset on every increment, so the window is a flat
        period after the latest request rather than a sliding one.
        """
        count = await self.store.incr_with_ttl(
            self.keys.request_count(identifier),
            self.policy.request_window_seconds,
        )
        if count > self.policy.max_requests:
            await self.store.set(
                self.keys.spam_lock(identifier),
                "locked",
                self.policy.spam_lock_seconds,
            )
            logger.warning(
                "otp_spam_lock_set",
                identifier=mask_identifier(identifier),
                requests=count,
                lock_seconds=self.policy.spam_lock_seconds,
            )
            return self.blocked(RestrictionReason.SPAM_LOCKED)
        return RestrictionInfo.ok()

    async def lock_account(self, identifier: str) -> None:
        """Set the account lock for policy.lock_seconds."""
        await self.store.set(
            self.keys.account_lock(identifier),
            "locked",
            self.policy.lock_seconds,
        )
