"""
OTP Verifier
============
Checks a submitted code with bounded retries and escalation to an account lock.
"""

from typing import Optional

import structlog

from .. import metrics
from ..logging import mask_identifier
from ..policy import OTPKeys, OTPPolicy, format_duration
from ..rate_limit import OTPRateLimiter
from ..store import EphemeralStore
from .generator import codes_match
from .models import VerifyOutcome, VerifyResult
from .state import Active, Locked, NoChallenge, Transition, on_submit

logger = structlog.get_logger(__name__)


class OTPVerifier:
    """Verifies codes issued by OTPIssuer."""

    def __init__(
        self,
        store: EphemeralStore,
        limiter: Optional[OTPRateLimiter] = None,
        policy: Optional[OTPPolicy] = None,
        keys: Optional[OTPKeys] = None,
    ):
        self.store = store
        self.policy = policy or (limiter.policy if limiter else OTPPolicy())
        self.keys = keys or (limiter.keys if limiter else OTPKeys())
        self.limiter = limiter or OTPRateLimiter(store, self.policy, self.keys)

    async def verify(self, identifier: str, submitted_code: str) -> VerifyResult:
        """
        Verify a submitted code.

        The account lock is checked first and wins over a correct code.
        Wrong guesses are counted with an atomic increment; the count it
        returns decides whether this guess escalates to the lock.

        Raises:
            StoreUnavailableError: The ephemeral store could not be reached
        """
        code_key = self.keys.code(identifier)
        attempts_key = self.keys.attempts(identifier)

        if await self.limiter.is_account_locked(identifier):
            transition = on_submit(Locked(), False, self.policy)
        else:
            stored = await self.store.get(code_key)
            if stored is None:
                transition = on_submit(NoChallenge(), False, self.policy)
            elif codes_match(str(submitted_code), stored):
                transition = on_submit(Active(), True, self.policy)
            else:
                attempts = await self.store.incr_with_ttl(attempts_key, self.policy.code_ttl)
                transition = on_submit(Active(attempts=attempts - 1), False, self.policy)

        await self._apply(identifier, transition)
        metrics.record_verification(transition.outcome.value)
        return self._result(transition)

    async def _apply(self, identifier: str, transition: Transition) -> None:
        outcome = transition.outcome
        masked = mask_identifier(identifier)

        if outcome == VerifyOutcome.SUCCESS:
            await self.store.delete(self.keys.code(identifier), self.keys.attempts(identifier))
            logger.info("otp_verified", identifier=masked)
        elif outcome == VerifyOutcome.LOCKED:
            await self.limiter.lock_account(identifier)
            await self.store.delete(self.keys.code(identifier))
            # Guesses already past the lock check must keep counting as locked.
            await self.store.set(
                self.keys.attempts(identifier),
                str(self.policy.max_failed_attempts + 1),
                self.policy.lock_seconds,
            )
            logger.warning(
                "otp_account_locked",
                identifier=masked,
                lock_seconds=self.policy.lock_seconds,
            )
        elif outcome == VerifyOutcome.INVALID_CODE:
            logger.info(
                "otp_invalid_attempt",
                identifier=masked,
                attempts_left=transition.attempts_left,
            )

    def _result(self, transition: Transition) -> VerifyResult:
        outcome = transition.outcome

        if outcome == VerifyOutcome.SUCCESS:
            return VerifyResult(outcome=outcome, message="OTP verified successfully.")

        if outcome == VerifyOutcome.EXPIRED_OR_MISSING:
            return VerifyResult(outcome=outcome, message="Invalid or expired OTP!")

        if outcome == VerifyOutcome.INVALID_CODE:
            left = transition.attempts_left
            noun = "attempt" if left == 1 else "attempts"
            return VerifyResult(
                outcome=outcome,
                message=f"Invalid OTP! You have {left} {noun} left.",
                attempts_left=left,
            )

        return VerifyResult(
            outcome=outcome,
            message=(
                "Account locked due to multiple failed attempts! "
                f"Try again after {format_duration(self.policy.lock_seconds)}."
            ),
            attempts_left=0,
            retry_after=self.policy.lock_seconds,
        )
