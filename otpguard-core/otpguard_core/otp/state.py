"""
Challenge State Machine
=======================
Per-identifier verification state as explicit values with pure transitions.

    NoChallenge -> Active(0) -> Active(1) -> ... -> Locked
    Active(*) -> NoChallenge on a correct code
    Locked -> NoChallenge only when the lock expires
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..policy import OTPPolicy
from .models import VerifyOutcome


@dataclass(frozen=True)
class NoChallenge:
    """No active code for the identifier."""


@dataclass(frozen=True)
class Active:
    """A code is active and `attempts` wrong guesses have been made."""
    attempts: int = 0


@dataclass(frozen=True)
class Locked:
    """Account lock after too many wrong guesses."""


ChallengeState = Union[NoChallenge, Active, Locked]


@dataclass(frozen=True)
class Transition:
    """Next state plus the outcome reported to the caller."""
    state: ChallengeState
    outcome: VerifyOutcome
    attempts_left: Optional[int] = None


def on_submit(
    state: ChallengeState,
    correct: bool,
    policy: OTPPolicy,
) -> Transition:
    """
    Apply one verification attempt.

    A wrong guess while `attempts` already equals policy.max_failed_attempts
    escalates to Locked. Otherwise attempts_left counts the wrong guesses
    still tolerated before the lock.
    """
    if isinstance(state, Locked):
        return Transition(state, VerifyOutcome.ACCOUNT_LOCKED)

    if isinstance(state, NoChallenge):
        return Transition(state, VerifyOutcome.EXPIRED_OR_MISSING)

    if correct:
        return Transition(NoChallenge(), VerifyOutcome.SUCCESS)

    if state.attempts >= policy.max_failed_attempts:
        return Transition(Locked(), VerifyOutcome.LOCKED)

    attempts = state.attempts + 1
    return Transition(
        Active(attempts=attempts),
        VerifyOutcome.INVALID_CODE,
        attempts_left=policy.max_failed_attempts - attempts,
    )
