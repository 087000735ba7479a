"""Shared fixtures: fake clock, in-memory store and recording gateways."""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from otpguard_core.dispatch import DispatchGateway, DispatchResult
from otpguard_core.otp import DispatchContext, OTPIssuer, OTPPurpose, OTPVerifier
from otpguard_core.policy import OTPKeys, OTPPolicy
from otpguard_core.rate_limit import OTPRateLimiter
from otpguard_core.store import InMemoryStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class YieldingStore(InMemoryStore):
    """
    Suspends after every read, so a read-then-write caller loses updates
    when run concurrently. Atomic operations are unaffected.
    """

    async def get(self, key: str) -> Optional[str]:
        value = await super().get(key)
        await asyncio.sleep(0)
        return value


class RecordingGateway(DispatchGateway):
    """Collects sent messages; fails when `fail_with` is set."""

    name = "recording"

    def __init__(self, fail_with: Optional[str] = None):
        self.sent: List[Dict[str, Any]] = []
        self.fail_with = fail_with

    async def send(self, recipient, subject, template_id, data) -> DispatchResult:
        self.sent.append({
            "recipient": recipient,
            "subject": subject,
            "template_id": template_id,
            "data": dict(data),
        })
        if self.fail_with:
            return DispatchResult(success=False, error_code=self.fail_with, error_message="down")
        return DispatchResult(success=True, message_id=f"msg-{len(self.sent)}")

    @property
    def last_code(self) -> str:
        return self.sent[-1]["data"]["otp"]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemoryStore:
    return InMemoryStore(clock=clock)


@pytest.fixture
def policy() -> OTPPolicy:
    return OTPPolicy()


@pytest.fixture
def keys() -> OTPKeys:
    return OTPKeys()


@pytest.fixture
def limiter(store, policy, keys) -> OTPRateLimiter:
    return OTPRateLimiter(store, policy, keys)


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def issuer(store, gateway, limiter) -> OTPIssuer:
    return OTPIssuer(store, gateway, limiter=limiter)


@pytest.fixture
def verifier(store, limiter) -> OTPVerifier:
    return OTPVerifier(store, limiter=limiter)


@pytest.fixture
def signup_context() -> DispatchContext:
    return DispatchContext.for_purpose(OTPPurpose.SIGNUP, name="Alice")
