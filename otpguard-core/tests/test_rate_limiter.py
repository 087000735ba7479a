"""
Tests for OTP request guards
============================
"""

import asyncio

import pytest
from conftest import YieldingStore

from otpguard_core.rate_limit import OTPRateLimiter, RestrictionReason


class TestCheckRestrictions:
    """Lock priority and messages."""

    @pytest.mark.asyncio
    async def test_no_locks_allows(self, limiter):
        info = await limiter.check_restrictions("a@x.com")

        assert info.allowed is True
        assert info.reason is None

    @pytest.mark.asyncio
    async def test_priority_order(self, limiter, store, keys):
        """Account lock beats spam lock beats cooldown."""
        await store.set(keys.cooldown("a@x.com"), "true", 60)
        assert (await limiter.check_restrictions("a@x.com")).reason == RestrictionReason.COOLDOWN

        await store.set(keys.spam_lock("a@x.com"), "locked", 3600)
        assert (await limiter.check_restrictions("a@x.com")).reason == RestrictionReason.SPAM_LOCKED

        await store.set(keys.account_lock("a@x.com"), "locked", 2700)
        info = await limiter.check_restrictions("a@x.com")

        assert info.allowed is False
        assert info.reason == RestrictionReason.ACCOUNT_LOCKED
        assert info.retry_after == 2700
        assert "45 minutes" in info.message

    @pytest.mark.asyncio
    async def test_check_has_no_side_effects(self, limiter, store, keys):
        await limiter.check_restrictions("a@x.com")
        await limiter.check_restrictions("a@x.com")

        assert await store.get(keys.request_count("a@x.com")) is None

    @pytest.mark.asyncio
    async def test_messages_carry_wait_times(self, limiter):
        cooldown = limiter.blocked(RestrictionReason.COOLDOWN)
        spam = limiter.blocked(RestrictionReason.SPAM_LOCKED)

        assert cooldown.retry_after == 60
        assert cooldown.message == "Please wait 1 minute before requesting a new OTP."
        assert spam.retry_after == 3600
        assert spam.message == "Too many OTP requests! Try again after 1 hour."


class TestTrackRequest:
    """Request counting and spam lock."""

    @pytest.mark.asyncio
    async def test_third_request_spam_locks(self, limiter, store, keys):
        assert (await limiter.track_request("a@x.com")).allowed is True
        assert (await limiter.track_request("a@x.com")).allowed is True

        info = await limiter.track_request("a@x.com")

        assert info.allowed is False
        assert info.reason == RestrictionReason.SPAM_LOCKED
        assert await store.get(keys.spam_lock("a@x.com")) == "locked"

    @pytest.mark.asyncio
    async def test_spam_lock_lasts_full_ttl(self, limiter, store, clock):
        for _ in range(3):
            await limiter.track_request("a@x.com")

        clock.advance(3599)
        assert (await limiter.check_restrictions("a@x.com")).reason == RestrictionReason.SPAM_LOCKED

        clock.advance(2)
        assert (await limiter.check_restrictions("a@x.com")).allowed is True

    @pytest.mark.asyncio
    async def test_window_resets_on_each_request(self, limiter, clock):
        """The counter TTL restarts with each request (flat window)."""
        await limiter.track_request("a@x.com")
        clock.advance(3000)
        await limiter.track_request("a@x.com")
        clock.advance(3000)

        # First request is over an hour old but the counter is still alive
        info = await limiter.track_request("a@x.com")

        assert info.allowed is False

    @pytest.mark.asyncio
    async def test_counter_expires_after_window(self, limiter, clock):
        await limiter.track_request("a@x.com")
        await limiter.track_request("a@x.com")
        clock.advance(3601)

        assert (await limiter.track_request("a@x.com")).allowed is True

    @pytest.mark.asyncio
    async def test_identifiers_are_independent(self, limiter):
        for _ in range(3):
            await limiter.track_request("a@x.com")

        assert (await limiter.track_request("b@x.com")).allowed is True

    @pytest.mark.asyncio
    async def test_identifier_is_normalized(self, limiter):
        await limiter.track_request("A@X.com")
        await limiter.track_request(" a@x.com ")

        assert (await limiter.track_request("a@x.com")).allowed is False


class TestConcurrentRequests:
    """Bursts against a store that interleaves callers between read and write."""

    @pytest.mark.asyncio
    async def test_read_then_write_counter_undercounts(self, clock):
        store = YieldingStore(clock=clock)

        async def naive_incr():
            count = int(await store.get("counter") or 0)
            await store.set("counter", str(count + 1), 60)

        await asyncio.gather(*(naive_incr() for _ in range(10)))

        assert await store.get("counter") == "1"

    @pytest.mark.asyncio
    async def test_burst_cannot_undercount(self, clock, policy, keys):
        """Only max_requests of a burst get through."""
        store = YieldingStore(clock=clock)
        limiter = OTPRateLimiter(store, policy, keys)

        results = await asyncio.gather(
            *(limiter.track_request("a@x.com") for _ in range(10))
        )

        assert sum(1 for r in results if r.allowed) == 2
        assert await store.get(keys.request_count("a@x.com")) == "10"
        assert await store.get(keys.spam_lock("a@x.com")) == "locked"

    @pytest.mark.asyncio
    async def test_burst_after_guards_checked(self, clock, policy, keys):
        """Every caller passes the read-only check; the counter still bounds them."""
        store = YieldingStore(clock=clock)
        limiter = OTPRateLimiter(store, policy, keys)

        async def request():
            if not (await limiter.check_restrictions("a@x.com")).allowed:
                return False
            return (await limiter.track_request("a@x.com")).allowed

        results = await asyncio.gather(*(request() for _ in range(10)))

        assert results.count(True) == 2
