"""
Tests for OTP issuance
======================
"""

import pytest

from otpguard_core.dispatch import DispatchResult
from otpguard_core.otp import (
    DispatchContext,
    ErrorKind,
    OTPIssuer,
    OTPPurpose,
    RequestOutcome,
)

from conftest import RecordingGateway


class TestGenerateAndStore:
    """OTPIssuer.generate_and_store."""

    @pytest.mark.asyncio
    async def test_issue_stores_code_and_cooldown(self, issuer, store, keys, gateway, signup_context):
        result = await issuer.generate_and_store("a@x.com", signup_context)

        assert result.ok
        assert result.outcome == RequestOutcome.ISSUED
        assert result.kind is None

        code = await store.get(keys.code("a@x.com"))
        assert code == gateway.last_code
        assert store.ttl(keys.code("a@x.com")) == pytest.approx(300)
        assert store.ttl(keys.cooldown("a@x.com")) == pytest.approx(60)
        assert await store.get(keys.request_count("a@x.com")) == "1"

    @pytest.mark.asyncio
    async def test_dispatch_payload(self, issuer, gateway, signup_context):
        await issuer.generate_and_store("a@x.com", signup_context)

        sent = gateway.sent[0]
        assert sent["recipient"] == "a@x.com"
        assert sent["subject"] == "Verify your email"
        assert sent["template_id"] == "user-activation-mail"
        assert sent["data"]["name"] == "Alice"
        assert len(sent["data"]["otp"]) == 6

    @pytest.mark.asyncio
    async def test_password_reset_template(self, issuer, gateway):
        context = DispatchContext.for_purpose(OTPPurpose.PASSWORD_RESET)

        await issuer.generate_and_store("a@x.com", context)

        assert gateway.sent[0]["template_id"] == "forgot-password-user-mail"
        assert "name" not in gateway.sent[0]["data"]

    @pytest.mark.asyncio
    async def test_context_data_not_mutated(self, issuer, signup_context):
        await issuer.generate_and_store("a@x.com", signup_context)

        assert "otp" not in signup_context.data

    @pytest.mark.asyncio
    async def test_second_request_hits_cooldown(self, issuer, gateway, signup_context):
        await issuer.generate_and_store("a@x.com", signup_context)

        result = await issuer.generate_and_store("a@x.com", signup_context)

        assert result.outcome == RequestOutcome.COOLDOWN
        assert result.kind == ErrorKind.RATE_LIMITED
        assert result.retry_after == 60
        assert len(gateway.sent) == 1

    @pytest.mark.asyncio
    async def test_blocked_request_is_not_counted(self, issuer, store, keys, signup_context):
        await issuer.generate_and_store("a@x.com", signup_context)
        await issuer.generate_and_store("a@x.com", signup_context)

        assert await store.get(keys.request_count("a@x.com")) == "1"

    @pytest.mark.asyncio
    async def test_new_code_overwrites_previous(self, issuer, store, keys, clock, gateway, signup_context):
        await issuer.generate_and_store("a@x.com", signup_context)
        clock.advance(61)
        await issuer.generate_and_store("a@x.com", signup_context)

        assert await store.get(keys.code("a@x.com")) == gateway.sent[1]["data"]["otp"]

    @pytest.mark.asyncio
    async def test_account_lock_blocks_issue(self, issuer, store, keys, gateway, signup_context):
        await store.set(keys.account_lock("a@x.com"), "locked", 2700)

        result = await issuer.generate_and_store("a@x.com", signup_context)

        assert result.outcome == RequestOutcome.ACCOUNT_LOCKED
        assert result.retry_after == 2700
        assert gateway.sent == []


class TestDelivery:
    """Dispatch failures and ordering."""

    @pytest.mark.asyncio
    async def test_delivery_failure_keeps_code_and_locks(self, store, limiter, keys, signup_context):
        gateway = RecordingGateway(fail_with="timeout")
        issuer = OTPIssuer(store, gateway, limiter=limiter)

        result = await issuer.generate_and_store("a@x.com", signup_context)

        assert result.outcome == RequestOutcome.DELIVERY_FAILED
        assert result.kind == ErrorKind.DELIVERY_FAILED
        assert result.error_code == "timeout"
        assert await store.get(keys.code("a@x.com")) == gateway.last_code
        assert await store.get(keys.cooldown("a@x.com")) == "true"

    @pytest.mark.asyncio
    async def test_locks_written_before_dispatch(self, store, limiter, keys, signup_context):
        """The cooldown and counter exist by the time the gateway runs."""
        seen = {}

        class InspectingGateway(RecordingGateway):
            async def send(self, recipient, subject, template_id, data):
                seen["cooldown"] = await store.get(keys.cooldown(recipient))
                seen["count"] = await store.get(keys.request_count(recipient))
                seen["code"] = await store.get(keys.code(recipient))
                return DispatchResult(success=True)

        issuer = OTPIssuer(store, InspectingGateway(), limiter=limiter)

        await issuer.generate_and_store("a@x.com", signup_context)

        assert seen["cooldown"] == "true"
        assert seen["count"] == "1"
        assert seen["code"] is not None

    @pytest.mark.asyncio
    async def test_failed_delivery_does_not_bypass_cooldown(self, store, limiter, signup_context):
        issuer = OTPIssuer(store, RecordingGateway(fail_with="unreachable"), limiter=limiter)

        await issuer.generate_and_store("a@x.com", signup_context)
        result = await issuer.generate_and_store("a@x.com", signup_context)

        assert result.outcome == RequestOutcome.COOLDOWN
