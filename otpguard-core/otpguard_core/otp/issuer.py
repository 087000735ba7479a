"""
OTP Issuer
==========
Orchestrates guard checks, code storage and delivery for one request-code call.
"""

from typing import Optional

import structlog

from .. import metrics
from ..dispatch import DispatchGateway
from ..logging import mask_identifier
from ..policy import OTPKeys, OTPPolicy
from ..rate_limit import OTPRateLimiter, RestrictionInfo
from ..store import EphemeralStore
from .generator import generate_otp
from .models import DispatchContext, IssueResult, RequestOutcome

logger = structlog.get_logger(__name__)


class OTPIssuer:
    """
    Issues one-time codes.

    Locks are written before the gateway is called, so a slow or failing
    delivery cannot be retried around the cooldown and spam guards. A failed
    delivery leaves the stored code valid.
    """

    def __init__(
        self,
        store: EphemeralStore,
        gateway: DispatchGateway,
        limiter: Optional[OTPRateLimiter] = None,
        policy: Optional[OTPPolicy] = None,
        keys: Optional[OTPKeys] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.policy = policy or (limiter.policy if limiter else OTPPolicy())
        self.keys = keys or (limiter.keys if limiter else OTPKeys())
        self.limiter = limiter or OTPRateLimiter(store, self.policy, self.keys)

    def _blocked(self, restriction: RestrictionInfo) -> IssueResult:
        outcome = RequestOutcome(restriction.reason.value)
        metrics.record_request(outcome.value)
        return IssueResult(
            outcome=outcome,
            message=restriction.message,
            retry_after=restriction.retry_after,
        )

    async def generate_and_store(
        self,
        identifier: str,
        context: DispatchContext,
    ) -> IssueResult:
        """
        Issue a new code for identifier and hand it to the dispatch gateway.

        Args:
            identifier: Email address or phone number the code proves control of
            context: Subject, template and template data for the notification

        Returns:
            IssueResult; blocked and delivery-failed calls are results, not errors

        Raises:
            StoreUnavailableError: The ephemeral store could not be reached
        """
        restriction = await self.limiter.check_restrictions(identifier)
        if not restriction.allowed:
            return self._blocked(restriction)

        restriction = await self.limiter.track_request(identifier)
        if not restriction.allowed:
            return self._blocked(restriction)

        code = generate_otp(self.policy.code_length)
        await self.store.set(self.keys.code(identifier), code, self.policy.code_ttl)
        await self.store.set(
            self.keys.cooldown(identifier),
            "true",
            self.policy.cooldown_seconds,
        )

        data = dict(context.data)
        data["otp"] = code
        delivery = await self.gateway.send(
            identifier.strip(),
            context.subject,
            context.template_id,
            data,
        )

        if not delivery.success:
            logger.warning(
                "otp_dispatch_failed",
                identifier=mask_identifier(identifier),
                gateway=self.gateway.name,
                template=context.template_id,
                error_code=delivery.error_code,
            )
            metrics.record_dispatch_failure(context.template_id)
            metrics.record_request(RequestOutcome.DELIVERY_FAILED.value)
            return IssueResult(
                outcome=RequestOutcome.DELIVERY_FAILED,
                message="We could not deliver your OTP. Please try again later.",
                retry_after=self.policy.cooldown_seconds,
                error_code=delivery.error_code,
            )

        logger.info(
            "otp_issued",
            identifier=mask_identifier(identifier),
            template=context.template_id,
            expires_in=self.policy.code_ttl,
        )
        metrics.record_request(RequestOutcome.ISSUED.value)
        return IssueResult(
            outcome=RequestOutcome.ISSUED,
            message="OTP sent. Please check your inbox to continue.",
        )
