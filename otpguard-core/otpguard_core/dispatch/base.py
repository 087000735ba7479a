"""
Dispatch Gateway Interface
==========================
Delivery of OTP notifications (email/SMS) to the recipient.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class DispatchResult:
    """Result of a delivery attempt."""
    success: bool
    message_id: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class DispatchGateway(ABC):
    """
    Abstract base class for delivery gateways.

    Delivery errors are returned as DispatchResult(success=False), never
    raised, and never retried by the gateway.
    """

    name: str = "base"

    async def initialize(self) -> None:
        """Acquire resources (e.g., HTTP clients)."""
        logger.info("Dispatch gateway initialized", gateway=self.name)

    async def close(self) -> None:
        """Release resources."""
        logger.info("Dispatch gateway closed", gateway=self.name)

    @abstractmethod
    async def send(
        self,
        recipient: str,
        subject: str,
        template_id: str,
        data: Dict[str, Any],
    ) -> DispatchResult:
        """
        Deliver a templated message.

        Args:
            recipient: Email address or phone number
            subject: Message subject
            template_id: Template to render (e.g., "user-activation-mail")
            data: Template variables

        Returns:
            DispatchResult with delivery outcome
        """
