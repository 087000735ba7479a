"""
Logging Gateway
===============
Development gateway that logs the message instead of delivering it.
"""

from collections import deque
from typing import Any, Deque, Dict

import structlog

from .base import DispatchGateway, DispatchResult

logger = structlog.get_logger(__name__)


class LoggingGateway(DispatchGateway):
    """
    Logs every message, including the code, and keeps the latest ones in `sent`.

    For local development only: OTP codes end up in the logs.
    """

    name = "logging"

    def __init__(self, keep_last: int = 100):
        self.sent: Deque[Dict[str, Any]] = deque(maxlen=keep_last)
        self._count = 0

    async def send(
        self,
        recipient: str,
        subject: str,
        template_id: str,
        data: Dict[str, Any],
    ) -> DispatchResult:
        message = {
            "recipient": recipient,
            "subject": subject,
            "template_id": template_id,
            "data": dict(data),
        }
        self._count += 1
        self.sent.append(message)
        logger.info("otp_dispatch_logged", **message)
        return DispatchResult(success=True, message_id=f"log-{self._count}")
