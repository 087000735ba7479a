"""
HTTP Mail Gateway
=================
Sends OTP mails through a templated mail service over HTTP.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from ..logging import mask_identifier
from .base import DispatchGateway, DispatchResult

logger = structlog.get_logger(__name__)


class HttpMailGateway(DispatchGateway):
    """
    Mail service client.

    POSTs {to, subject, template, data} as JSON to `{base_url}/send` and
    expects an optional {"id": ...} body on success.
    """

    name = "http_mail"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Mail service URL (e.g., "http://mailer:8025/v1")
            api_key: Bearer token for the mail service
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        """Create HTTP client with auth."""
        headers = {
            "User-Agent": "otpguard-mail-gateway",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )
        await super().initialize()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        await super().close()

    async def send(
        self,
        recipient: str,
        subject: str,
        template_id: str,
        data: Dict[str, Any],
    ) -> DispatchResult:
        """Send a templated mail."""
        if not self._client:
            await self.initialize()

        payload = {
            "to": recipient,
            "subject": subject,
            "template": template_id,
            "data": data,
        }

        try:
            response = await self._client.post("/send", json=payload)
        except httpx.TimeoutException:
            logger.warning(
                "Mail gateway timed out",
                recipient=mask_identifier(recipient),
                template=template_id,
            )
            return DispatchResult(
                success=False,
                error_code="timeout",
                error_message="Mail service timed out",
            )
        except httpx.HTTPError as e:
            logger.warning(
                "Mail gateway unreachable",
                recipient=mask_identifier(recipient),
                template=template_id,
                error=str(e),
            )
            return DispatchResult(
                success=False,
                error_code="unreachable",
                error_message=str(e),
            )

        if response.status_code >= 400:
            logger.warning(
                "Mail gateway rejected message",
                recipient=mask_identifier(recipient),
                template=template_id,
                status_code=response.status_code,
            )
            return DispatchResult(
                success=False,
                error_code=f"http_{response.status_code}",
                error_message=response.text[:200],
            )

        message_id = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message_id = body.get("id")

        return DispatchResult(success=True, message_id=message_id)
