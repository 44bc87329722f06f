"""
Twilio Delivery Channel
=======================
Sends OTP messages through the Twilio Messages API.
"""

import httpx
from base64 import b64encode
from typing import Any, Dict, Optional
import structlog

from sheetly_core.errors import DeliveryError
from sheetly_core.messaging import mask_phone

from .base import DeliveryChannel, DeliveryResult
from .config import DeliveryConfig

logger = structlog.get_logger(__name__)


class TwilioChannel(DeliveryChannel):
    """
    Provider channel backed by Twilio.

    POSTs a form-encoded To/From/Body payload with HTTP Basic auth.
    Provider rejections and transport failures (timeouts included) are
    raised internally as DeliveryError and returned as a failed
    DeliveryResult.
    """

    name = "twilio"

    def __init__(
        self,
        config: DeliveryConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: Credentials, sender number and timeout
            transport: Optional httpx transport (tests use MockTransport)
        """
        super().__init__()
        self.config = config
        self.messages_url = (
            f"{config.base_url.rstrip('/')}/2010-04-01/Accounts/"
            f"{config.account_sid}/Messages.json"
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        """Create HTTP client with auth."""
        if self._client is None:
            credentials = f"{self.config.account_sid}:{self.config.auth_token}"
            auth = b64encode(credentials.encode()).decode()
            self._client = httpx.AsyncClient(
                headers={"Authorization": f"Basic {auth}"},
                timeout=self.config.timeout,
                transport=self._transport,
            )
        await super().initialize()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        await super().close()

    async def send(self, phone_number: str, message: str) -> DeliveryResult:
        try:
            data = await self._post_message(phone_number, message)
        except DeliveryError as e:
            logger.error(
                "Twilio send failed",
                to=mask_phone(phone_number),
                status_code=e.status_code,
                error=e.message,
            )
            return DeliveryResult(
                success=False,
                message=e.message,
                provider=self.name,
                error_code=e.error_code,
                status_code=e.status_code,
            )

        logger.info(
            "Twilio SMS accepted",
            to=mask_phone(phone_number),
            delivery_id=data.get("sid"),
        )
        return DeliveryResult(
            success=True,
            message="SMS sent successfully",
            delivery_id=data.get("sid"),
            provider=self.name,
        )

    async def _post_message(self, phone_number: str, message: str) -> Dict[str, Any]:
        if self._client is None:
            await self.initialize()

        payload = {
            "To": phone_number,
            "From": self.config.from_number,
            "Body": message,
        }

        try:
            response = await self._client.post(self.messages_url, data=payload)
        except httpx.TimeoutException as e:
            raise DeliveryError(
                f"SMS provider timed out: {e}",
                provider=self.name,
            ) from e
        except httpx.HTTPError as e:
            raise DeliveryError(
                f"SMS provider unreachable: {e}",
                provider=self.name,
            ) from e

        data = self._json_body(response)

        if not response.is_success:
            error_code = data.get("code")
            raise DeliveryError(
                data.get("message") or "Failed to send SMS",
                provider=self.name,
                status_code=response.status_code,
                error_code=str(error_code) if error_code is not None else None,
            )

        return data

    @staticmethod
    def _json_body(response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
