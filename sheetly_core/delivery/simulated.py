"""
Simulated Delivery Channel
==========================
Development channel that pretends to send SMS.
"""

import asyncio
import secrets
import structlog

from sheetly_core.messaging import mask_phone

from .base import DeliveryChannel, DeliveryResult

logger = structlog.get_logger(__name__)


class SimulatedChannel(DeliveryChannel):
    """
    Always succeeds after a fixed delay.

    For development and testing only; nothing leaves the process.
    """

    name = "simulated"

    def __init__(self, delay_seconds: float = 0.5):
        super().__init__()
        self.delay_seconds = delay_seconds
        self.sent_count = 0

    async def send(self, phone_number: str, message: str) -> DeliveryResult:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        delivery_id = "SM" + secrets.token_hex(16)
        self.sent_count += 1

        logger.info(
            "Simulated SMS sent",
            to=mask_phone(phone_number),
            delivery_id=delivery_id,
            length=len(message),
        )

        return DeliveryResult(
            success=True,
            message="SMS sent successfully",
            delivery_id=delivery_id,
            provider=self.name,
        )
