"""
Delivery Channel Base
=====================
Contract shared by every OTP delivery mechanism.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import structlog

logger = structlog.get_logger(__name__)


@dataclass
class DeliveryResult:
    """Result of a single send. Not persisted beyond the audit entry."""
    success: bool
    message: str
    delivery_id: Optional[str] = None
    provider: Optional[str] = None
    error_code: Optional[str] = None
    status_code: Optional[int] = None


class DeliveryChannel(ABC):
    """
    Abstract base class for OTP delivery channels.

    send() never raises for expected failures; callers branch on
    DeliveryResult.success.
    """

    name: str = "base"

    def __init__(self):
        self._is_initialized = False

    async def initialize(self) -> None:
        """Acquire resources (e.g., HTTP clients)."""
        self._is_initialized = True
        logger.info("Delivery channel initialized", channel=self.name)

    async def close(self) -> None:
        """Release resources."""
        self._is_initialized = False
        logger.info("Delivery channel closed", channel=self.name)

    async def __aenter__(self) -> "DeliveryChannel":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def send(self, phone_number: str, message: str) -> DeliveryResult:
        """
        Send a text message.

        Args:
            phone_number: Recipient in E.164 form
            message: Message body

        Returns:
            DeliveryResult with the provider's outcome
        """
        pass
