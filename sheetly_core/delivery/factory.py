"""
Delivery Channel Factory
========================
Selects the delivery channel variant from configuration.
"""

import structlog

from sheetly_core.errors import ConfigurationError

from .base import DeliveryChannel
from .config import DeliveryConfig, MODE_SIMULATED, MODE_TWILIO
from .simulated import SimulatedChannel
from .twilio import TwilioChannel

logger = structlog.get_logger(__name__)


def create_delivery_channel(config: DeliveryConfig) -> DeliveryChannel:
    """
    Build the channel named by config.mode.

    Raises:
        ConfigurationError: Unknown mode, or Twilio requested while the
            credentials are still placeholders
    """
    if config.mode == MODE_SIMULATED:
        return SimulatedChannel(delay_seconds=config.simulated_delay)

    if config.mode == MODE_TWILIO:
        if not config.is_configured:
            raise ConfigurationError(
                "Twilio delivery selected but TWILIO_ACCOUNT_SID, "
                "TWILIO_AUTH_TOKEN or TWILIO_PHONE_NUMBER is not set"
            )
        return TwilioChannel(config)

    raise ConfigurationError(f"Unknown SMS delivery mode: {config.mode}")
