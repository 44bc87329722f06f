"""
OTP Delivery Channels
=====================
Simulated and Twilio-backed SMS delivery.
"""

from .base import DeliveryChannel, DeliveryResult
from .config import DeliveryConfig, MODE_SIMULATED, MODE_TWILIO
from .simulated import SimulatedChannel
from .twilio import TwilioChannel
from .factory import create_delivery_channel

__all__ = [
    # Base
    "DeliveryChannel",
    "DeliveryResult",
    # Config
    "DeliveryConfig",
    "MODE_SIMULATED",
    "MODE_TWILIO",
    # Channels
    "SimulatedChannel",
    "TwilioChannel",
    "create_delivery_channel",
]
