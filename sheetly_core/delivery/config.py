"""
Delivery Configuration
======================
Credentials and channel selection, read once at startup.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

PLACEHOLDER_ACCOUNT_SID = "AC00000000000000000000000000000000"
PLACEHOLDER_AUTH_TOKEN = "your_auth_token"
PLACEHOLDER_FROM_NUMBER = "+15005550006"

MODE_SIMULATED = "simulated"
MODE_TWILIO = "twilio"


@dataclass(frozen=True)
class DeliveryConfig:
    """Configuration passed to delivery channel constructors."""
    account_sid: str = PLACEHOLDER_ACCOUNT_SID
    auth_token: str = PLACEHOLDER_AUTH_TOKEN
    from_number: str = PLACEHOLDER_FROM_NUMBER
    mode: str = MODE_SIMULATED
    base_url: str = "https://api.twilio.com"
    timeout: float = 10.0
    simulated_delay: float = 0.5

    @property
    def is_configured(self) -> bool:
        """False while any credential still holds its placeholder."""
        return (
            self.account_sid != PLACEHOLDER_ACCOUNT_SID
            and self.auth_token != PLACEHOLDER_AUTH_TOKEN
            and self.from_number != PLACEHOLDER_FROM_NUMBER
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DeliveryConfig":
        """Build a config from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            account_sid=env.get("TWILIO_ACCOUNT_SID") or PLACEHOLDER_ACCOUNT_SID,
            auth_token=env.get("TWILIO_AUTH_TOKEN") or PLACEHOLDER_AUTH_TOKEN,
            from_number=env.get("TWILIO_PHONE_NUMBER") or PLACEHOLDER_FROM_NUMBER,
            mode=(env.get("SMS_DELIVERY_MODE") or MODE_SIMULATED).lower(),
            base_url=env.get("TWILIO_API_BASE_URL", "https://api.twilio.com"),
            timeout=float(env.get("SMS_DELIVERY_TIMEOUT", "10.0")),
            simulated_delay=float(env.get("SMS_SIMULATED_DELAY", "0.5")),
        )
