"""
OTP Models
==========
Stored OTP records and service results.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class OTPRecord:
    """The most recently issued OTP for one phone number."""
    code: str
    issued_at: float  # epoch seconds from the store's clock
    attempts: int = 0

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.issued_at > ttl_seconds


@dataclass
class OTPResult:
    """Uniform outcome of an issuance request."""
    success: bool
    message: str
    delivery_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.delivery_id is not None:
            d["deliveryId"] = self.delivery_id
        return d
