"""
OTP Issuance and Verification
=============================
OTP storage with expiry and the service that sends and verifies codes.
"""

from .models import OTPRecord, OTPResult
from .codes import generate_otp, codes_match
from .store import OTPStore
from .service import OTPService, INVALID_PHONE_MESSAGE, RATE_LIMIT_MESSAGE, MESSAGE_TEMPLATE

__all__ = [
    # Models
    "OTPRecord",
    "OTPResult",
    # Codes
    "generate_otp",
    "codes_match",
    # Store
    "OTPStore",
    # Service
    "OTPService",
    "INVALID_PHONE_MESSAGE",
    "RATE_LIMIT_MESSAGE",
    "MESSAGE_TEMPLATE",
]
