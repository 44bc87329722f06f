"""
Messaging Utilities
===================
Phone number validation for OTP delivery.
"""

from .phone_utils import E164_PATTERN, PhoneNumberValidator, mask_phone, validate_e164

__all__ = [
    "E164_PATTERN",
    "PhoneNumberValidator",
    "mask_phone",
    "validate_e164",
]
