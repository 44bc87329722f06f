"""
Phone Utilities
===============
Phone number validation and masking.
"""

import re

E164_PATTERN = re.compile(r'\+[1-9]\d{1,14}')


def validate_e164(phone: str) -> bool:
    """
    Validate E.164 phone number format.

    No normalization is performed: "(415) 555-1234" is rejected,
    callers must submit the canonical "+14155551234" form.

    Args:
        phone: Phone number

    Returns:
        True if valid E.164 format
    """
    if not isinstance(phone, str):
        return False
    return E164_PATTERN.fullmatch(phone) is not None


def mask_phone(phone: str, visible: int = 4) -> str:
    """Mask a phone number for log output, keeping the last digits."""
    if not phone:
        return ""
    if len(phone) <= visible:
        return "*" * len(phone)
    return "*" * (len(phone) - visible) + phone[-visible:]


class PhoneNumberValidator:
    """Pure E.164 predicate, injectable into OTPService."""

    def is_valid(self, phone_number: str) -> bool:
        return validate_e164(phone_number)
