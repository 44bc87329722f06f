"""
OTP Codes
=========
Secure code generation and comparison.
"""

import hmac
import secrets


def generate_otp(length: int = 6) -> str:
    """
    Generate a secure random numeric OTP.

    Args:
        length: Number of digits

    Returns:
        Zero-padded OTP string
    """
    if length < 1:
        raise ValueError("OTP length must be at least 1")
    return str(secrets.randbelow(10 ** length)).zfill(length)


def codes_match(submitted: str, expected: str) -> bool:
    """Constant-time comparison of a submitted code against the stored one."""
    if not isinstance(submitted, str):
        return False
    return hmac.compare_digest(submitted.encode(), expected.encode())
