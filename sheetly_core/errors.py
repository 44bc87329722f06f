"""
OTP Errors
==========
Exception taxonomy for OTP issuance and verification.

All of these are recovered at the OTPService boundary and turned into a
failure result; they never reach the caller of send_otp/verify_otp.
"""

from typing import Optional


class OTPError(Exception):
    """Base exception for the OTP subsystem."""

    retryable: bool = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(OTPError):
    """Raised when a phone number is not in E.164 form."""
    pass


class RateLimitError(OTPError):
    """Raised when a phone number exceeded its request quota."""

    retryable = True

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class DeliveryError(OTPError):
    """Raised when the provider rejects a message or cannot be reached."""

    retryable = True

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.error_code = error_code


class VerificationMismatch(OTPError):
    """Raised when a submitted code is wrong, expired or was never issued."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    MISMATCH = "mismatch"

    def __init__(self, message: str, reason: str = MISMATCH, attempts: int = 0):
        super().__init__(message)
        self.reason = reason
        self.attempts = attempts


class ConfigurationError(OTPError):
    """Raised when delivery is requested without usable credentials."""
    pass
