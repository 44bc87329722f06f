"""
Audit Event Types
=================
Security audit actions emitted by the OTP subsystem.
"""

from enum import Enum


class AuditEventType(str, Enum):
    """Audit actions for OTP issuance and verification."""
    # Issuance
    SMS_OTP_SENT = "sms_otp_sent"
    SMS_OTP_FAILED = "sms_otp_failed"
    SMS_OTP_REJECTED = "sms_otp_rejected"

    # Verification
    SMS_OTP_VERIFIED = "sms_otp_verified"
    SMS_OTP_VERIFICATION_FAILED = "sms_otp_verification_failed"


FAILURE_EVENTS = frozenset({
    AuditEventType.SMS_OTP_FAILED.value,
    AuditEventType.SMS_OTP_REJECTED.value,
    AuditEventType.SMS_OTP_VERIFICATION_FAILED.value,
})
