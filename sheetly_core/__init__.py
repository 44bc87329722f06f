"""
Sheetly Core Library
====================
OTP issuance and verification for the Sheetly spreadsheet service.
"""

__version__ = "0.1.0"

# Errors
from sheetly_core.errors import (
    OTPError,
    ValidationError,
    RateLimitError,
    DeliveryError,
    VerificationMismatch,
    ConfigurationError,
)

# Configuration
from sheetly_core.config import OTPSettings

# Messaging
from sheetly_core.messaging import (
    PhoneNumberValidator,
    validate_e164,
    mask_phone,
)

# Rate Limiting
from sheetly_core.rate_limit import (
    FixedWindowRateLimiter,
    RateLimitInfo,
    RateLimitResult,
)

# Audit
from sheetly_core.audit import (
    AuditEventType,
    SecurityAuditEvent,
    AuditSink,
    InMemoryAuditSink,
    StructlogAuditSink,
    CompositeAuditSink,
    compute_event_hash,
    verify_chain_integrity,
    calculate_risk_level,
)

# Delivery
from sheetly_core.delivery import (
    DeliveryChannel,
    DeliveryResult,
    DeliveryConfig,
    SimulatedChannel,
    TwilioChannel,
    create_delivery_channel,
)

# OTP
from sheetly_core.otp import (
    OTPRecord,
    OTPResult,
    OTPStore,
    OTPService,
    generate_otp,
)

# Bootstrap
from sheetly_core.bootstrap import create_otp_service

__all__ = [
    # Errors
    "OTPError",
    "ValidationError",
    "RateLimitError",
    "DeliveryError",
    "VerificationMismatch",
    "ConfigurationError",
    # Configuration
    "OTPSettings",
    # Messaging
    "PhoneNumberValidator",
    "validate_e164",
    "mask_phone",
    # Rate Limiting
    "FixedWindowRateLimiter",
    "RateLimitInfo",
    "RateLimitResult",
    # Audit
    "AuditEventType",
    "SecurityAuditEvent",
    "AuditSink",
    "InMemoryAuditSink",
    "StructlogAuditSink",
    "CompositeAuditSink",
    "compute_event_hash",
    "verify_chain_integrity",
    "calculate_risk_level",
    # Delivery
    "DeliveryChannel",
    "DeliveryResult",
    "DeliveryConfig",
    "SimulatedChannel",
    "TwilioChannel",
    "create_delivery_channel",
    # OTP
    "OTPRecord",
    "OTPResult",
    "OTPStore",
    "OTPService",
    "generate_otp",
    # Bootstrap
    "create_otp_service",
]
