"""
Audit Logging Module
====================
Security audit events and append-only sinks for the OTP flow.
"""

from .event_types import AuditEventType, FAILURE_EVENTS
from .models import SecurityAuditEvent
from .hashing import compute_event_hash, verify_chain_integrity
from .risk import calculate_risk_level
from .sinks import AuditSink, InMemoryAuditSink, StructlogAuditSink, CompositeAuditSink

__all__ = [
    # Event Types
    "AuditEventType",
    "FAILURE_EVENTS",
    # Models
    "SecurityAuditEvent",
    # Hashing
    "compute_event_hash",
    "verify_chain_integrity",
    # Risk
    "calculate_risk_level",
    # Sinks
    "AuditSink",
    "InMemoryAuditSink",
    "StructlogAuditSink",
    "CompositeAuditSink",
]
