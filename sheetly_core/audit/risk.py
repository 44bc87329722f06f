"""
Audit Risk Levels
=================
Risk classification for audit entries.
"""

from typing import Any, Dict

from .event_types import FAILURE_EVENTS

LOW = "low"
MEDIUM = "medium"
HIGH = "high"


def calculate_risk_level(action: str, details: Dict[str, Any]) -> str:
    """
    Classify an audit entry.

    Repeated failures or an explicit suspicious flag in the details are
    high risk; any failed OTP action is medium; everything else is low.
    """
    if details.get("failed_attempts", 0) > 3:
        return HIGH
    if details.get("suspicious_activity"):
        return HIGH
    if action in FAILURE_EVENTS:
        return MEDIUM
    return LOW
