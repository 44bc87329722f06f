"""
Audit Hashing
=============
Hash computation and chain verification for audit entries.
"""

import json
import hashlib
from datetime import datetime
from typing import Dict, Any, Optional, List, Tuple
import structlog

from .models import SecurityAuditEvent

logger = structlog.get_logger(__name__)


def compute_event_hash(
    previous_hash: Optional[str],
    timestamp: datetime,
    action: str,
    resource: str,
    success: bool,
    details: Dict[str, Any],
) -> str:
    """
    Compute the hash for an audit event.

    Each hash covers the previous event's hash, so editing or dropping
    an entry breaks every hash after it.

    Args:
        previous_hash: Hash of the previous event (None for first event)
        timestamp: Event timestamp
        action: Audit action
        resource: Resource the action touched
        success: Outcome flag
        details: Event details

    Returns:
        SHA-256 hex digest
    """
    hash_input = json.dumps({
        "previous_hash": previous_hash,
        "timestamp": timestamp.isoformat(),
        "action": action,
        "resource": resource,
        "success": success,
        "details": details,
    }, sort_keys=True, separators=(',', ':'), default=str)

    return hashlib.sha256(hash_input.encode()).hexdigest()


def hash_for(event: SecurityAuditEvent, previous_hash: Optional[str]) -> str:
    return compute_event_hash(
        previous_hash,
        event.timestamp,
        event.action,
        event.resource,
        event.success,
        event.details,
    )


def verify_chain_integrity(
    events: List[SecurityAuditEvent],
    anchored: bool = True,
) -> Tuple[bool, Optional[int]]:
    """
    Verify the integrity of an audit event chain.

    Args:
        events: Events in chronological order
        anchored: The first event must be the genesis entry. Pass False
            when older entries were trimmed from the front.

    Returns:
        Tuple of (is_valid, first_invalid_index)
    """
    if not events:
        return True, None

    if anchored and events[0].previous_hash is not None:
        return False, 0

    for i, event in enumerate(events):
        expected_hash = hash_for(event, event.previous_hash)
        if event.hash != expected_hash:
            logger.warning(
                "Audit chain integrity violation",
                event_id=event.id,
                index=i,
                expected_hash=expected_hash[:16],
                actual_hash=(event.hash or "")[:16],
            )
            return False, i

        if i > 0 and event.previous_hash != events[i - 1].hash:
            logger.warning(
                "Audit chain linkage broken",
                event_id=event.id,
                index=i,
            )
            return False, i

    return True, None
