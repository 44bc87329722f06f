"""
Audit Models
============
Data model for security audit entries.
"""

import uuid
from datetime import datetime
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict, field


@dataclass(frozen=True)
class SecurityAuditEvent:
    """A security audit entry. Sinks append these; nothing edits them."""
    action: str
    resource: str
    details: Dict[str, Any]
    actor_address: Optional[str]
    success: bool
    timestamp: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    risk_level: str = "low"  # "low", "medium", "high"
    hash: Optional[str] = None
    previous_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        d = asdict(self)
        d['timestamp'] = self.timestamp.isoformat()
        return d
