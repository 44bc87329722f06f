"""
Audit Sinks
===========
Append-only destinations for security audit events.

OTPService receives a sink at construction; it never reaches for a
global audit logger.
"""

import dataclasses
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple
import structlog

from .event_types import FAILURE_EVENTS
from .hashing import hash_for, verify_chain_integrity
from .models import SecurityAuditEvent

logger = structlog.get_logger(__name__)

SUSPICIOUS_FAILURE_COUNT = 5
SUSPICIOUS_WINDOW = timedelta(minutes=5)


class AuditSink(ABC):
    """Destination for security audit events."""

    @abstractmethod
    async def log(self, event: SecurityAuditEvent) -> None:
        """Append an event. The return value is never relied upon."""
        pass


class InMemoryAuditSink(AuditSink):
    """
    Hash-chained audit trail held in process memory.

    Every appended event is sealed with a SHA-256 hash over the previous
    event's hash, so the trail can be checked with verify().
    """

    def __init__(self, max_events: Optional[int] = None):
        """
        Args:
            max_events: Keep only the most recent N events (None = unbounded)
        """
        self.max_events = max_events
        self._events: List[SecurityAuditEvent] = []
        self._previous_hash: Optional[str] = None
        self._trimmed = False
        self.suspicious_actors: List[str] = []

    async def log(self, event: SecurityAuditEvent) -> None:
        sealed = dataclasses.replace(
            event,
            previous_hash=self._previous_hash,
            hash=hash_for(event, self._previous_hash),
        )
        self._previous_hash = sealed.hash
        self._events.append(sealed)

        if self.max_events is not None and len(self._events) > self.max_events:
            self._events = self._events[-self.max_events:]
            self._trimmed = True

        self._analyze(sealed)

    def _analyze(self, event: SecurityAuditEvent) -> None:
        if event.success or event.action not in FAILURE_EVENTS:
            return
        if not event.actor_address:
            return

        since = event.timestamp - SUSPICIOUS_WINDOW
        recent = [
            e for e in self._events
            if not e.success
            and e.action in FAILURE_EVENTS
            and e.actor_address == event.actor_address
            and e.timestamp > since
        ]
        if len(recent) >= SUSPICIOUS_FAILURE_COUNT:
            if event.actor_address in self.suspicious_actors:
                return
            self.suspicious_actors.append(event.actor_address)
            logger.warning(
                "security.suspicious_activity",
                reason="Repeated OTP failures",
                actor_address=event.actor_address,
                count=len(recent),
            )

    @property
    def events(self) -> Tuple[SecurityAuditEvent, ...]:
        return tuple(self._events)

    def query(
        self,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        success: Optional[bool] = None,
        risk_level: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[SecurityAuditEvent]:
        """
        Filter events, newest first.

        ``action`` matches as a substring, the other filters exactly.
        """
        indexed = [
            (i, e) for i, e in enumerate(self._events)
            if (action is None or action in e.action)
            and (resource is None or e.resource == resource)
            and (success is None or e.success == success)
            and (risk_level is None or e.risk_level == risk_level)
            and (start is None or e.timestamp >= start)
            and (end is None or e.timestamp <= end)
        ]
        # Later appends rank first on equal timestamps.
        indexed.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        results = [e for _, e in indexed]
        if limit is not None:
            results = results[:limit]
        return results

    def verify(self) -> Tuple[bool, Optional[int]]:
        """Check the hash chain of the retained events."""
        return verify_chain_integrity(self._events, anchored=not self._trimmed)

    def clear(self) -> None:
        self._events = []
        self._previous_hash = None
        self._trimmed = False
        self.suspicious_actors = []

    def __len__(self) -> int:
        return len(self._events)


class StructlogAuditSink(AuditSink):
    """Writes each event as one structured line on the security.audit logger."""

    def __init__(self, logger_name: str = "security.audit"):
        self._logger = structlog.get_logger(logger_name)

    async def log(self, event: SecurityAuditEvent) -> None:
        log_method = self._logger.info if event.success else self._logger.warning
        log_method(
            "audit.event",
            audit=True,
            event_id=event.id,
            action=event.action,
            resource=event.resource,
            success=event.success,
            risk_level=event.risk_level,
            actor_address=event.actor_address,
            details=event.details,
            event_timestamp=event.timestamp.isoformat(),
        )


class CompositeAuditSink(AuditSink):
    """Fans one event out to several sinks in order."""

    def __init__(self, sinks: Sequence[AuditSink]):
        self.sinks = list(sinks)

    async def log(self, event: SecurityAuditEvent) -> None:
        for sink in self.sinks:
            try:
                await sink.log(event)
            except Exception as e:
                logger.error(
                    "Audit sink failed",
                    sink=type(sink).__name__,
                    error=str(e),
                )
