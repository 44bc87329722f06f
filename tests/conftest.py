"""
Shared fixtures for sheetly-core tests.
"""

from typing import List, Optional, Tuple

import pytest

from sheetly_core.audit import AuditSink, InMemoryAuditSink, SecurityAuditEvent
from sheetly_core.config import OTPSettings
from sheetly_core.delivery import DeliveryChannel, DeliveryResult
from sheetly_core.otp import OTPService

# Aligned to a 60s boundary so window arithmetic in tests is exact.
START_TIME = 1_699_999_980.0


class FakeClock:
    """Controllable time source, in seconds."""

    def __init__(self, start: float = START_TIME):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingChannel(DeliveryChannel):
    """Delivery channel that records calls and can be told to fail."""

    name = "recording"

    def __init__(self, fail_with: Optional[str] = None, raise_exc: Optional[Exception] = None):
        super().__init__()
        self.fail_with = fail_with
        self.raise_exc = raise_exc
        self.sent: List[Tuple[str, str]] = []

    async def send(self, phone_number: str, message: str) -> DeliveryResult:
        self.sent.append((phone_number, message))
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.fail_with is not None:
            return DeliveryResult(success=False, message=self.fail_with, provider=self.name)
        return DeliveryResult(
            success=True,
            message="SMS sent successfully",
            delivery_id=f"SM{len(self.sent):032d}",
            provider=self.name,
        )


class BrokenAuditSink(AuditSink):
    """Audit sink that always raises."""

    def __init__(self):
        self.calls = 0

    async def log(self, event: SecurityAuditEvent) -> None:
        self.calls += 1
        raise RuntimeError("audit store offline")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def settings():
    return OTPSettings(rate_limit_max_requests=3, rate_limit_window_ms=60_000)


@pytest.fixture
def service(channel, audit_sink, settings, clock):
    return OTPService(
        delivery=channel,
        audit_sink=audit_sink,
        settings=settings,
        clock=clock,
    )
