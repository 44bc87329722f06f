"""
Tests for audit events, sinks and risk levels.
"""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest
from structlog.testing import capture_logs

from sheetly_core.audit import (
    AuditEventType,
    CompositeAuditSink,
    InMemoryAuditSink,
    SecurityAuditEvent,
    StructlogAuditSink,
    calculate_risk_level,
    compute_event_hash,
    verify_chain_integrity,
)

T0 = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def make_event(action="sms_otp_sent", success=True, actor="10.0.0.1", at=T0, **details):
    return SecurityAuditEvent(
        action=action,
        resource="auth",
        details=details or {"phone_number": "+15005550006"},
        actor_address=actor,
        success=success,
        timestamp=at,
    )


class TestHashing:
    """Hash chaining."""

    def test_compute_event_hash_deterministic(self):
        """Should produce the same 64-char hash for the same inputs."""
        hash1 = compute_event_hash(None, T0, "sms_otp_sent", "auth", True, {"key": "value"})
        hash2 = compute_event_hash(None, T0, "sms_otp_sent", "auth", True, {"key": "value"})

        assert hash1 == hash2
        assert len(hash1) == 64

    def test_outcome_changes_hash(self):
        """Should change the hash when the outcome differs."""
        ok = compute_event_hash(None, T0, "sms_otp_sent", "auth", True, {})
        failed = compute_event_hash(None, T0, "sms_otp_sent", "auth", False, {})

        assert ok != failed


class TestInMemoryAuditSink:
    """Append-only hash-chained trail."""

    @pytest.mark.asyncio
    async def test_chain_links_events(self):
        """Should link each event to the previous hash."""
        sink = InMemoryAuditSink()

        await sink.log(make_event())
        await sink.log(make_event(action="sms_otp_failed", success=False))

        first, second = sink.events
        assert first.previous_hash is None
        assert second.previous_hash == first.hash
        assert sink.verify() == (True, None)

    @pytest.mark.asyncio
    async def test_tampering_detected(self):
        """Should report the index of a tampered event."""
        sink = InMemoryAuditSink()
        for _ in range(3):
            await sink.log(make_event())

        events = list(sink.events)
        events[1] = dataclasses.replace(events[1], success=False)

        assert verify_chain_integrity(events) == (False, 1)

    @pytest.mark.asyncio
    async def test_original_event_not_mutated(self):
        """Should seal a copy and leave the caller's event untouched."""
        sink = InMemoryAuditSink()
        event = make_event()

        await sink.log(event)

        assert event.hash is None
        assert sink.events[0].id == event.id

    @pytest.mark.asyncio
    async def test_query_filters_newest_first(self):
        """Should filter events and return them newest first."""
        sink = InMemoryAuditSink()
        await sink.log(make_event(at=T0))
        await sink.log(make_event(action="sms_otp_failed", success=False, at=T0 + timedelta(seconds=1)))
        await sink.log(make_event(at=T0 + timedelta(seconds=2)))

        sent = sink.query(action="sms_otp_sent")
        failures = sink.query(success=False)

        assert [e.timestamp for e in sent] == [T0 + timedelta(seconds=2), T0]
        assert len(failures) == 1
        assert len(sink.query(limit=2)) == 2
        assert len(sink.query(start=T0 + timedelta(seconds=1))) == 2

    @pytest.mark.asyncio
    async def test_query_equal_timestamps_newest_first(self):
        """Should order events sharing a timestamp by arrival, latest first."""
        sink = InMemoryAuditSink()
        for reason in ("mismatch", "not_found", "expired"):
            await sink.log(make_event(action="sms_otp_verification_failed", success=False, reason=reason))

        results = sink.query(action="sms_otp_verification_failed")

        assert [e.details["reason"] for e in results] == ["expired", "not_found", "mismatch"]
        assert sink.query(limit=1)[0].details["reason"] == "expired"

    @pytest.mark.asyncio
    async def test_max_events_trims_but_chain_verifies(self):
        """Should trim old events and still verify the retained chain."""
        sink = InMemoryAuditSink(max_events=2)
        for _ in range(3):
            await sink.log(make_event())

        assert len(sink) == 2
        assert sink.verify() == (True, None)

    @pytest.mark.asyncio
    async def test_repeated_failures_flag_actor(self):
        """Should flag an address after five failures within the window."""
        sink = InMemoryAuditSink()

        with capture_logs() as logs:
            for i in range(5):
                await sink.log(make_event(
                    action=AuditEventType.SMS_OTP_VERIFICATION_FAILED.value,
                    success=False,
                    actor="203.0.113.7",
                    at=T0 + timedelta(seconds=i),
                ))

        assert sink.suspicious_actors == ["203.0.113.7"]
        assert any(entry["event"] == "security.suspicious_activity" for entry in logs)

    @pytest.mark.asyncio
    async def test_flagged_actor_recorded_once(self):
        """Should list a flagged address once however many failures follow."""
        sink = InMemoryAuditSink()

        with capture_logs() as logs:
            for i in range(7):
                await sink.log(make_event(
                    action="sms_otp_failed",
                    success=False,
                    actor="203.0.113.7",
                    at=T0 + timedelta(seconds=i),
                ))

        assert sink.suspicious_actors == ["203.0.113.7"]
        flagged = [entry for entry in logs if entry["event"] == "security.suspicious_activity"]
        assert len(flagged) == 1

    @pytest.mark.asyncio
    async def test_spread_out_failures_not_flagged(self):
        """Should not flag failures spread beyond the window."""
        sink = InMemoryAuditSink()

        for i in range(5):
            await sink.log(make_event(
                action="sms_otp_failed",
                success=False,
                at=T0 + timedelta(minutes=2 * i),
            ))

        assert sink.suspicious_actors == []


class TestStructlogAuditSink:
    """Structured log output."""

    @pytest.mark.asyncio
    async def test_logs_event_fields(self):
        """Should log events as structured lines, failures at warning level."""
        sink = StructlogAuditSink()

        with capture_logs() as logs:
            await sink.log(make_event())
            await sink.log(make_event(action="sms_otp_failed", success=False))

        assert logs[0]["event"] == "audit.event"
        assert logs[0]["action"] == "sms_otp_sent"
        assert logs[0]["log_level"] == "info"
        assert logs[1]["log_level"] == "warning"
        assert logs[1]["details"] == {"phone_number": "+15005550006"}


class TestCompositeAuditSink:
    """Fan-out."""

    @pytest.mark.asyncio
    async def test_fans_out_past_broken_sink(self):
        """Should reach later sinks when an earlier one raises."""
        from tests.conftest import BrokenAuditSink

        broken = BrokenAuditSink()
        memory = InMemoryAuditSink()
        sink = CompositeAuditSink([broken, memory])

        await sink.log(make_event())

        assert broken.calls == 1
        assert len(memory) == 1


class TestRiskLevel:
    """Risk classification."""

    def test_success_is_low(self):
        """Should rate successful actions low."""
        assert calculate_risk_level("sms_otp_sent", {}) == "low"

    def test_failures_are_medium(self):
        """Should rate ordinary failures medium."""
        assert calculate_risk_level("sms_otp_failed", {}) == "medium"
        assert calculate_risk_level("sms_otp_verification_failed", {}) == "medium"

    def test_many_attempts_are_high(self):
        """Should rate repeated attempts and suspicious activity high."""
        assert calculate_risk_level("sms_otp_verification_failed", {"failed_attempts": 4}) == "high"
        assert calculate_risk_level("sms_otp_sent", {"suspicious_activity": True}) == "high"
