"""
Tests for OTP storage, expiry and code helpers.
"""

import pytest

from sheetly_core.errors import VerificationMismatch
from sheetly_core.otp import OTPStore, codes_match, generate_otp

PHONE = "+15005550006"


class TestGenerateOTP:
    """Numeric code generation."""

    def test_generate_numeric(self):
        """Should generate a numeric code."""
        otp = generate_otp(length=6)

        assert len(otp) == 6
        assert otp.isdigit()

    def test_custom_length(self):
        """Should honour a custom length."""
        assert len(generate_otp(length=8)) == 8

    def test_invalid_length(self):
        """Should reject a non-positive length."""
        with pytest.raises(ValueError):
            generate_otp(length=0)

    def test_codes_match(self):
        """Should compare codes and reject a missing submission."""
        assert codes_match("123456", "123456") is True
        assert codes_match("123457", "123456") is False
        assert codes_match(None, "123456") is False


class TestOTPStore:
    """Record lifecycle."""

    def test_put_overwrites(self, clock):
        """Should replace the previous record on put."""
        store = OTPStore(clock=clock)

        store.put(PHONE, "111111")
        clock.advance(10)
        store.put(PHONE, "222222")

        record = store.get(PHONE)
        assert record.code == "222222"
        assert record.issued_at == clock.now
        assert len(store) == 1

    def test_consume_is_single_use(self, clock):
        """Should remove the record once consumed."""
        store = OTPStore(clock=clock)
        store.put(PHONE, "123456")

        record = store.consume(PHONE, "123456")

        assert record.code == "123456"
        assert PHONE not in store
        with pytest.raises(VerificationMismatch) as exc:
            store.consume(PHONE, "123456")
        assert exc.value.reason == VerificationMismatch.NOT_FOUND

    def test_expiry_is_derived(self, clock):
        """Should keep an expired record present until read or purged."""
        store = OTPStore(ttl_seconds=300, clock=clock)
        store.put(PHONE, "123456")

        clock.advance(300)
        assert store.is_live(PHONE) is True

        clock.advance(1)
        assert store.is_live(PHONE) is False
        assert PHONE in store

    def test_consume_expired(self, clock):
        """Should reject and drop an expired record."""
        store = OTPStore(ttl_seconds=300, clock=clock)
        store.put(PHONE, "123456")
        clock.advance(301)

        with pytest.raises(VerificationMismatch) as exc:
            store.consume(PHONE, "123456")

        assert exc.value.reason == VerificationMismatch.EXPIRED
        assert PHONE not in store

    def test_mismatch_terminal_by_default(self, clock):
        """Should drop the record on the first wrong code."""
        store = OTPStore(clock=clock)
        store.put(PHONE, "123456")

        with pytest.raises(VerificationMismatch) as exc:
            store.consume(PHONE, "000000")

        assert exc.value.reason == VerificationMismatch.MISMATCH
        assert exc.value.attempts == 1
        assert PHONE not in store

    def test_mismatch_with_attempt_budget(self, clock):
        """Should keep the record until the budget is spent."""
        store = OTPStore(clock=clock)
        store.put(PHONE, "123456")

        with pytest.raises(VerificationMismatch):
            store.consume(PHONE, "000000", max_attempts=3)

        assert store.get(PHONE).attempts == 1
        assert store.consume(PHONE, "123456", max_attempts=3).code == "123456"

    def test_purge_expired(self, clock):
        """Should purge only expired records."""
        store = OTPStore(ttl_seconds=300, clock=clock)
        store.put("+15005550001", "111111")
        clock.advance(200)
        store.put("+15005550002", "222222")
        clock.advance(200)

        assert store.purge_expired() == 1
        assert "+15005550001" not in store
        assert "+15005550002" in store

    def test_discard_and_clear(self, clock):
        """Should discard one record or clear them all."""
        store = OTPStore(clock=clock)
        store.put(PHONE, "123456")

        assert store.discard(PHONE) is True
        assert store.discard(PHONE) is False

        store.put(PHONE, "123456")
        store.clear()
        assert len(store) == 0
