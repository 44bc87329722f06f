"""
OTP Store
=========
In-memory store of the latest OTP per phone number.

Entries live for the lifetime of the process; a restart forgets every
pending OTP, which is acceptable because OTPs are short-lived and can be
re-issued.
"""

import threading
import time
from typing import Callable, Dict, Optional
import structlog

from sheetly_core.errors import VerificationMismatch
from sheetly_core.messaging import mask_phone

from .codes import codes_match
from .models import OTPRecord

logger = structlog.get_logger(__name__)


class OTPStore:
    """
    One OTPRecord per phone number, overwritten on every issuance.

    Expiry is derived from issued_at and the TTL; an expired record may
    still be present until it is read or purged.
    """

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._records: Dict[str, OTPRecord] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def put(self, phone_number: str, code: str) -> OTPRecord:
        """Store a freshly issued code, replacing any previous one."""
        record = OTPRecord(code=code, issued_at=self._clock())
        with self._lock:
            self._records[phone_number] = record
        return record

    def get(self, phone_number: str) -> Optional[OTPRecord]:
        """Return the stored record, expired or not."""
        with self._lock:
            return self._records.get(phone_number)

    def is_live(self, phone_number: str) -> bool:
        record = self.get(phone_number)
        return record is not None and not record.is_expired(self._clock(), self.ttl_seconds)

    def consume(self, phone_number: str, code: str, max_attempts: int = 1) -> OTPRecord:
        """
        Check a submitted code and remove the record on success.

        A wrong code counts an attempt; once attempts reach max_attempts
        the record is discarded. Expired records are discarded on read.

        Raises:
            VerificationMismatch: No record, expired record or wrong code
        """
        now = self._clock()
        with self._lock:
            record = self._records.get(phone_number)

            if record is None:
                raise VerificationMismatch(
                    "No verification code found. Please request a new one.",
                    reason=VerificationMismatch.NOT_FOUND,
                )

            if record.is_expired(now, self.ttl_seconds):
                del self._records[phone_number]
                raise VerificationMismatch(
                    "Verification code has expired. Please request a new one.",
                    reason=VerificationMismatch.EXPIRED,
                )

            if not codes_match(code, record.code):
                record.attempts += 1
                if record.attempts >= max_attempts:
                    del self._records[phone_number]
                raise VerificationMismatch(
                    "Invalid verification code.",
                    reason=VerificationMismatch.MISMATCH,
                    attempts=record.attempts,
                )

            del self._records[phone_number]
            return record

    def discard(self, phone_number: str) -> bool:
        with self._lock:
            return self._records.pop(phone_number, None) is not None

    def purge_expired(self) -> int:
        """
        Remove every expired record.

        Returns:
            Number of records removed
        """
        now = self._clock()
        with self._lock:
            expired = [
                phone for phone, record in self._records.items()
                if record.is_expired(now, self.ttl_seconds)
            ]
            for phone in expired:
                del self._records[phone]

        for phone in expired:
            logger.debug("Expired OTP purged", phone=mask_phone(phone))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, phone_number: str) -> bool:
        return phone_number in self._records
