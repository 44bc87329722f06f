"""
OTP Service
===========
Issues OTPs over a delivery channel and verifies them, with rate limiting
and a security audit trail around both paths.
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
import structlog

from sheetly_core.audit import AuditEventType, AuditSink, SecurityAuditEvent, calculate_risk_level
from sheetly_core.config import OTPSettings
from sheetly_core.delivery import DeliveryChannel, DeliveryResult
from sheetly_core.errors import DeliveryError, OTPError, RateLimitError, ValidationError, VerificationMismatch
from sheetly_core.messaging import PhoneNumberValidator, mask_phone
from sheetly_core.rate_limit import FixedWindowRateLimiter

from .codes import generate_otp
from .models import OTPResult
from .store import OTPStore

logger = structlog.get_logger(__name__)

INVALID_PHONE_MESSAGE = "Invalid phone number format"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
MESSAGE_TEMPLATE = (
    "Your Excel Pro AI verification code is: {otp}. "
    "This code will expire in {expiry}."
)


class OTPService:
    """
    Orchestrates OTP issuance and verification.

    The delivery channel and audit sink are injected. The store and rate
    limiter belong to this instance and are built from the settings when
    not supplied.

    Every send_otp call that gets past phone validation writes exactly one
    audit event: sms_otp_sent or sms_otp_failed. Malformed phone numbers
    are only audited when settings.audit_invalid_input is enabled.
    """

    def __init__(
        self,
        delivery: DeliveryChannel,
        audit_sink: AuditSink,
        settings: Optional[OTPSettings] = None,
        store: Optional[OTPStore] = None,
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
        validator: Optional[PhoneNumberValidator] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.delivery = delivery
        self.audit_sink = audit_sink
        self.settings = settings if settings is not None else OTPSettings()
        self._clock = clock
        self.store = (
            store if store is not None
            else OTPStore(ttl_seconds=self.settings.ttl_seconds, clock=clock)
        )
        self.rate_limiter = (
            rate_limiter if rate_limiter is not None
            else FixedWindowRateLimiter(clock=clock)
        )
        self.validator = validator if validator is not None else PhoneNumberValidator()

    def compose_message(self, otp: str) -> str:
        minutes = self.settings.ttl_minutes
        expiry = "1 minute" if minutes == 1 else f"{minutes} minutes"
        return MESSAGE_TEMPLATE.format(otp=otp, expiry=expiry)

    async def send_otp(
        self,
        phone_number: str,
        otp: str,
        *,
        actor_address: Optional[str] = None,
    ) -> OTPResult:
        """
        Deliver an OTP and remember it for verification.

        Args:
            phone_number: Recipient in E.164 form
            otp: Code generated by the authentication flow
            actor_address: Client IP, recorded in the audit trail

        Returns:
            OTPResult; failures carry the error message, never raise
        """
        if not self.validator.is_valid(phone_number):
            error = ValidationError(INVALID_PHONE_MESSAGE)
            logger.warning("OTP send rejected", reason="invalid_phone")
            if self.settings.audit_invalid_input:
                await self._audit(
                    AuditEventType.SMS_OTP_REJECTED,
                    success=False,
                    details={"phone_number": phone_number, "error": error.message, "stage": "send"},
                    actor_address=actor_address,
                )
            return OTPResult(success=False, message=error.message)

        try:
            delivery = await self._deliver(phone_number, otp)
        except OTPError as e:
            return await self._send_failed(phone_number, e.message, actor_address)
        except Exception as e:
            logger.error(
                "Unexpected OTP send failure",
                phone=mask_phone(phone_number),
                error=str(e),
            )
            return await self._send_failed(phone_number, str(e) or "Failed to send SMS", actor_address)

        await self._audit(
            AuditEventType.SMS_OTP_SENT,
            success=True,
            details={"phone_number": phone_number, "delivery_id": delivery.delivery_id},
            actor_address=actor_address,
        )
        logger.info(
            "OTP sent",
            phone=mask_phone(phone_number),
            delivery_id=delivery.delivery_id,
            expires_in=self.settings.ttl_seconds,
        )
        return OTPResult(
            success=True,
            message=delivery.message,
            delivery_id=delivery.delivery_id,
        )

    async def _deliver(self, phone_number: str, otp: str) -> DeliveryResult:
        limit = self.rate_limiter.check(
            phone_number,
            self.settings.rate_limit_max_requests,
            self.settings.rate_limit_window_ms,
        )
        if not limit.allowed:
            raise RateLimitError(RATE_LIMIT_MESSAGE, retry_after=limit.retry_after)

        result = await self.delivery.send(phone_number, self.compose_message(otp))
        if not result.success:
            raise DeliveryError(
                result.message or "Failed to send SMS",
                provider=result.provider or self.delivery.name,
                status_code=result.status_code,
                error_code=result.error_code,
            )

        self.store.put(phone_number, otp)
        return result

    async def _send_failed(
        self,
        phone_number: str,
        message: str,
        actor_address: Optional[str],
    ) -> OTPResult:
        logger.warning("OTP send failed", phone=mask_phone(phone_number), error=message)
        await self._audit(
            AuditEventType.SMS_OTP_FAILED,
            success=False,
            details={"phone_number": phone_number, "error": message},
            actor_address=actor_address,
        )
        return OTPResult(success=False, message=message)

    async def issue_otp(
        self,
        phone_number: str,
        *,
        actor_address: Optional[str] = None,
    ) -> OTPResult:
        """Generate a fresh numeric code and send it."""
        otp = generate_otp(self.settings.code_length)
        return await self.send_otp(phone_number, otp, actor_address=actor_address)

    async def verify_otp(
        self,
        phone_number: str,
        code: str,
        *,
        actor_address: Optional[str] = None,
    ) -> bool:
        """
        Check a submitted code. A matching code is consumed.

        Fails closed: unknown phone, expired record or wrong code all
        return False.
        """
        if not self.validator.is_valid(phone_number):
            logger.warning("OTP verification rejected", reason="invalid_phone")
            if self.settings.audit_invalid_input:
                await self._audit(
                    AuditEventType.SMS_OTP_REJECTED,
                    success=False,
                    details={
                        "phone_number": phone_number,
                        "error": INVALID_PHONE_MESSAGE,
                        "stage": "verify",
                    },
                    actor_address=actor_address,
                )
            return False

        try:
            self.store.consume(phone_number, code, self.settings.max_verify_attempts)
        except VerificationMismatch as e:
            logger.warning(
                "OTP verification failed",
                phone=mask_phone(phone_number),
                reason=e.reason,
            )
            await self._audit(
                AuditEventType.SMS_OTP_VERIFICATION_FAILED,
                success=False,
                details={
                    "phone_number": phone_number,
                    "error": e.message,
                    "reason": e.reason,
                    "failed_attempts": e.attempts,
                },
                actor_address=actor_address,
            )
            return False

        logger.info("OTP verified", phone=mask_phone(phone_number))
        await self._audit(
            AuditEventType.SMS_OTP_VERIFIED,
            success=True,
            details={"phone_number": phone_number},
            actor_address=actor_address,
        )
        return True

    def cleanup(self) -> Dict[str, int]:
        """Purge expired OTPs and stale rate-limit windows."""
        return {
            "expired_otps": self.store.purge_expired(),
            "stale_windows": self.rate_limiter.cleanup(),
        }

    async def _audit(
        self,
        action: AuditEventType,
        success: bool,
        details: Dict[str, Any],
        actor_address: Optional[str],
    ) -> None:
        event = SecurityAuditEvent(
            action=action.value,
            resource=self.settings.audit_resource,
            details=details,
            actor_address=actor_address,
            success=success,
            timestamp=datetime.fromtimestamp(self._clock(), timezone.utc),
            risk_level=calculate_risk_level(action.value, details),
        )
        # A broken audit sink must not fail the primary operation.
        try:
            await self.audit_sink.log(event)
        except Exception as e:
            logger.error(
                "Audit sink failed",
                action=action.value,
                event_id=event.id,
                error=str(e),
            )
