"""
Service Bootstrap
=================
Builds an OTPService from the environment once at startup.
"""

from typing import Mapping, Optional
import structlog

from sheetly_core.audit import AuditSink, StructlogAuditSink
from sheetly_core.config import OTPSettings
from sheetly_core.delivery import DeliveryConfig, create_delivery_channel
from sheetly_core.otp import OTPService

logger = structlog.get_logger(__name__)


def create_otp_service(
    environ: Optional[Mapping[str, str]] = None,
    audit_sink: Optional[AuditSink] = None,
) -> OTPService:
    """
    Read configuration and wire an OTPService.

    Args:
        environ: Environment mapping (defaults to os.environ)
        audit_sink: Audit destination (defaults to StructlogAuditSink)

    Raises:
        ConfigurationError: Twilio delivery requested without credentials
    """
    settings = OTPSettings.from_env(environ)
    delivery_config = DeliveryConfig.from_env(environ)
    channel = create_delivery_channel(delivery_config)

    logger.info(
        "OTP service configured",
        delivery=channel.name,
        ttl_seconds=settings.ttl_seconds,
        rate_limit=settings.rate_limit_max_requests,
        rate_limit_window_ms=settings.rate_limit_window_ms,
    )

    return OTPService(
        delivery=channel,
        audit_sink=audit_sink if audit_sink is not None else StructlogAuditSink(),
        settings=settings,
    )
