"""
OTP Settings
============
Issuance and verification policy, read once at startup.
"""

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class OTPSettings:
    """Policy knobs for OTPService."""
    code_length: int = 6
    ttl_seconds: int = 300  # 5 minutes
    rate_limit_max_requests: int = 3
    rate_limit_window_ms: int = 600_000  # 10 minutes
    max_verify_attempts: int = 1  # wrong code is terminal for that OTP
    audit_invalid_input: bool = False
    audit_resource: str = "auth"

    @property
    def ttl_minutes(self) -> int:
        return max(1, math.ceil(self.ttl_seconds / 60))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OTPSettings":
        """Build settings from environment variables, keeping defaults for unset ones."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            code_length=int(env.get("OTP_CODE_LENGTH", defaults.code_length)),
            ttl_seconds=int(env.get("OTP_TTL_SECONDS", defaults.ttl_seconds)),
            rate_limit_max_requests=int(
                env.get("OTP_RATE_LIMIT_MAX_REQUESTS", defaults.rate_limit_max_requests)
            ),
            rate_limit_window_ms=int(
                env.get("OTP_RATE_LIMIT_WINDOW_MS", defaults.rate_limit_window_ms)
            ),
            max_verify_attempts=int(
                env.get("OTP_MAX_VERIFY_ATTEMPTS", defaults.max_verify_attempts)
            ),
            audit_invalid_input=(
                env.get("OTP_AUDIT_INVALID_INPUT", "").strip().lower() in _TRUE_VALUES
            ),
        )
