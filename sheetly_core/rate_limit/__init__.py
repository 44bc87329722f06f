"""
Rate Limiting Module
====================
Tumbling window rate limiter for OTP issuance.
"""

from .models import RateLimitResult, RateLimitInfo
from .fixed_window import FixedWindowRateLimiter

__all__ = [
    # Models
    "RateLimitResult",
    "RateLimitInfo",
    # Limiters
    "FixedWindowRateLimiter",
]
