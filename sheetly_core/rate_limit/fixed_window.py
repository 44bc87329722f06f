"""
Fixed Window Rate Limiter
=========================
In-process tumbling window limiter keyed by (subject, window).
"""

import math
import threading
import time
from typing import Callable, Dict, Optional, Tuple

import structlog

from .models import RateLimitInfo

logger = structlog.get_logger(__name__)

WindowKey = Tuple[str, int, int]  # (subject, window_ms, window_index)


class FixedWindowRateLimiter:
    """
    Tumbling window rate limiter.

    Counts live under a composite key (subject, window_ms, window_index),
    so a new window starts from zero without touching the old entry.
    A burst straddling a boundary can be admitted up to 2x the limit.

    Stale windows are swept the first time a newer window index is seen
    for a given window size, or explicitly via cleanup().
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Args:
            clock: Returns the current time in seconds
        """
        self._clock = clock
        self._counts: Dict[WindowKey, int] = {}
        self._latest_window: Dict[int, int] = {}
        self._lock = threading.Lock()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def check(self, key: str, max_requests: int, window_ms: int) -> RateLimitInfo:
        """
        Count a request against the current window if quota remains.

        Rejected requests do not mutate state.

        Args:
            key: Subject being limited (e.g. phone number)
            max_requests: Requests allowed per window
            window_ms: Window size in milliseconds

        Returns:
            RateLimitInfo with decision and quota
        """
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")

        now_ms = self._now_ms()
        window_index = now_ms // window_ms
        reset_at = (window_index + 1) * window_ms / 1000

        with self._lock:
            self._sweep_if_rolled(window_ms, window_index)

            composite = (key, window_ms, window_index)
            count = self._counts.get(composite, 0)

            if count >= max_requests:
                retry_after = math.ceil(reset_at - now_ms / 1000)
                logger.debug(
                    "Rate limit rejected",
                    window_index=window_index,
                    limit=max_requests,
                )
                return RateLimitInfo(
                    allowed=False,
                    remaining=0,
                    limit=max_requests,
                    reset_at=reset_at,
                    retry_after=retry_after,
                )

            self._counts[composite] = count + 1

        return RateLimitInfo(
            allowed=True,
            remaining=max_requests - count - 1,
            limit=max_requests,
            reset_at=reset_at,
        )

    def try_acquire(self, key: str, max_requests: int, window_ms: int) -> bool:
        """Return True and consume one slot if the key is under its limit."""
        return self.check(key, max_requests, window_ms).allowed

    def _sweep_if_rolled(self, window_ms: int, window_index: int) -> None:
        # Caller holds the lock.
        latest = self._latest_window.get(window_ms)
        if latest is not None and window_index <= latest:
            return
        self._latest_window[window_ms] = window_index
        if latest is None:
            return
        stale = [
            k for k in self._counts
            if k[1] == window_ms and k[2] < window_index
        ]
        for k in stale:
            del self._counts[k]

    def cleanup(self) -> int:
        """
        Drop every window that is no longer live.

        Returns:
            Number of entries removed
        """
        now_ms = self._now_ms()
        with self._lock:
            stale = [
                k for k in self._counts
                if k[2] < now_ms // k[1]
            ]
            for k in stale:
                del self._counts[k]
        if stale:
            logger.debug("Rate limit windows swept", removed=len(stale))
        return len(stale)

    def reset(self, key: Optional[str] = None) -> None:
        """Forget counts for one key, or for every key."""
        with self._lock:
            if key is None:
                self._counts.clear()
                self._latest_window.clear()
                return
            for k in [k for k in self._counts if k[0] == key]:
                del self._counts[k]

    def __len__(self) -> int:
        return len(self._counts)
