"""
Process-local fixed window rate limiter.

Each client key gets a counter and a reset time when its first request in a
window arrives. The window's limit and reset time stay fixed until it
expires, whatever the traffic shape. State lives in this object only: there
is no persistence across restarts and no coordination between processes, so
the limiter is only meaningful for single-instance deployments.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass
class RateLimitRecord:
    count: int
    reset_time: float


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: float
    limit: int

    def headers(self) -> Dict[str, str]:
        """X-RateLimit-* headers; the reset value is epoch seconds."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_time)),
        }


class RateLimiter:
    """
    Fixed window counter keyed by client identifier.

    Args:
        max_requests: Requests admitted per key per window
        window_seconds: Window length, measured from the first request
        clock: Returns the current time in epoch seconds (injectable for tests)
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> RateLimitResult:
        """Admit or reject one request for `key`, updating its counter atomically."""
        with self._lock:
            now = self._clock()
            record = self._records.get(key)

            if record is None or now > record.reset_time:
                record = RateLimitRecord(count=1, reset_time=now + self.window_seconds)
                self._records[key] = record
                return RateLimitResult(
                    allowed=True,
                    remaining=self.max_requests - 1,
                    reset_time=record.reset_time,
                    limit=self.max_requests,
                )

            if record.count >= self.max_requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_time=record.reset_time,
                    limit=self.max_requests,
                )

            record.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=self.max_requests - record.count,
                reset_time=record.reset_time,
                limit=self.max_requests,
            )
