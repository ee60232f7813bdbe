"""
Minimum-interval gate in front of the reasoning endpoint
"""

from __future__ import annotations

import threading
import time
from typing import Dict, Hashable, Optional

from vocalis.core.errors import ThrottleRejected

DEFAULT_MIN_INTERVAL_MS = 2000
DEFAULT_PRUNE_THRESHOLD = 1024


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def should_throttle(
    now: int,
    last_request_time: Optional[int],
    min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
) -> bool:
    """True when fewer than `min_interval_ms` have passed since the last accepted request"""
    if last_request_time is None:
        return False
    return now - last_request_time < min_interval_ms


class CommandThrottle:
    """
    Tracks the last accepted request time per session key.

    `acquire` checks and records in one step under a lock, so of two
    near-simultaneous commands for the same key only one is admitted.
    The timestamp is recorded before the caller starts its outbound request.

    Once more than `prune_threshold` keys are tracked, keys whose last request
    is older than the interval are dropped; they could not throttle anyway.
    """

    def __init__(
        self,
        min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
        clock=monotonic_ms,
        prune_threshold: int = DEFAULT_PRUNE_THRESHOLD,
    ):
        self.min_interval_ms = min_interval_ms
        self.prune_threshold = prune_threshold
        self._clock = clock
        self._last_request: Dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def acquire(self, key: Hashable, now: Optional[int] = None) -> int:
        """
        Admit a command for `key` or reject it

        Returns:
            The timestamp recorded as the last accepted request

        Raises:
            ThrottleRejected: the previous accepted command is too recent
        """
        with self._lock:
            now = self._clock() if now is None else now
            last = self._last_request.get(key)
            if should_throttle(now, last, self.min_interval_ms):
                raise ThrottleRejected(retry_after_ms=self.min_interval_ms - (now - last))
            self._last_request[key] = now
            if len(self._last_request) > self.prune_threshold:
                self._prune(now)
            return now

    def _prune(self, now: int):
        stale = [k for k, last in self._last_request.items() if not should_throttle(now, last, self.min_interval_ms)]
        for k in stale:
            del self._last_request[k]

    def last_request_time(self, key: Hashable) -> Optional[int]:
        return self._last_request.get(key)

    def reset(self, key: Optional[Hashable] = None):
        """Forget one key, or every key"""
        with self._lock:
            if key is None:
                self._last_request.clear()
            else:
                self._last_request.pop(key, None)
