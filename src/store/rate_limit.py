"""
Minimum-interval pacing for store requests.
"""

import threading
import time
from typing import Callable


class RateLimiter:
    """
    Enforces a minimum interval between successive calls to wait().

    Safe to share between threads: callers are serialized on the lock and
    each one is released at least min_interval after the previous one.
    """

    def __init__(
        self,
        min_interval: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last = None

    def wait(self) -> float:
        """
        Block until the next call is allowed.

        Returns:
            Seconds slept
        """
        if self.min_interval == 0:
            return 0.0
        with self._lock:
            slept = 0.0
            now = self._clock()
            if self._last is not None:
                remaining = self._last + self.min_interval - now
                if remaining > 0:
                    self._sleep(remaining)
                    slept = remaining
                    now = self._clock()
            self._last = now
            return slept
