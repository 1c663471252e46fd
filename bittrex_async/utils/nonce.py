"""
Nonce source for signed requests.

The exchange rejects a signed request whose nonce is not greater than the
last one it saw for the key, so nonces must strictly increase within a
process even when the clock is coarse or steps backwards.
"""
import threading
import time
from typing import Callable


class NonceGenerator:
    """
    Strictly increasing nonce generator.

    Values are milliseconds since the Unix epoch, bumped to ``last + 1``
    whenever the clock has not moved past the previous value.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        """Return a nonce greater than every nonce returned before."""
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate

    @property
    def last(self) -> int:
        return self._last
