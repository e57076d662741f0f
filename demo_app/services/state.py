"""
Process-scoped application state
Holds the request counter, the process start time and the random source
"""
import logging
import random
import threading
import time
from typing import Callable, Optional

from demo_app.config import Settings

logger = logging.getLogger(__name__)


class RequestCounter:
    """Thread-safe, monotonically increasing request counter"""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def increment(self) -> int:
        """Add one and return the new value"""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class AppState:
    """
    State shared by every request handled by one application instance

    One instance is created per application by ``create_app`` and stored on
    ``app.state.demo``. Handlers reach it through the ``get_app_state``
    dependency.
    """

    def __init__(
        self,
        settings: Settings,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings
        self.request_counter = RequestCounter()
        self.rng = rng or random.Random()
        self._clock = clock
        self.started_at = clock()

    def uptime(self) -> float:
        """Seconds since the application was created"""
        return self._clock() - self.started_at

    def simulate_latency(self, max_ms: int) -> None:
        """Sleep a random 0..max_ms-1 milliseconds, unless disabled in settings"""
        if not self.settings.SIMULATE_LATENCY or max_ms <= 0:
            return
        time.sleep(self.rng.randrange(max_ms) / 1000.0)
