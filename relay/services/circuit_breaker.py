import threading
import time
from typing import Callable, Optional

from relay.logging_config import get_logger

logger = get_logger("circuit_breaker")

DEFAULT_BLOCK_SECONDS = 60.0


class BackendCircuitBreaker:
    """Blocks backend calls for a fixed window after a quota failure.

    Only ``trip`` opens the breaker; it closes by itself once the window ends.
    """

    def __init__(self, block_seconds: float = DEFAULT_BLOCK_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.block_seconds = block_seconds
        self._clock = clock
        self._blocked_until = 0.0
        self._lock = threading.Lock()

    def is_open(self, now: Optional[float] = None) -> bool:
        now = self._clock() if now is None else now
        with self._lock:
            return now < self._blocked_until

    def remaining(self, now: Optional[float] = None) -> float:
        now = self._clock() if now is None else now
        with self._lock:
            return max(0.0, self._blocked_until - now)

    def trip(self, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now
        with self._lock:
            self._blocked_until = now + self.block_seconds
        logger.warning(
            "Backend blocked due to quota",
            extra={"context": {"block_seconds": self.block_seconds}},
        )
