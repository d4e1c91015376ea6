"""Bounded in-memory key/timestamp store with time-based expiry."""

import threading
import time
from collections import OrderedDict
from typing import Callable, Hashable, Optional


class ExpiringStore:
    """Remember when each key was last written, for at most ``ttl_seconds``.

    Entries are kept in insertion order; once ``max_entries`` is reached the
    oldest entry is evicted to make room. All operations hold a lock so the
    store can be shared by concurrent request handlers.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[Hashable, float]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_expired(self, now: float) -> None:
        while self._entries:
            written_at = next(iter(self._entries.values()))
            if now - written_at < self.ttl_seconds:
                break
            self._entries.popitem(last=False)

    def _put(self, key: Hashable, now: float) -> None:
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = now

    def get(self, key: Hashable) -> Optional[float]:
        """Return the timestamp stored for ``key`` if it has not expired."""
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            return self._entries.get(key)

    def add_if_absent(self, key: Hashable) -> bool:
        """Insert ``key`` unless a live entry exists. Returns True if inserted."""
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            if key in self._entries:
                return False
            self._put(key, now)
            return True

    def touch_if_idle(self, key: Hashable, min_interval: float) -> bool:
        """Stamp ``key`` with now unless it was stamped less than ``min_interval`` ago."""
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            last = self._entries.get(key)
            if last is not None and now - last < min_interval:
                return False
            self._put(key, now)
            return True
