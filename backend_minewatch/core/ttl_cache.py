"""
Thread-safe TTL map used by the market and advisor services.

Keys are caller-chosen tuples (currency, balance, price, ...), so the key
space is open-ended: expired entries are swept on every write as well as
dropped when read, which bounds the map by what was written within one TTL.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Hashable


class TTLCache:
    def __init__(self, ttl_sec: float, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        self._ttl = ttl_sec
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now > expires_at]
        for k in expired:
            del self._entries[k]

    def get(self, key: Hashable) -> Any | None:
        """Value for key, or None when absent or past its expiry."""
        now = self._clock()
        with self._lock:
            expires_at, value = self._entries.get(key, (None, None))
            if expires_at is None:
                return None
            if now > expires_at:
                self._entries.pop(key, None)
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        with self._lock:
            self._sweep(now)
            self._entries[key] = (now + self._ttl, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
