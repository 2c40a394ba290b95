# app/services/cache.py

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional


class TTLCache:
    """Thread-safe LRU cache whose entries expire a fixed number of seconds after being set"""

    def __init__(self, maxsize: int = 256, ttl_seconds: float = 300,
                 timer: Callable[[], float] = time.monotonic):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self.ttl_seconds = ttl_seconds
        self._timer = timer
        self._cache: OrderedDict = OrderedDict()
        self._expires_at: Dict[Hashable, float] = {}
        self._lock = threading.RLock()

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            if key not in self._cache:
                return None

            if self._timer() >= self._expires_at[key]:
                del self._cache[key]
                del self._expires_at[key]
                return None

            self._cache.move_to_end(key)
            return self._cache[key]

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self.maxsize:
                oldest = next(iter(self._cache))
                del self._cache[oldest]
                del self._expires_at[oldest]

            self._cache[key] = value
            self._expires_at[key] = self._timer() + self.ttl_seconds

    def delete(self, key: Hashable) -> None:
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                del self._expires_at[key]

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._expires_at.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
