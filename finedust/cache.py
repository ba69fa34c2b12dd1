# file: finedust/cache.py

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


def cache_key(station_name: str, detailed: bool) -> str:
    return f"{station_name}_{str(detailed).lower()}"


class TTLCache:
    """In-memory cache whose entries expire ttl seconds after being set."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RateLimiter:
    """Refuses a client that polls again within min_interval seconds."""

    def __init__(self, min_interval: float, clock: Callable[[], float] = time.monotonic):
        self.min_interval = min_interval
        self._clock = clock
        self._last_request: Dict[str, float] = {}
        self._lock = threading.Lock()

    def allow(self, client_id: str = "default") -> bool:
        now = self._clock()
        with self._lock:
            # forget clients whose interval has already passed
            self._last_request = {
                client: seen for client, seen in self._last_request.items() if now - seen < self.min_interval
            }
            last = self._last_request.get(client_id)
            if last is not None and now - last < self.min_interval:
                return False
            self._last_request[client_id] = now
            return True
