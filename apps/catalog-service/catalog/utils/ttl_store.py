"""
In-process key/value store with per-entry expiry.

Backs the refresh-token sessions (``refresh_tokens:<sub>:<sid>``) and the
API key user cache. Entries expire independently, so a single store can hold
7-day sessions next to 24-hour cache entries.
"""

import logging
import time
from threading import Lock
from typing import Any, Callable, Optional, Tuple

from cachetools import TLRUCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)


def _time_to_use(_key: str, value: Tuple[Any, float], now: float) -> float:
    return now + value[1]


class TTLStore:
    """Thread-safe TTL cache keyed by strings."""

    def __init__(self, max_size: int = 100_000, timer: Callable[[], float] = time.monotonic):
        self._cache: TLRUCache = TLRUCache(maxsize=max_size, ttu=_time_to_use, timer=timer)
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get(key)
        if entry is None:
            logger.debug(f"Store MISS: {key}")
            return None
        return entry[0]

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        with self._lock:
            self._cache[key] = (value, float(ttl_seconds))

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)


def refresh_token_key(user_id: Any, session_id: str) -> str:
    return f"refresh_tokens:{user_id}:{session_id}"


def api_key_user_key(lookup_hash: str) -> str:
    return f"user:apikey:{lookup_hash}"


_session_store: Optional[TTLStore] = None


def get_session_store() -> TTLStore:
    """Return the process-wide store shared by auth sessions and caches."""
    global _session_store
    if _session_store is None:
        _session_store = TTLStore()
    return _session_store
