"""In-memory cache with absolute per-entry expiration."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached value and the clock reading at which it expires."""
    value: Any
    expires_at: float


class CacheStore:
    """Key/value store whose entries expire a fixed time after insertion.

    Reads never extend an entry's lifetime. Expired entries are dropped
    lazily when they are read. There is no size-based eviction.

    ``None`` cannot be stored: ``get`` uses it to signal a miss.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize the cache.

        Args:
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at <= self._clock():
                del self._entries[key]
                entry = None

        if entry is None:
            logger.debug(f"Cache miss for key: {key}")
            return None

        logger.debug(f"Cache hit for key: {key}")
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store a value for ``ttl_seconds``, replacing any existing entry."""
        if value is None:
            raise ValueError("Cannot cache None")
        if ttl_seconds <= 0:
            raise ValueError(f"TTL must be positive, got {ttl_seconds}")

        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl_seconds)

        logger.debug(f"Cached item with key: {key} for {ttl_seconds / 60:.1f} minutes")

    def remove(self, key: str) -> None:
        """Remove an entry if present."""
        with self._lock:
            self._entries.pop(key, None)
        logger.debug(f"Removed cached item with key: {key}")

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
