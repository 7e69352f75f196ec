"""Bounded in-memory cache with FIFO eviction."""

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from ...utils.clock import Clock, resolve_clock

logger = logging.getLogger(__name__)


class CacheEntry:
    """Cache entry with optional expiration."""

    __slots__ = ("key", "value", "expires_at", "created_at")

    def __init__(
        self,
        key: str,
        value: Any,
        expires_at: Optional[datetime],
        created_at: datetime,
    ):
        self.key = key
        self.value = value
        self.expires_at = expires_at
        self.created_at = created_at

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


class BoundedCache:
    """Thread-safe bounded cache following maximum separation principle.

    Handles ONLY keyed storage with a size bound and per-entry TTL.

    Features:
    - FIFO eviction by insertion order (a re-put moves the key to the back)
    - TTL-based expiration, checked lazily on read
    - Optional background eviction on a daemon thread
    - Explicit synchronous eviction for deterministic callers

    With background eviction an insert returns before the overflow is
    trimmed, so the cache can briefly hold more than ``max_size`` entries.
    The most recently inserted entry is never evicted.
    """

    def __init__(
        self,
        max_size: int = 1000,
        evict_in_background: bool = True,
        name: str = "cache",
        clock: Optional[Clock] = None,
    ):
        """Initialize bounded cache.

        Args:
            max_size: Maximum number of entries kept after eviction
            evict_in_background: Trim overflow on a worker thread
            name: Name used in logs and statistics
            clock: Time source for TTL checks

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValueError("Max size must be positive")

        self.max_size = max_size
        self.evict_in_background = evict_in_background
        self.name = name
        self._clock = resolve_clock(clock)

        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

        self._eviction_in_progress = False
        self._eviction_idle = threading.Event()
        self._eviction_idle.set()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def try_get(self, key: str) -> Tuple[bool, Any]:
        """Look up a key.

        Returns:
            Tuple of (found, value); expired entries read as absent
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return False, None

            if entry.is_expired(self._clock()):
                del self._cache[key]
                self._expirations += 1
                self._misses += 1
                return False, None

            self._hits += 1
            return True, entry.value

    def get(self, key: str, default: Any = None) -> Any:
        found, value = self.try_get(key)
        return value if found else default

    def put(self, key: str, value: Any, ttl: Optional[timedelta] = None) -> None:
        """Insert or replace an entry, evicting the oldest ones on overflow.

        Args:
            key: Cache key
            value: Value to store
            ttl: Optional time to live; None keeps the entry until evicted
        """
        now = self._clock()
        expires_at = now + ttl if ttl is not None else None

        with self._lock:
            self._cache.pop(key, None)
            self._cache[key] = CacheEntry(key, value, expires_at, now)

            if len(self._cache) <= self.max_size:
                return
            if not self.evict_in_background:
                self._evict_locked()
                return
            if self._eviction_in_progress:
                return
            self._eviction_in_progress = True
            self._eviction_idle.clear()

        worker = threading.Thread(
            target=self._eviction_worker,
            name=f"{self.name}-eviction",
            daemon=True,
        )
        worker.start()

    def invalidate(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        with self._lock:
            return self._cache.pop(key, None) is not None

    def invalidate_all(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.debug(f"Cleared cache '{self.name}'")

    def evict_synchronously(self) -> int:
        """Trim the cache to ``max_size`` on the calling thread.

        Returns:
            Number of entries evicted
        """
        with self._lock:
            return self._evict_locked()

    def wait_for_eviction(self, timeout: Optional[float] = None) -> bool:
        """Block until no background eviction is running.

        Returns:
            True if eviction is idle, False on timeout
        """
        return self._eviction_idle.wait(timeout)

    def cleanup_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._cache.items() if entry.is_expired(now)]
            for key in expired:
                del self._cache[key]
            self._expirations += len(expired)
        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired entries from '{self.name}'")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: str) -> bool:
        found, _ = self.try_get(key)
        return found

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "name": self.name,
                "size": len(self._cache),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / lookups if lookups > 0 else 0,
                "evictions": self._evictions,
                "expirations": self._expirations,
                "eviction_in_progress": self._eviction_in_progress,
            }

    def _evict_locked(self) -> int:
        evicted = 0
        while len(self._cache) > self.max_size:
            self._cache.popitem(last=False)
            evicted += 1
        self._evictions += evicted
        if evicted > 0:
            logger.debug(f"Evicted {evicted} entries from '{self.name}'")
        return evicted

    def _eviction_worker(self) -> None:
        # Flag reset happens under the same lock hold as the trim, so a put
        # that lands afterwards always starts a new worker.
        with self._lock:
            try:
                self._evict_locked()
            except Exception as e:
                logger.warning(f"Background eviction for '{self.name}' failed: {e}")
            finally:
                self._eviction_in_progress = False
                self._eviction_idle.set()
