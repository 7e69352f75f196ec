"""In-memory key-value token store."""

import asyncio
import logging
import threading
from datetime import timedelta
from typing import Any, Dict, Optional

from ...core.exceptions import InvalidArgumentError
from ...utils.clock import Clock, resolve_clock
from .bounded_cache import CacheEntry

logger = logging.getLogger(__name__)


class MemoryTokenStore:
    """Unbounded string-keyed store with per-entry TTL.

    Handles ONLY storage. Expired entries read as absent and are removed
    on access or by ``cleanup_expired``.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = resolve_clock(clock)
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Any]:
        """Get a value, or None when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[timedelta] = None) -> None:
        """Store a value.

        Raises:
            InvalidArgumentError: If the key is empty
        """
        if not key:
            raise InvalidArgumentError("Key cannot be null or empty.")
        now = self._clock()
        expires_at = now + ttl if ttl is not None else None
        with self._lock:
            self._entries[key] = CacheEntry(key, value, expires_at, now)

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Removed {len(expired)} expired store entries")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def get_async(self, key: str) -> Optional[Any]:
        await asyncio.sleep(0)
        return self.get(key)

    async def set_async(self, key: str, value: Any, ttl: Optional[timedelta] = None) -> None:
        await asyncio.sleep(0)
        self.set(key, value, ttl)

    async def remove_async(self, key: str) -> None:
        await asyncio.sleep(0)
        self.remove(key)

    async def clear_async(self) -> None:
        await asyncio.sleep(0)
        self.clear()
