"""In-memory caches and stores."""

from .bounded_cache import BoundedCache, CacheEntry
from .memory_token_cache import MemoryTokenCache
from .memory_token_store import MemoryTokenStore
from .token_storage import SerializedTokenStorage

__all__ = [
    "BoundedCache",
    "CacheEntry",
    "MemoryTokenCache",
    "MemoryTokenStore",
    "SerializedTokenStorage",
]
