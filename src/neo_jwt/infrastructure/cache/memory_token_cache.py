"""Memory token cache."""

import asyncio
import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from ...config.logging_config import mask_token
from ...config.settings import JwtSettings, get_settings
from ...core.entities import JwtToken
from ...utils.clock import Clock
from .bounded_cache import BoundedCache

logger = logging.getLogger(__name__)


class MemoryTokenCache:
    """Memory-based token cache following maximum separation principle.

    Handles ONLY in-memory caching of parsed tokens and successful
    validation results. Does not validate or parse tokens itself.

    Parsed tokens are keyed by their raw form; validation results by the
    fingerprint the validator computes. The two stores are independent
    BoundedCache instances with their own locks.
    """

    def __init__(
        self,
        max_size: int = 1000,
        evict_in_background: bool = True,
        default_ttl: Optional[timedelta] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize memory token cache.

        Args:
            max_size: Maximum entries per store
            evict_in_background: Trim overflow on a worker thread
            default_ttl: TTL used when a setter gets none
            clock: Time source for TTL checks
        """
        self.default_ttl = default_ttl
        self._tokens = BoundedCache(max_size, evict_in_background, name="parsed-tokens", clock=clock)
        self._results = BoundedCache(max_size, evict_in_background, name="validation-results", clock=clock)

    @classmethod
    def from_settings(cls, settings: Optional[JwtSettings] = None, clock: Optional[Clock] = None) -> "MemoryTokenCache":
        settings = settings or get_settings()
        return cls(
            max_size=settings.cache_max_size,
            evict_in_background=settings.cache_evict_in_background,
            default_ttl=settings.cache_duration,
            clock=clock,
        )

    @property
    def parsed_tokens(self) -> BoundedCache:
        return self._tokens

    @property
    def validation_results(self) -> BoundedCache:
        return self._results

    def get_parsed_token(self, raw: str) -> Optional[JwtToken]:
        found, token = self._tokens.try_get(raw)
        return token if found else None

    def set_parsed_token(self, raw: str, token: JwtToken, ttl: Optional[timedelta] = None) -> None:
        self._tokens.put(raw, token, ttl or self.default_ttl)
        logger.debug(f"Cached parsed token {mask_token(raw)}")

    def remove_parsed_token(self, raw: str) -> None:
        self._tokens.invalidate(raw)

    def get_validation_result(self, key: str) -> Optional[Any]:
        found, result = self._results.try_get(key)
        return result if found else None

    def set_validation_result(self, key: str, result: Any, ttl: Optional[timedelta] = None) -> None:
        self._results.put(key, result, ttl or self.default_ttl)

    def remove_validation_result(self, key: str) -> None:
        self._results.invalidate(key)

    def clear(self) -> None:
        """Clear both stores."""
        self._tokens.invalidate_all()
        self._results.invalidate_all()
        logger.debug("Cleared token cache")

    def evict_synchronously(self) -> int:
        return self._tokens.evict_synchronously() + self._results.evict_synchronously()

    def wait_for_eviction(self, timeout: Optional[float] = None) -> bool:
        return self._tokens.wait_for_eviction(timeout) and self._results.wait_for_eviction(timeout)

    async def get_parsed_token_async(self, raw: str) -> Optional[JwtToken]:
        await asyncio.sleep(0)
        return self.get_parsed_token(raw)

    async def set_parsed_token_async(self, raw: str, token: JwtToken, ttl: Optional[timedelta] = None) -> None:
        await asyncio.sleep(0)
        self.set_parsed_token(raw, token, ttl)

    async def get_validation_result_async(self, key: str) -> Optional[Any]:
        await asyncio.sleep(0)
        return self.get_validation_result(key)

    async def set_validation_result_async(self, key: str, result: Any, ttl: Optional[timedelta] = None) -> None:
        await asyncio.sleep(0)
        self.set_validation_result(key, result, ttl)

    async def clear_async(self) -> None:
        await asyncio.sleep(0)
        self.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with statistics for both stores
        """
        return {
            "parsed_tokens": self._tokens.get_stats(),
            "validation_results": self._results.get_stats(),
        }
