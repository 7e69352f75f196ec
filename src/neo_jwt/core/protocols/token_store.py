"""Key-value token store protocol contract."""

from datetime import timedelta
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class TokenStore(Protocol):
    """Protocol for a string-keyed store with optional expiry.

    Backs caches and repositories. Misses return None, never raise.
    """

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl: Optional[timedelta] = None) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...

    async def get_async(self, key: str) -> Optional[Any]:
        ...

    async def set_async(self, key: str, value: Any, ttl: Optional[timedelta] = None) -> None:
        ...

    async def remove_async(self, key: str) -> None:
        ...

    async def clear_async(self) -> None:
        ...
