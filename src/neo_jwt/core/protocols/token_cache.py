"""Token cache protocol contract."""

from datetime import timedelta
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from ..entities import JwtToken


@runtime_checkable
class TokenCache(Protocol):
    """Protocol for caching parsed tokens and validation results.

    Parsed tokens are keyed by raw token, validation results by a
    fingerprint of the raw token and the validation flags.
    """

    def get_parsed_token(self, raw: str) -> Optional[JwtToken]:
        ...

    def set_parsed_token(self, raw: str, token: JwtToken, ttl: Optional[timedelta] = None) -> None:
        ...

    def remove_parsed_token(self, raw: str) -> None:
        ...

    def get_validation_result(self, key: str) -> Optional[Any]:
        ...

    def set_validation_result(self, key: str, result: Any, ttl: Optional[timedelta] = None) -> None:
        ...

    def remove_validation_result(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...

    def get_stats(self) -> Dict[str, Any]:
        ...

    async def get_parsed_token_async(self, raw: str) -> Optional[JwtToken]:
        ...

    async def set_parsed_token_async(self, raw: str, token: JwtToken, ttl: Optional[timedelta] = None) -> None:
        ...

    async def get_validation_result_async(self, key: str) -> Optional[Any]:
        ...

    async def set_validation_result_async(self, key: str, result: Any, ttl: Optional[timedelta] = None) -> None:
        ...

    async def clear_async(self) -> None:
        ...
