"""Token repository protocol contract."""

from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

from ..entities import TokenInfo


@runtime_checkable
class TokenRepository(Protocol):
    """Protocol for indexing issued tokens by user and type.

    Unlike a revoker, a repository tracks every issued token so the
    lifecycle of a user's tokens can be queried and pruned.
    """

    def store_token(
        self,
        token: str,
        user_id: str,
        expiration_time: datetime,
        token_type: str = "access",
        metadata: Optional[Dict[str, str]] = None,
    ) -> bool:
        ...

    def get_token(self, token: str) -> Optional[TokenInfo]:
        ...

    def get_tokens_for_user(self, user_id: str, token_type: Optional[str] = None) -> List[TokenInfo]:
        ...

    def remove_token(self, token: str) -> bool:
        ...

    def remove_tokens_for_user(self, user_id: str, token_type: Optional[str] = None) -> int:
        ...

    def remove_expired_tokens(self, before: Optional[datetime] = None) -> int:
        ...

    def token_exists(self, token: str) -> bool:
        ...

    def get_token_count(self, user_id: Optional[str] = None, token_type: Optional[str] = None) -> int:
        ...

    async def store_token_async(
        self,
        token: str,
        user_id: str,
        expiration_time: datetime,
        token_type: str = "access",
        metadata: Optional[Dict[str, str]] = None,
    ) -> bool:
        ...

    async def get_token_async(self, token: str) -> Optional[TokenInfo]:
        ...

    async def get_tokens_for_user_async(self, user_id: str, token_type: Optional[str] = None) -> List[TokenInfo]:
        ...

    async def remove_token_async(self, token: str) -> bool:
        ...

    async def remove_tokens_for_user_async(self, user_id: str, token_type: Optional[str] = None) -> int:
        ...

    async def remove_expired_tokens_async(self, before: Optional[datetime] = None) -> int:
        ...

    async def token_exists_async(self, token: str) -> bool:
        ...

    async def get_token_count_async(self, user_id: Optional[str] = None, token_type: Optional[str] = None) -> int:
        ...
