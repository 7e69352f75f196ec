"""Token refresher protocol contract."""

from datetime import timedelta
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class TokenRefresher(Protocol):
    """Protocol for exchanging a refresh token for a new access token."""

    def create_refresh_token(self, access_token: str, lifetime: Optional[timedelta] = None) -> str:
        """Issue a refresh token bound to ``access_token``."""
        ...

    def validate_refresh_token(self, access_token: str, refresh_token: str) -> bool:
        ...

    def refresh(self, access_token: str, refresh_token: str) -> Any:
        """Re-issue the access token.

        Returns:
            RefreshResult describing the new pair or the failure
        """
        ...

    async def create_refresh_token_async(self, access_token: str, lifetime: Optional[timedelta] = None) -> str:
        ...

    async def validate_refresh_token_async(self, access_token: str, refresh_token: str) -> bool:
        ...

    async def refresh_async(self, access_token: str, refresh_token: str) -> Any:
        ...
