"""Token revoker protocol contract."""

from datetime import datetime
from typing import Iterable, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class TokenRevoker(Protocol):
    """Protocol for revoking tokens before their natural expiry.

    Tokens are identified by their raw compact form.
    """

    def is_revoked(self, token: str) -> bool:
        """Check if a token has been revoked.

        Raises:
            InvalidArgumentError: If the token is empty
        """
        ...

    def revoke(self, token: str, reason: Optional[str] = None, expires_at: Optional[datetime] = None) -> bool:
        """Revoke a token.

        Args:
            token: Raw token to revoke
            reason: Optional revocation reason
            expires_at: When the revocation record may be dropped

        Returns:
            True if the token was newly revoked, False otherwise
        """
        ...

    def get_revocation_reason(self, token: str) -> Optional[str]:
        ...

    def try_get_revocation_reason(self, token: str) -> Tuple[bool, Optional[str]]:
        ...

    async def try_get_revocation_reason_async(self, token: str) -> Tuple[bool, Optional[str]]:
        ...

    def revoke_all_for_user(self, user_id: str, reason: Optional[str] = None) -> int:
        """Revoke every known token of a user and return how many were revoked."""
        ...

    def revoke_tokens(self, tokens: Iterable[str], reason: Optional[str] = None) -> int:
        ...

    async def is_revoked_async(self, token: str) -> bool:
        ...

    async def revoke_async(
        self, token: str, reason: Optional[str] = None, expires_at: Optional[datetime] = None
    ) -> bool:
        ...

    async def get_revocation_reason_async(self, token: str) -> Optional[str]:
        ...

    async def revoke_all_for_user_async(self, user_id: str, reason: Optional[str] = None) -> int:
        ...

    async def revoke_tokens_async(self, tokens: Iterable[str], reason: Optional[str] = None) -> int:
        ...
