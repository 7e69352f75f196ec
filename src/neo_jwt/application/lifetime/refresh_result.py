"""Outcome of a token refresh."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ...core.exceptions import InvalidArgumentError


@dataclass(frozen=True)
class RefreshResult:
    """New token pair, or the reason a refresh was refused."""

    is_success: bool
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    access_token_expires_at: Optional[datetime] = None
    refresh_token_expires_at: Optional[datetime] = None
    error: Optional[str] = None

    @classmethod
    def success(
        cls,
        access_token: str,
        refresh_token: str,
        access_token_expires_at: datetime,
        refresh_token_expires_at: datetime,
    ) -> "RefreshResult":
        """Successful refresh.

        Raises:
            InvalidArgumentError: If either token is empty
        """
        if not access_token:
            raise InvalidArgumentError("Access token cannot be null or empty.")
        if not refresh_token:
            raise InvalidArgumentError("Refresh token cannot be null or empty.")
        return cls(
            is_success=True,
            access_token=access_token,
            refresh_token=refresh_token,
            access_token_expires_at=access_token_expires_at,
            refresh_token_expires_at=refresh_token_expires_at,
        )

    @classmethod
    def failure(cls, error: str) -> "RefreshResult":
        if not error:
            raise InvalidArgumentError("Error cannot be null or empty.")
        return cls(is_success=False, error=error)

    def __bool__(self) -> bool:
        return self.is_success

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_success": self.is_success,
            "access_token_expires_at": (
                self.access_token_expires_at.isoformat() if self.access_token_expires_at else None
            ),
            "refresh_token_expires_at": (
                self.refresh_token_expires_at.isoformat() if self.refresh_token_expires_at else None
            ),
            "error": self.error,
        }
