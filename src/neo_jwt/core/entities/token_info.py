"""Token repository entry."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from ...utils.clock import ensure_utc, utc_now


@dataclass
class TokenInfo:
    """Issued token tracked by a token repository.

    Handles ONLY the bookkeeping for one issued token. The raw token is the
    identity; ``token_type`` distinguishes access, refresh and revoked
    entries.
    """

    token: str
    user_id: str
    expiration_time: datetime
    token_type: str = "access"
    metadata: Dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Ensure timezone awareness."""
        self.expiration_time = ensure_utc(self.expiration_time)
        self.created_at = ensure_utc(self.created_at)

    def is_expired_at(self, now: datetime) -> bool:
        return ensure_utc(now) >= self.expiration_time

    @property
    def is_expired(self) -> bool:
        """Check if the token is past its expiration time."""
        return self.is_expired_at(utc_now())

    @property
    def time_until_expiration(self) -> timedelta:
        """Time left before expiry (zero once expired)."""
        remaining = self.expiration_time - utc_now()
        return max(remaining, timedelta(0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "token_type": self.token_type,
            "expiration_time": self.expiration_time.isoformat(),
            "created_at": self.created_at.isoformat(),
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class RevocationRecord:
    """Why and until when a token is revoked."""

    reason: str
    expires_at: datetime
    user_id: Optional[str] = None

    def is_expired_at(self, now: datetime) -> bool:
        return ensure_utc(now) > ensure_utc(self.expires_at)
