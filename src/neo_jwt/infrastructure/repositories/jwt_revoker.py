"""In-memory revocation registry."""

import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional, Tuple

from ...application.parser import JwtParser
from ...config.logging_config import mask_token
from ...core.constants import CLAIM_ISSUED_AT, CLAIM_SUBJECT
from ...core.entities import RevocationRecord
from ...core.exceptions import FormatError, InvalidArgumentError
from ...utils.clock import Clock, ensure_utc, resolve_clock, to_unix_seconds

logger = logging.getLogger(__name__)

DEFAULT_REVOCATION_REASON = "No reason provided"


class JwtRevoker:
    """Revocation registry keyed by raw token.

    Handles ONLY revocation bookkeeping. Records expire after their
    ``expires_at`` and are purged lazily on read or by
    ``cleanup_expired``.

    ``revoke_all_for_user`` records a per-user cutoff: any token whose
    ``sub`` is that user and whose ``iat`` falls in an earlier second than
    the cutoff counts as revoked, including tokens the registry has never
    seen. Tokens issued within the cutoff second stay valid unless they
    carry an explicit record.
    """

    def __init__(
        self,
        parser: Optional[JwtParser] = None,
        default_ttl: timedelta = timedelta(days=7),
        clock: Optional[Clock] = None,
    ):
        """Initialize revoker.

        Args:
            parser: JwtParser used to read ``sub``/``iat`` from raw tokens
            default_ttl: Lifetime of a record when no expiry is given
            clock: Time source
        """
        self._parser = parser or JwtParser()
        self._default_ttl = default_ttl
        self._clock = resolve_clock(clock)
        self._revoked: Dict[str, RevocationRecord] = {}
        self._user_cutoffs: Dict[str, Tuple[int, RevocationRecord]] = {}
        self._lock = threading.RLock()

    # Queries

    def is_revoked(self, token: str) -> bool:
        """Check if a token is revoked.

        Raises:
            InvalidArgumentError: If the token is empty
        """
        return self._find(token) is not None

    def get_revocation_reason(self, token: str) -> Optional[str]:
        record = self._find(token)
        return record.reason if record is not None else None

    def try_get_revocation_reason(self, token: str) -> Tuple[bool, Optional[str]]:
        record = self._find(token)
        if record is None:
            return False, None
        return True, record.reason

    # Commands

    def revoke(self, token: str, reason: Optional[str] = None, expires_at: Optional[datetime] = None) -> bool:
        """Revoke a token.

        Args:
            token: Raw token
            reason: Revocation reason (defaults to "No reason provided")
            expires_at: When the record may be dropped (defaults to now
                plus the default TTL)

        Returns:
            True if newly revoked; False if already revoked or unparseable

        Raises:
            InvalidArgumentError: If the token is empty
        """
        self._require_token(token)
        try:
            parsed = self._parser.parse(token)
        except FormatError as e:
            logger.debug(f"Cannot revoke unparseable token {mask_token(token)}: {e.message}")
            return False

        found, subject = parsed.try_get_claim(CLAIM_SUBJECT, str)
        now = self._clock()
        record = RevocationRecord(
            reason=reason or DEFAULT_REVOCATION_REASON,
            expires_at=ensure_utc(expires_at) if expires_at is not None else now + self._default_ttl,
            user_id=subject if found else None,
        )

        with self._lock:
            existing = self._revoked.get(token)
            if existing is not None and not existing.is_expired_at(now):
                return False
            self._revoked[token] = record

        logger.info(f"Revoked token {mask_token(token)}: {record.reason}")
        return True

    def revoke_all_for_user(self, user_id: str, reason: Optional[str] = None) -> int:
        """Revoke every token of a user issued before the current second.

        Returns:
            Number of tokens of that user already known to the registry
        """
        if not user_id:
            raise InvalidArgumentError("User ID cannot be null or empty.")
        now = self._clock()
        record = RevocationRecord(
            reason=reason or f"All tokens revoked for user {user_id}",
            expires_at=now + self._default_ttl,
            user_id=user_id,
        )
        with self._lock:
            self._user_cutoffs[user_id] = (to_unix_seconds(now), record)
            known = [
                token for token, existing in self._revoked.items()
                if existing.user_id == user_id and not existing.is_expired_at(now)
            ]
        logger.info(f"Revoked all tokens for user {user_id}")
        return len(known)

    def revoke_tokens(self, tokens: Iterable[str], reason: Optional[str] = None) -> int:
        """Revoke a batch of tokens. Returns the number newly revoked."""
        if tokens is None:
            raise InvalidArgumentError("Tokens cannot be null.")
        return sum(1 for token in tokens if self.revoke(token, reason))

    def cleanup_expired(self) -> int:
        """Drop expired records. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [token for token, record in self._revoked.items() if record.is_expired_at(now)]
            for token in expired:
                del self._revoked[token]
            expired_users = [
                user_id for user_id, (_, record) in self._user_cutoffs.items() if record.is_expired_at(now)
            ]
            for user_id in expired_users:
                del self._user_cutoffs[user_id]
        removed = len(expired) + len(expired_users)
        if removed:
            logger.debug(f"Purged {removed} expired revocation records")
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)

    # Async variants

    async def is_revoked_async(self, token: str) -> bool:
        await asyncio.sleep(0)
        return self.is_revoked(token)

    async def revoke_async(
        self, token: str, reason: Optional[str] = None, expires_at: Optional[datetime] = None
    ) -> bool:
        await asyncio.sleep(0)
        return self.revoke(token, reason, expires_at)

    async def get_revocation_reason_async(self, token: str) -> Optional[str]:
        await asyncio.sleep(0)
        return self.get_revocation_reason(token)

    async def try_get_revocation_reason_async(self, token: str) -> Tuple[bool, Optional[str]]:
        await asyncio.sleep(0)
        return self.try_get_revocation_reason(token)

    async def revoke_all_for_user_async(self, user_id: str, reason: Optional[str] = None) -> int:
        await asyncio.sleep(0)
        return self.revoke_all_for_user(user_id, reason)

    async def revoke_tokens_async(self, tokens: Iterable[str], reason: Optional[str] = None) -> int:
        if tokens is None:
            raise InvalidArgumentError("Tokens cannot be null.")
        count = 0
        for token in tokens:
            await asyncio.sleep(0)
            if self.revoke(token, reason):
                count += 1
        return count

    # Internals

    def _find(self, token: str) -> Optional[RevocationRecord]:
        self._require_token(token)
        now = self._clock()
        with self._lock:
            record = self._revoked.get(token)
            if record is not None:
                if not record.is_expired_at(now):
                    return record
                del self._revoked[token]
            if not self._user_cutoffs:
                return None
        return self._find_user_cutoff(token, now)

    def _find_user_cutoff(self, token: str, now: datetime) -> Optional[RevocationRecord]:
        ok, parsed = self._parser.try_parse(token)
        if not ok:
            return None
        found, subject = parsed.try_get_claim(CLAIM_SUBJECT, str)
        if not found:
            return None

        with self._lock:
            entry = self._user_cutoffs.get(subject)
            if entry is None:
                return None
            cutoff, record = entry
            if record.is_expired_at(now):
                del self._user_cutoffs[subject]
                return None

        has_iat, issued_at = parsed.try_get_claim(CLAIM_ISSUED_AT, datetime)
        if has_iat and to_unix_seconds(issued_at) >= cutoff:
            return None
        return record

    @staticmethod
    def _require_token(token: str) -> None:
        if not token:
            raise InvalidArgumentError("Token cannot be null or empty.")
