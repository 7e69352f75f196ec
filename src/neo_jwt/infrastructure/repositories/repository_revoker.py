"""Revocation on top of a token repository."""

import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from ...application.parser import JwtParser
from ...config.logging_config import mask_token
from ...core.constants import CLAIM_EXPIRATION_TIME, CLAIM_SUBJECT
from ...core.entities import TokenInfo
from ...core.exceptions import FormatError, InvalidArgumentError
from ...core.protocols import TokenRepository
from ...utils.clock import Clock, ensure_utc, resolve_clock
from .jwt_revoker import DEFAULT_REVOCATION_REASON

logger = logging.getLogger(__name__)

REVOKED_TOKEN_TYPE = "revoked"
REVOCATION_REASON_KEY = "revocationReason"
UNKNOWN_USER = "unknown"


class TokenRepositoryRevoker:
    """Token revoker that records revocations in a TokenRepository.

    Revoked tokens are stored with ``token_type="revoked"`` and the reason
    in metadata under ``revocationReason``. Revoking a token the repository
    already tracks under another type replaces that entry. The
    check-and-store in ``revoke`` is serialized, so concurrent callers
    revoking the same token see exactly one True.
    """

    def __init__(
        self,
        repository: TokenRepository,
        parser: Optional[JwtParser] = None,
        default_ttl: timedelta = timedelta(days=7),
        clock: Optional[Clock] = None,
    ):
        if repository is None:
            raise InvalidArgumentError("Token repository cannot be null.")
        self._repository = repository
        self._parser = parser or JwtParser()
        self._default_ttl = default_ttl
        self._clock = resolve_clock(clock)
        self._lock = threading.RLock()

    def is_revoked(self, token: str) -> bool:
        return self._revoked_entry(token) is not None

    def get_revocation_reason(self, token: str) -> Optional[str]:
        info = self._revoked_entry(token)
        if info is None:
            return None
        return info.metadata.get(REVOCATION_REASON_KEY)

    def try_get_revocation_reason(self, token: str) -> Tuple[bool, Optional[str]]:
        info = self._revoked_entry(token)
        if info is None:
            return False, None
        return True, info.metadata.get(REVOCATION_REASON_KEY)

    def revoke(self, token: str, reason: Optional[str] = None, expires_at: Optional[datetime] = None) -> bool:
        """Store the token as revoked.

        The record expires at ``expires_at``, else at the token's ``exp``,
        else after the default TTL.

        Returns:
            True if newly revoked; False if already revoked or unparseable
        """
        self._require_token(token)
        try:
            parsed = self._parser.parse(token)
        except FormatError as e:
            logger.debug(f"Cannot revoke unparseable token {mask_token(token)}: {e.message}")
            return False

        found, subject = parsed.try_get_claim(CLAIM_SUBJECT, str)
        has_exp, exp = parsed.try_get_claim(CLAIM_EXPIRATION_TIME, datetime)
        if expires_at is not None:
            expiration = ensure_utc(expires_at)
        elif has_exp:
            expiration = exp
        else:
            expiration = self._clock() + self._default_ttl

        with self._lock:
            if self._revoked_entry(token) is not None:
                return False

            existing = self._repository.get_token(token)
            if existing is not None:
                self._repository.remove_token(token)

            stored = self._repository.store_token(
                token,
                subject if found and subject else UNKNOWN_USER,
                expiration,
                REVOKED_TOKEN_TYPE,
                {REVOCATION_REASON_KEY: reason or DEFAULT_REVOCATION_REASON},
            )
        if stored:
            logger.info(f"Revoked token {mask_token(token)}")
        return stored

    def revoke_all_for_user(self, user_id: str, reason: Optional[str] = None) -> int:
        """Revoke every tracked, not yet revoked token of a user."""
        if not user_id:
            raise InvalidArgumentError("User ID cannot be null or empty.")
        reason = reason or f"All tokens revoked for user {user_id}"
        tokens = [
            info.token for info in self._repository.get_tokens_for_user(user_id)
            if info.token_type != REVOKED_TOKEN_TYPE
        ]
        return sum(1 for token in tokens if self.revoke(token, reason))

    def revoke_tokens(self, tokens: Iterable[str], reason: Optional[str] = None) -> int:
        if tokens is None:
            raise InvalidArgumentError("Tokens cannot be null.")
        return sum(1 for token in tokens if self.revoke(token, reason))

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

    def _revoked_entry(self, token: str) -> Optional[TokenInfo]:
        self._require_token(token)
        info = self._repository.get_token(token)
        if info is None or info.token_type != REVOKED_TOKEN_TYPE:
            return None
        if info.is_expired_at(self._clock()):
            return None
        return info

    @staticmethod
    def _require_token(token: str) -> None:
        if not token:
            raise InvalidArgumentError("Token cannot be null or empty.")
