"""In-memory token repository."""

import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from ...core.entities import TokenInfo
from ...core.exceptions import InvalidArgumentError
from ...utils.clock import Clock, ensure_utc, resolve_clock

logger = logging.getLogger(__name__)


class MemoryTokenRepository:
    """Memory-based token repository following maximum separation principle.

    Handles ONLY indexing of issued tokens by user and type.

    Expired tokens are swept by ``remove_expired_tokens``. A store call
    made more than ``cleanup_interval`` after the last sweep starts one on
    a daemon thread, so writers never pay for the sweep themselves.
    """

    def __init__(
        self,
        cleanup_interval: timedelta = timedelta(minutes=10),
        clock: Optional[Clock] = None,
    ):
        """Initialize token repository.

        Args:
            cleanup_interval: Minimum time between opportunistic sweeps
            clock: Time source
        """
        self.cleanup_interval = cleanup_interval
        self._clock = resolve_clock(clock)
        self._tokens: Dict[str, TokenInfo] = {}
        self._lock = threading.RLock()

        self._last_cleanup = self._clock()
        self._cleanup_in_progress = False
        self._cleanup_idle = threading.Event()
        self._cleanup_idle.set()

    def store_token(
        self,
        token: str,
        user_id: str,
        expiration_time: datetime,
        token_type: str = "access",
        metadata: Optional[Dict[str, str]] = None,
    ) -> bool:
        """Store an issued token.

        Returns:
            True if stored, False if the token is already present

        Raises:
            InvalidArgumentError: If token or user_id is empty
        """
        if not token:
            raise InvalidArgumentError("Token cannot be null or empty.")
        if not user_id:
            raise InvalidArgumentError("User ID cannot be null or empty.")

        info = TokenInfo(
            token=token,
            user_id=user_id,
            expiration_time=ensure_utc(expiration_time),
            token_type=token_type,
            metadata=dict(metadata or {}),
            created_at=self._clock(),
        )
        with self._lock:
            if token in self._tokens:
                return False
            self._tokens[token] = info

        self._run_cleanup_if_needed()
        return True

    def get_token(self, token: str) -> Optional[TokenInfo]:
        if not token:
            return None
        with self._lock:
            return self._tokens.get(token)

    def get_tokens_for_user(self, user_id: str, token_type: Optional[str] = None) -> List[TokenInfo]:
        """Get a user's tokens, optionally of one type.

        Raises:
            InvalidArgumentError: If user_id is empty
        """
        if not user_id:
            raise InvalidArgumentError("User ID cannot be null or empty.")
        with self._lock:
            return [
                info for info in self._tokens.values()
                if info.user_id == user_id and (token_type is None or info.token_type == token_type)
            ]

    def remove_token(self, token: str) -> bool:
        if not token:
            return False
        with self._lock:
            return self._tokens.pop(token, None) is not None

    def remove_tokens_for_user(self, user_id: str, token_type: Optional[str] = None) -> int:
        if not user_id:
            raise InvalidArgumentError("User ID cannot be null or empty.")
        with self._lock:
            doomed = [
                token for token, info in self._tokens.items()
                if info.user_id == user_id and (token_type is None or info.token_type == token_type)
            ]
            for token in doomed:
                del self._tokens[token]
        logger.debug(f"Removed {len(doomed)} tokens for user {user_id}")
        return len(doomed)

    def remove_expired_tokens(self, before: Optional[datetime] = None) -> int:
        """Remove tokens expiring at or before ``before`` (default: now)."""
        cutoff = ensure_utc(before) if before is not None else self._clock()
        with self._lock:
            expired = [token for token, info in self._tokens.items() if info.expiration_time <= cutoff]
            for token in expired:
                del self._tokens[token]
            self._last_cleanup = self._clock()
        if expired:
            logger.debug(f"Removed {len(expired)} expired tokens")
        return len(expired)

    def token_exists(self, token: str) -> bool:
        if not token:
            return False
        with self._lock:
            return token in self._tokens

    def get_token_count(self, user_id: Optional[str] = None, token_type: Optional[str] = None) -> int:
        with self._lock:
            if user_id is None and token_type is None:
                return len(self._tokens)
            return sum(
                1 for info in self._tokens.values()
                if (user_id is None or info.user_id == user_id)
                and (token_type is None or info.token_type == token_type)
            )

    def wait_for_cleanup(self, timeout: Optional[float] = None) -> bool:
        """Block until no background sweep is running."""
        return self._cleanup_idle.wait(timeout)

    # Async variants

    async def store_token_async(
        self,
        token: str,
        user_id: str,
        expiration_time: datetime,
        token_type: str = "access",
        metadata: Optional[Dict[str, str]] = None,
    ) -> bool:
        await asyncio.sleep(0)
        return self.store_token(token, user_id, expiration_time, token_type, metadata)

    async def get_token_async(self, token: str) -> Optional[TokenInfo]:
        await asyncio.sleep(0)
        return self.get_token(token)

    async def get_tokens_for_user_async(self, user_id: str, token_type: Optional[str] = None) -> List[TokenInfo]:
        await asyncio.sleep(0)
        return self.get_tokens_for_user(user_id, token_type)

    async def remove_token_async(self, token: str) -> bool:
        await asyncio.sleep(0)
        return self.remove_token(token)

    async def remove_tokens_for_user_async(self, user_id: str, token_type: Optional[str] = None) -> int:
        await asyncio.sleep(0)
        return self.remove_tokens_for_user(user_id, token_type)

    async def remove_expired_tokens_async(self, before: Optional[datetime] = None) -> int:
        await asyncio.sleep(0)
        return self.remove_expired_tokens(before)

    async def token_exists_async(self, token: str) -> bool:
        await asyncio.sleep(0)
        return self.token_exists(token)

    async def get_token_count_async(self, user_id: Optional[str] = None, token_type: Optional[str] = None) -> int:
        await asyncio.sleep(0)
        return self.get_token_count(user_id, token_type)

    # Internals

    def _run_cleanup_if_needed(self) -> None:
        with self._lock:
            if self._cleanup_in_progress:
                return
            if self._clock() - self._last_cleanup < self.cleanup_interval:
                return
            self._cleanup_in_progress = True
            self._cleanup_idle.clear()

        worker = threading.Thread(target=self._cleanup_worker, name="token-repository-cleanup", daemon=True)
        worker.start()

    def _cleanup_worker(self) -> None:
        try:
            self.remove_expired_tokens()
        except Exception as e:
            logger.warning(f"Background token cleanup failed: {e}")
        finally:
            with self._lock:
                self._cleanup_in_progress = False
            self._cleanup_idle.set()
