"""Token persistence on top of any TokenStore."""

import logging
from datetime import timedelta
from typing import Optional

from ...core.entities import JwtToken
from ...core.exceptions import InvalidArgumentError, SerializationError
from ...core.protocols import ClaimSerializer, TokenStore
from ..serializers import JsonClaimSerializer

logger = logging.getLogger(__name__)


class SerializedTokenStorage:
    """Stores parsed tokens in a TokenStore as JSON documents.

    The document keeps header, payload, signature and raw form, so a token
    read back is equal to the one stored, stale or not.
    """

    KEY_PREFIX = "token:"

    def __init__(self, store: TokenStore, serializer: Optional[ClaimSerializer] = None):
        if store is None:
            raise InvalidArgumentError("Token store cannot be null.")
        self._store = store
        self._serializer = serializer or JsonClaimSerializer()

    def set_token(self, key: str, token: JwtToken, ttl: Optional[timedelta] = None) -> None:
        """Serialize and store a token.

        Raises:
            InvalidArgumentError: If the key is empty or the token is None
            SerializationError: If the token claims cannot be serialized
        """
        if not key:
            raise InvalidArgumentError("Key cannot be null or empty.")
        if token is None:
            raise InvalidArgumentError("Token cannot be null.")
        self._store.set(self.KEY_PREFIX + key, self._dump(token), ttl)

    def get_token(self, key: str) -> Optional[JwtToken]:
        """Load a token, or None when missing or unreadable."""
        text = self._store.get(self.KEY_PREFIX + key)
        if text is None:
            return None
        try:
            return self._load(text)
        except SerializationError as e:
            logger.warning(f"Discarding unreadable stored token '{key}': {e.message}")
            self._store.remove(self.KEY_PREFIX + key)
            return None

    def remove_token(self, key: str) -> None:
        self._store.remove(self.KEY_PREFIX + key)

    def clear(self) -> None:
        self._store.clear()

    async def set_token_async(self, key: str, token: JwtToken, ttl: Optional[timedelta] = None) -> None:
        if not key:
            raise InvalidArgumentError("Key cannot be null or empty.")
        if token is None:
            raise InvalidArgumentError("Token cannot be null.")
        await self._store.set_async(self.KEY_PREFIX + key, self._dump(token), ttl)

    async def get_token_async(self, key: str) -> Optional[JwtToken]:
        text = await self._store.get_async(self.KEY_PREFIX + key)
        if text is None:
            return None
        try:
            return self._load(text)
        except SerializationError as e:
            logger.warning(f"Discarding unreadable stored token '{key}': {e.message}")
            await self._store.remove_async(self.KEY_PREFIX + key)
            return None

    async def remove_token_async(self, key: str) -> None:
        await self._store.remove_async(self.KEY_PREFIX + key)

    async def clear_async(self) -> None:
        await self._store.clear_async()

    def _dump(self, token: JwtToken) -> str:
        return self._serializer.serialize({
            "header": token.headers,
            "payload": token.claims,
            "signature": token.signature,
            "raw": token.raw,
        })

    def _load(self, text: str) -> JwtToken:
        document = self._serializer.deserialize(text, dict)
        try:
            return JwtToken(
                header=document["header"],
                payload=document["payload"],
                signature=document.get("signature", ""),
                raw=document.get("raw"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Stored token document is malformed: {e}") from e
