"""Structural JWT parser.

Parsing only checks syntax: three base64url segments whose first two
decode to JSON objects. Signatures, lifetimes and claims are left to the
validator.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from ..config.logging_config import mask_token
from ..core.entities import JwtToken
from ..core.exceptions import DecodeError, FormatError, InvalidArgumentError, SerializationError
from ..core.protocols import ClaimSerializer
from ..infrastructure.serializers import JsonClaimSerializer
from ..utils import base64url

logger = logging.getLogger(__name__)


class JwtParser:
    """Parses compact JWT strings into JwtToken entities."""

    def __init__(self, serializer: Optional[ClaimSerializer] = None):
        self._serializer = serializer or JsonClaimSerializer()

    def parse(self, raw: str) -> JwtToken:
        """Parse a compact JWT.

        Args:
            raw: ``header.payload.signature`` string

        Returns:
            Parsed token; ``signature`` is kept as its base64url text

        Raises:
            InvalidArgumentError: If ``raw`` is empty
            FormatError: If the token is not three segments, a segment is
                not base64url, or header/payload are not JSON objects
        """
        if not raw:
            raise InvalidArgumentError("Token cannot be null or empty.")

        parts = raw.split(".")
        if len(parts) != 3:
            raise FormatError(
                "JWT token must contain three parts separated by dots.",
                details={"parts": len(parts)},
            )

        header = self._decode_segment(parts[0], "header")
        payload = self._decode_segment(parts[1], "payload")
        return JwtToken(header=header, payload=payload, signature=parts[2], raw=raw)

    def try_parse(self, raw: str) -> Tuple[bool, Optional[JwtToken]]:
        """Parse without raising; returns (success, token)."""
        try:
            return True, self.parse(raw)
        except (FormatError, InvalidArgumentError) as e:
            logger.debug(f"Token {mask_token(raw or '')} failed to parse: {e.message}")
            return False, None

    async def parse_async(self, raw: str) -> JwtToken:
        """Async variant of ``parse``; honours task cancellation."""
        await asyncio.sleep(0)
        return self.parse(raw)

    async def try_parse_async(self, raw: str) -> Tuple[bool, Optional[JwtToken]]:
        await asyncio.sleep(0)
        return self.try_parse(raw)

    def _decode_segment(self, segment: str, name: str) -> Dict[str, Any]:
        try:
            text = base64url.decode_to_str(segment)
        except DecodeError as e:
            raise FormatError(
                f"JWT {name} is not valid base64url.",
                details={"segment": name},
            ) from e

        try:
            value = self._serializer.deserialize(text, dict)
        except SerializationError as e:
            raise FormatError(
                "JWT token contains invalid JSON.",
                details={"segment": name},
            ) from e
        return value
