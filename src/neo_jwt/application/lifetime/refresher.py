"""
Refresh token issuing and access token rotation.

A refresh token is an HS256 JWT with ``typ`` "refresh", signed with the
refresher's key and bound to exactly one access token through the
``ath`` claim (base64url SHA-256 of the access token). Presenting the
pair re-issues the access token with fresh temporal claims and rotates
the refresh token. With a revoker, the presented refresh token is revoked
before anything is issued, so each refresh token is exchanged at most once.
Re-issued access tokens carry the refresher key's ``kid``, not the original.
"""

import asyncio
import hashlib
import hmac
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from ...config.logging_config import mask_token
from ...config.settings import JwtSettings, get_settings
from ...core.constants import (
    CLAIM_ACCESS_TOKEN_BINDING,
    CLAIM_EXPIRATION_TIME,
    CLAIM_JWT_ID,
    TEMPORAL_CLAIMS,
    TOKEN_TYPE_REFRESH,
)
from ...core.exceptions import InvalidArgumentError, InvalidKeyError, NeoJwtError
from ...core.protocols import TokenRevoker
from ...core.value_objects import KeyKind, SecurityKey
from ...utils import base64url
from ...utils.clock import Clock, resolve_clock, to_unix_seconds
from ..builder import JwtBuilder
from ..parser import JwtParser
from ..validators import JwtValidator, ValidationParameters
from .refresh_result import RefreshResult

logger = logging.getLogger(__name__)

ROTATED_REFRESH_TOKEN_REASON = "Refresh token rotated"


def access_token_hash(access_token: str) -> str:
    """Binding value stored in a refresh token's ``ath`` claim."""
    digest = hashlib.sha256(access_token.encode("ascii")).digest()
    return base64url.encode(digest)


def _from_unix_seconds(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class JwtRefresher:
    """Issues refresh tokens and exchanges them for new access tokens.

    Thread-safe: every call builds its own JwtBuilder.
    """

    def __init__(
        self,
        signing_key: Union[bytes, str, SecurityKey],
        validator: Optional[JwtValidator] = None,
        parser: Optional[JwtParser] = None,
        access_token_lifetime: timedelta = timedelta(hours=1),
        refresh_token_lifetime: timedelta = timedelta(days=30),
        revoker: Optional[TokenRevoker] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize refresher.

        Args:
            signing_key: HMAC key for refresh tokens and re-issued access tokens
            validator: Validator for refresh tokens
            parser: Parser for access tokens
            access_token_lifetime: Lifetime of re-issued access tokens
            refresh_token_lifetime: Default lifetime of refresh tokens
            revoker: When set, rotated refresh tokens are revoked and
                revoked refresh tokens are refused
            clock: Time source

        Raises:
            InvalidKeyError: If the signing key is missing or not symmetric
        """
        if signing_key is None:
            raise InvalidKeyError("Refresh signing key cannot be null.")
        key = SecurityKey.coerce(signing_key)
        if key.kind is not KeyKind.SYMMETRIC:
            raise InvalidKeyError("Refresh signing key must be a symmetric key.", key_kind=key.kind.value)

        self._signing_key = key
        self._clock = resolve_clock(clock)
        self._parser = parser or JwtParser()
        self._validator = validator or JwtValidator(parser=self._parser, clock=self._clock)
        self.access_token_lifetime = access_token_lifetime
        self.refresh_token_lifetime = refresh_token_lifetime
        self._revoker = revoker

    @classmethod
    def from_settings(
        cls,
        signing_key: Union[bytes, str, SecurityKey],
        settings: Optional[JwtSettings] = None,
        **kwargs: Any,
    ) -> "JwtRefresher":
        settings = settings or get_settings()
        kwargs.setdefault("access_token_lifetime", settings.access_token_lifetime)
        kwargs.setdefault("refresh_token_lifetime", settings.refresh_token_lifetime)
        return cls(signing_key, **kwargs)

    def create_refresh_token(self, access_token: str, lifetime: Optional[timedelta] = None) -> str:
        """Issue a refresh token bound to ``access_token``.

        Raises:
            InvalidArgumentError: If the access token is empty
            FormatError: If the access token is malformed
        """
        if not access_token:
            raise InvalidArgumentError("Access token cannot be null or empty.")
        token = self._parser.parse(access_token)
        return self._issue_refresh_token(
            access_token, token.subject, self._clock(), lifetime or self.refresh_token_lifetime
        )

    def validate_refresh_token(self, access_token: str, refresh_token: str) -> bool:
        """Check that ``refresh_token`` is ours, live, unrevoked and bound to ``access_token``."""
        if not access_token or not refresh_token:
            return False

        result = self._validator.validate(refresh_token, self._refresh_parameters())
        if not result.is_valid:
            logger.debug(f"Refresh token {mask_token(refresh_token)} rejected: {result.first_error.message}")
            return False

        ok, token = self._parser.try_parse(refresh_token)
        if not ok:
            return False
        found, binding = token.try_get_claim(CLAIM_ACCESS_TOKEN_BINDING, str)
        if not found:
            return False
        return hmac.compare_digest(binding, access_token_hash(access_token))

    def refresh(self, access_token: str, refresh_token: str) -> RefreshResult:
        """Exchange a valid pair for a new access token and refresh token.

        Raises:
            InvalidArgumentError: If either token is empty
        """
        if not access_token:
            raise InvalidArgumentError("Access token cannot be null or empty.")
        if not refresh_token:
            raise InvalidArgumentError("Refresh token cannot be null or empty.")

        if not self.validate_refresh_token(access_token, refresh_token):
            return RefreshResult.failure("Invalid refresh token.")
        if self._revoker is not None and not self._claim_refresh_token(refresh_token):
            logger.warning(f"Refresh token {mask_token(refresh_token)} already used")
            return RefreshResult.failure("Invalid refresh token.")

        try:
            original = self._parser.parse(access_token)
            now = self._clock()
            access_expires = _from_unix_seconds(to_unix_seconds(now + self.access_token_lifetime))
            refresh_expires = _from_unix_seconds(to_unix_seconds(now + self.refresh_token_lifetime))

            builder = JwtBuilder(clock=self._clock)
            for name, value in original.claims.items():
                if name not in TEMPORAL_CLAIMS and name != CLAIM_JWT_ID:
                    builder.add_claim(name, value)
            new_access_token = (
                builder.set_jwt_id(str(uuid.uuid4()))
                .set_issued_at(now)
                .set_not_before(now)
                .set_expiration_time(access_expires)
                .sign_hs256(self._signing_key)
            )

            new_refresh_token = self._issue_refresh_token(
                new_access_token, original.subject, now, self.refresh_token_lifetime
            )
        except NeoJwtError as e:
            logger.warning(f"Failed to refresh token {mask_token(access_token)}: {e.message}")
            return RefreshResult.failure(f"Failed to refresh token: {e.message}")

        logger.info(f"Refreshed access token {mask_token(access_token)}")
        return RefreshResult.success(new_access_token, new_refresh_token, access_expires, refresh_expires)

    async def create_refresh_token_async(self, access_token: str, lifetime: Optional[timedelta] = None) -> str:
        await asyncio.sleep(0)
        return self.create_refresh_token(access_token, lifetime)

    async def validate_refresh_token_async(self, access_token: str, refresh_token: str) -> bool:
        await asyncio.sleep(0)
        return self.validate_refresh_token(access_token, refresh_token)

    async def refresh_async(self, access_token: str, refresh_token: str) -> RefreshResult:
        await asyncio.sleep(0)
        return self.refresh(access_token, refresh_token)

    def _issue_refresh_token(
        self, access_token: str, subject: Optional[str], issued_at: datetime, lifetime: timedelta
    ) -> str:
        builder = JwtBuilder(clock=self._clock).set_token_type(TOKEN_TYPE_REFRESH)
        if subject:
            builder.set_subject(subject)
        return (
            builder.set_jwt_id(str(uuid.uuid4()))
            .add_claim(CLAIM_ACCESS_TOKEN_BINDING, access_token_hash(access_token))
            .set_issued_at(issued_at)
            .set_not_before(issued_at)
            .set_expiration_time(issued_at + lifetime)
            .sign_hs256(self._signing_key)
        )

    def _refresh_parameters(self) -> ValidationParameters:
        return ValidationParameters(
            validate_issuer=False,
            validate_audience=False,
            symmetric_key=self._signing_key,
            clock_skew=timedelta(0),
            require_token_type=True,
            required_token_type=TOKEN_TYPE_REFRESH,
            validate_revocation=self._revoker is not None,
            token_revoker=self._revoker,
        )

    def _claim_refresh_token(self, refresh_token: str) -> bool:
        token = self._parser.parse(refresh_token)
        found, exp = token.try_get_claim(CLAIM_EXPIRATION_TIME, datetime)
        return self._revoker.revoke(refresh_token, ROTATED_REFRESH_TOKEN_REASON, exp if found else None)
