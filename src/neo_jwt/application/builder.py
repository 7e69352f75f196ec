"""Fluent JWT builder.

The builder accumulates header and payload imperatively and produces the
compact ``header.payload.signature`` string. It is single-writer: use one
instance per token under construction.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional, Union

from ..core.constants import (
    ALGORITHM_ES256,
    ALGORITHM_ES384,
    ALGORITHM_ES512,
    ALGORITHM_HS256,
    ALGORITHM_HS384,
    ALGORITHM_HS512,
    ALGORITHM_NONE,
    ALGORITHM_RS256,
    ALGORITHM_RS384,
    ALGORITHM_RS512,
    CLAIM_AUDIENCE,
    CLAIM_EXPIRATION_TIME,
    CLAIM_ISSUED_AT,
    CLAIM_ISSUER,
    CLAIM_JWT_ID,
    CLAIM_NOT_BEFORE,
    CLAIM_SUBJECT,
    HEADER_ALGORITHM,
    HEADER_KEY_ID,
    HEADER_TYPE,
    TOKEN_TYPE_JWT,
)
from ..core.exceptions import InvalidArgumentError, InvalidKeyError
from ..core.protocols import ClaimSerializer
from ..core.value_objects import SecurityKey
from ..infrastructure.serializers import JsonClaimSerializer
from ..utils import base64url
from ..utils.clock import Clock, resolve_clock, to_unix_seconds
from .signing import SignatureEngine

logger = logging.getLogger(__name__)


class JwtBuilder:
    """Builds and signs compact JWTs.

    Example:
        token = (
            JwtBuilder()
            .set_issuer("auth.example.com")
            .set_subject("user-1")
            .add_lifetime_claims(timedelta(minutes=15))
            .sign_hs256(secret)
        )
    """

    def __init__(
        self,
        serializer: Optional[ClaimSerializer] = None,
        signature_engine: Optional[SignatureEngine] = None,
        clock: Optional[Clock] = None,
    ):
        self._serializer = serializer or JsonClaimSerializer()
        self._signature_engine = signature_engine or SignatureEngine()
        self._clock = resolve_clock(clock)
        self._header: Dict[str, Any] = {HEADER_TYPE: TOKEN_TYPE_JWT}
        self._payload: Dict[str, Any] = {}

    def reset(self) -> "JwtBuilder":
        """Start over with the default header and an empty payload."""
        self._header = {HEADER_TYPE: TOKEN_TYPE_JWT}
        self._payload = {}
        return self

    # Claims

    def add_claim(self, name: str, value: Any) -> "JwtBuilder":
        """Set a payload claim.

        Raises:
            InvalidArgumentError: If the claim name is empty
        """
        self._require_name(name)
        self._payload[name] = value
        return self

    def add_claims(self, claims: Dict[str, Any]) -> "JwtBuilder":
        for name, value in claims.items():
            self.add_claim(name, value)
        return self

    def add_header_claim(self, name: str, value: Any) -> "JwtBuilder":
        """Set a header parameter.

        Raises:
            InvalidArgumentError: If the parameter name is empty
        """
        self._require_name(name)
        self._header[name] = value
        return self

    def set_header_parameter(self, name: str, value: Any) -> "JwtBuilder":
        return self.add_header_claim(name, value)

    def set_token_type(self, token_type: str) -> "JwtBuilder":
        return self.add_header_claim(HEADER_TYPE, token_type)

    def set_key_id(self, key_id: str) -> "JwtBuilder":
        return self.add_header_claim(HEADER_KEY_ID, key_id)

    def set_issuer(self, issuer: str) -> "JwtBuilder":
        return self.add_claim(CLAIM_ISSUER, issuer)

    def set_subject(self, subject: str) -> "JwtBuilder":
        return self.add_claim(CLAIM_SUBJECT, subject)

    def set_audience(self, audience: Union[str, Iterable[str]]) -> "JwtBuilder":
        """Set ``aud`` to a single audience or a list of audiences."""
        if not isinstance(audience, str):
            audience = list(audience)
        return self.add_claim(CLAIM_AUDIENCE, audience)

    def set_jwt_id(self, jwt_id: str) -> "JwtBuilder":
        return self.add_claim(CLAIM_JWT_ID, jwt_id)

    def set_id(self, jwt_id: str) -> "JwtBuilder":
        return self.set_jwt_id(jwt_id)

    # Time claims (stored as whole Unix seconds)

    def set_expiration_time(self, expires_at: datetime) -> "JwtBuilder":
        return self.add_claim(CLAIM_EXPIRATION_TIME, to_unix_seconds(expires_at))

    def set_expiration(self, expires: Union[datetime, timedelta]) -> "JwtBuilder":
        """Set ``exp`` from an instant or from a lifetime relative to now."""
        if isinstance(expires, timedelta):
            expires = self._clock() + expires
        return self.set_expiration_time(expires)

    def set_not_before(self, not_before: datetime) -> "JwtBuilder":
        return self.add_claim(CLAIM_NOT_BEFORE, to_unix_seconds(not_before))

    def set_issued_at(self, issued_at: datetime) -> "JwtBuilder":
        return self.add_claim(CLAIM_ISSUED_AT, to_unix_seconds(issued_at))

    def set_issued_now(self) -> "JwtBuilder":
        return self.set_issued_at(self._clock())

    def add_lifetime_claims(self, lifetime: timedelta) -> "JwtBuilder":
        """Set ``iat`` and ``nbf`` to now and ``exp`` to now plus ``lifetime``."""
        now = self._clock()
        self.set_issued_at(now)
        self.set_not_before(now)
        return self.set_expiration_time(now + lifetime)

    # Terminal operations

    def sign_hs256(self, key: Union[bytes, str, SecurityKey]) -> str:
        return self.sign(ALGORITHM_HS256, key)

    def sign_hs384(self, key: Union[bytes, str, SecurityKey]) -> str:
        return self.sign(ALGORITHM_HS384, key)

    def sign_hs512(self, key: Union[bytes, str, SecurityKey]) -> str:
        return self.sign(ALGORITHM_HS512, key)

    def sign_rs256(self, private_key: Any) -> str:
        return self.sign(ALGORITHM_RS256, private_key)

    def sign_rs384(self, private_key: Any) -> str:
        return self.sign(ALGORITHM_RS384, private_key)

    def sign_rs512(self, private_key: Any) -> str:
        return self.sign(ALGORITHM_RS512, private_key)

    def sign_es256(self, private_key: Any) -> str:
        return self.sign(ALGORITHM_ES256, private_key)

    def sign_es384(self, private_key: Any) -> str:
        return self.sign(ALGORITHM_ES384, private_key)

    def sign_es512(self, private_key: Any) -> str:
        return self.sign(ALGORITHM_ES512, private_key)

    def sign(self, algorithm: str, key: Any) -> str:
        """Sign the current header and payload.

        A key carrying a ``key_id`` sets the ``kid`` header unless one was
        set explicitly.

        Args:
            algorithm: JWS algorithm name
            key: SecurityKey, HMAC secret, or ``cryptography`` private key

        Returns:
            Compact ``header.payload.signature`` string

        Raises:
            InvalidKeyError: If the key is empty or unusable for the algorithm
            UnsupportedAlgorithmError: If the algorithm is not supported
        """
        if key is None:
            raise InvalidKeyError("Signing key cannot be null.", algorithm=algorithm)

        security_key = SecurityKey.coerce(key)
        header = dict(self._header)
        header[HEADER_ALGORITHM] = algorithm
        if security_key.key_id and HEADER_KEY_ID not in header:
            header[HEADER_KEY_ID] = security_key.key_id

        signing_input = self._signing_input(header)
        signature = self._signature_engine.sign(signing_input.encode("ascii"), algorithm, security_key)
        logger.debug(f"Built {algorithm} token with {len(self._payload)} claims")
        return f"{signing_input}.{base64url.encode(signature)}"

    def create_unsecured(self) -> str:
        """Produce an unsigned token (``alg`` is ``none``, empty signature)."""
        header = dict(self._header)
        header[HEADER_ALGORITHM] = ALGORITHM_NONE
        return f"{self._signing_input(header)}."

    def _signing_input(self, header: Dict[str, Any]) -> str:
        encoded_header = base64url.encode(self._serializer.serialize(header))
        encoded_payload = base64url.encode(self._serializer.serialize(self._payload))
        return f"{encoded_header}.{encoded_payload}"

    @staticmethod
    def _require_name(name: str) -> None:
        if not name:
            raise InvalidArgumentError("Claim name cannot be null or empty.")
