"""Immutable JWT domain entity."""

import copy
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from ...config.logging_config import mask_token
from ..constants import (
    ALGORITHM_NONE,
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
)
from ..exceptions import ClaimNotFoundError, ClaimTypeMismatchError, InvalidArgumentError
from ..value_objects import ClaimValue


@dataclass(frozen=True)
class JwtToken:
    """Parsed or freshly produced JWT.

    Header and payload are deep-copied on construction and exposed as
    read-only mappings, so a token never shares state with the builder or
    the dicts it was created from. ``raw`` is the exact compact string the
    token was parsed from; edits through ``with_*``/``without_*`` return a
    new token whose ``raw`` is None because its signature no longer covers
    its content.
    """

    header: Mapping[str, Any]
    payload: Mapping[str, Any]
    signature: str = ""
    raw: Optional[str] = None

    def __post_init__(self) -> None:
        """Freeze header and payload as private copies."""
        if self.header is None or self.payload is None:
            raise InvalidArgumentError("Header and payload are required.")
        object.__setattr__(self, "header", MappingProxyType(copy.deepcopy(dict(self.header))))
        object.__setattr__(self, "payload", MappingProxyType(copy.deepcopy(dict(self.payload))))
        object.__setattr__(self, "signature", self.signature or "")

    # Claim access

    def get_claim(self, name: str, expected_type: Optional[Type] = None) -> Any:
        """Get a payload claim.

        Args:
            name: Claim name (case-sensitive)
            expected_type: Optional target type (str, int, float, bool, dict,
                list or datetime)

        Returns:
            Claim value, converted when ``expected_type`` is given

        Raises:
            ClaimNotFoundError: If the claim is absent
            ClaimTypeMismatchError: If the value cannot be converted
        """
        return self._read(self.payload, name, expected_type, "payload")

    def try_get_claim(self, name: str, expected_type: Optional[Type] = None) -> Tuple[bool, Any]:
        """Get a payload claim, returning (found, value) instead of raising."""
        return self._try_read(self.payload, name, expected_type)

    def get_header(self, name: str, expected_type: Optional[Type] = None) -> Any:
        """Get a header parameter. Raises like ``get_claim``."""
        return self._read(self.header, name, expected_type, "header")

    def try_get_header(self, name: str, expected_type: Optional[Type] = None) -> Tuple[bool, Any]:
        return self._try_read(self.header, name, expected_type)

    def get_claim_value(self, name: str) -> ClaimValue:
        """Get a payload claim as a tagged value."""
        if name not in self.payload:
            raise ClaimNotFoundError(name)
        return ClaimValue.of(copy.deepcopy(self.payload[name]))

    def has_claim(self, name: str) -> bool:
        return name in self.payload

    def has_header(self, name: str) -> bool:
        return name in self.header

    @property
    def claims(self) -> Dict[str, Any]:
        """Deep copy of the payload as a plain dict."""
        return copy.deepcopy(dict(self.payload))

    @property
    def headers(self) -> Dict[str, Any]:
        """Deep copy of the header as a plain dict."""
        return copy.deepcopy(dict(self.header))

    # Derived tokens

    def with_claim(self, name: str, value: Any) -> "JwtToken":
        """Return a copy with ``name`` set in the payload (raw is dropped)."""
        self._require_name(name)
        payload = dict(self.payload)
        payload[name] = value
        return JwtToken(self.header, payload, self.signature, None)

    def without_claim(self, name: str) -> "JwtToken":
        self._require_name(name)
        payload = {k: v for k, v in self.payload.items() if k != name}
        return JwtToken(self.header, payload, self.signature, None)

    def with_header_claim(self, name: str, value: Any) -> "JwtToken":
        self._require_name(name)
        header = dict(self.header)
        header[name] = value
        return JwtToken(header, self.payload, self.signature, None)

    def without_header_claim(self, name: str) -> "JwtToken":
        self._require_name(name)
        header = {k: v for k, v in self.header.items() if k != name}
        return JwtToken(header, self.payload, self.signature, None)

    # Raw form

    @property
    def is_stale(self) -> bool:
        """True when the token has no raw form its signature could cover."""
        return self.raw is None

    @property
    def signing_input(self) -> Optional[bytes]:
        """ASCII ``header.payload`` bytes from the raw form, if known."""
        if self.raw is None:
            return None
        return self.raw[: self.raw.rindex(".")].encode("ascii")

    @property
    def is_signed(self) -> bool:
        return bool(self.signature) and self.algorithm not in (None, ALGORITHM_NONE)

    def mask_for_logging(self) -> str:
        """Masked raw form safe to log."""
        if self.raw is None:
            return f"<unsigned token sub={self.subject!r}>"
        return mask_token(self.raw)

    # Well-known claims

    @property
    def issuer(self) -> Optional[str]:
        return self._optional(self.payload, CLAIM_ISSUER, str)

    @property
    def subject(self) -> Optional[str]:
        return self._optional(self.payload, CLAIM_SUBJECT, str)

    @property
    def audience(self) -> Any:
        """Raw ``aud`` value: a string, a list of strings, or None."""
        return copy.deepcopy(self.payload.get(CLAIM_AUDIENCE))

    @property
    def audiences(self) -> List[str]:
        """``aud`` normalized to a list."""
        value = self.payload.get(CLAIM_AUDIENCE)
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [ClaimValue.of(v).as_text() for v in value]
        return [ClaimValue.of(value).as_text()]

    @property
    def expiration_time(self) -> Optional[datetime]:
        return self._optional(self.payload, CLAIM_EXPIRATION_TIME, datetime)

    @property
    def not_before(self) -> Optional[datetime]:
        return self._optional(self.payload, CLAIM_NOT_BEFORE, datetime)

    @property
    def issued_at(self) -> Optional[datetime]:
        return self._optional(self.payload, CLAIM_ISSUED_AT, datetime)

    @property
    def jwt_id(self) -> Optional[str]:
        return self._optional(self.payload, CLAIM_JWT_ID, str)

    @property
    def algorithm(self) -> Optional[str]:
        return self._optional(self.header, HEADER_ALGORITHM, str)

    @property
    def key_id(self) -> Optional[str]:
        return self._optional(self.header, HEADER_KEY_ID, str)

    @property
    def token_type(self) -> Optional[str]:
        return self._optional(self.header, HEADER_TYPE, str)

    def __str__(self) -> str:
        return self.raw if self.raw is not None else ""

    def __repr__(self) -> str:
        return (
            f"JwtToken(alg={self.algorithm!r}, kid={self.key_id!r}, "
            f"sub={self.subject!r}, stale={self.is_stale})"
        )

    # Internals

    @staticmethod
    def _require_name(name: str) -> None:
        if not name:
            raise InvalidArgumentError("Claim name cannot be null or empty.")

    @staticmethod
    def _read(source: Mapping[str, Any], name: str, expected_type: Optional[Type], location: str) -> Any:
        if name not in source:
            raise ClaimNotFoundError(name, location)
        value = source[name]
        converted, result = ClaimValue.of(value).try_convert(expected_type)
        if not converted:
            raise ClaimTypeMismatchError(name, expected_type, value)
        return copy.deepcopy(result)

    @staticmethod
    def _try_read(source: Mapping[str, Any], name: str, expected_type: Optional[Type]) -> Tuple[bool, Any]:
        if name not in source:
            return False, None
        converted, result = ClaimValue.of(source[name]).try_convert(expected_type)
        if not converted:
            return False, None
        return True, copy.deepcopy(result)

    @classmethod
    def _optional(cls, source: Mapping[str, Any], name: str, expected_type: Type) -> Any:
        found, value = cls._try_read(source, name, expected_type)
        return value if found else None
