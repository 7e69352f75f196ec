"""Validation parameters."""

import hashlib
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Dict, List, MutableSet, Optional, Union

from cryptography.hazmat.primitives import serialization

from ...config.settings import JwtSettings, get_settings
from ...core.constants import TOKEN_TYPE_JWT
from ...core.exceptions import InvalidArgumentError
from ...core.protocols import TokenRevoker
from ...core.value_objects import KeyKind, SecurityKey


def _coerce_key(key: Any, factory: Callable[[Any], SecurityKey]) -> Optional[SecurityKey]:
    if key is None or isinstance(key, SecurityKey):
        return key
    return factory(key)


def _coerce_skew(value: Union[timedelta, int, float]) -> timedelta:
    if not isinstance(value, timedelta):
        value = timedelta(seconds=value)
    if value < timedelta(0):
        raise InvalidArgumentError("Clock skew cannot be negative.")
    return value


@dataclass
class ValidationParameters:
    """What to check when validating a token, and with which keys.

    Key fields accept SecurityKey instances, raw secrets, PEM text or
    ``cryptography`` keys and are normalized on construction.

    ``used_jtis`` is mutated: a passing JTI check adds the token's ``jti``
    to it. Callers sharing one set across threads must supply a
    thread-safe set.
    """

    valid_issuer: Optional[str] = None
    valid_issuers: Optional[List[str]] = None
    valid_audience: Optional[str] = None
    valid_audiences: Optional[List[str]] = None
    validate_lifetime: bool = True
    validate_expiration: bool = True
    validate_not_before: bool = True
    validate_issuer: bool = True
    validate_audience: bool = True
    validate_signature: bool = True
    clock_skew: timedelta = timedelta(minutes=5)
    symmetric_key: Optional[SecurityKey] = None
    rsa_key: Optional[SecurityKey] = None
    ecdsa_key: Optional[SecurityKey] = None
    security_keys: Dict[str, SecurityKey] = field(default_factory=dict)
    validate_jti: bool = False
    used_jtis: Optional[MutableSet[str]] = None
    jti_validator: Optional[Callable[[str], bool]] = None
    require_token_type: bool = False
    required_token_type: str = TOKEN_TYPE_JWT
    validate_revocation: bool = False
    token_revoker: Optional[TokenRevoker] = None
    enable_caching: bool = False
    cache_duration: timedelta = timedelta(minutes=5)
    allow_none_algorithm: bool = False
    max_token_size_bytes: int = 8192

    def __post_init__(self) -> None:
        """Normalize keys and durations."""
        self.clock_skew = _coerce_skew(self.clock_skew)
        if not isinstance(self.cache_duration, timedelta):
            self.cache_duration = timedelta(seconds=self.cache_duration)

        self.symmetric_key = _coerce_key(self.symmetric_key, SecurityKey.symmetric)
        self.rsa_key = _coerce_key(self.rsa_key, SecurityKey.rsa)
        self.ecdsa_key = _coerce_key(self.ecdsa_key, SecurityKey.ecdsa)
        self.security_keys = {
            kid: key if isinstance(key, SecurityKey) else SecurityKey.coerce(key, key_id=kid)
            for kid, key in (self.security_keys or {}).items()
        }

        if self.valid_issuers is not None:
            self.valid_issuers = list(self.valid_issuers)
        if self.valid_audiences is not None:
            self.valid_audiences = list(self.valid_audiences)
        if self.validate_jti and self.used_jtis is None:
            self.used_jtis = set()
        if self.max_token_size_bytes <= 0:
            raise InvalidArgumentError("Maximum token size must be positive.")

    @classmethod
    def from_settings(cls, settings: Optional[JwtSettings] = None, **overrides: Any) -> "ValidationParameters":
        """Build parameters with defaults taken from JwtSettings."""
        settings = settings or get_settings()
        values: Dict[str, Any] = {
            "clock_skew": settings.clock_skew,
            "cache_duration": settings.cache_duration,
            "max_token_size_bytes": settings.max_token_size_bytes,
        }
        values.update(overrides)
        return cls(**values)

    @property
    def uses_external_state(self) -> bool:
        """True when a stage depends on state outside the token itself."""
        return self.validate_jti or (self.validate_revocation and self.token_revoker is not None)

    def fingerprint(self) -> str:
        """Stable digest of everything that decides a validation outcome.

        Covers the validate flags, expected issuer/audience/type and the
        verification keys, so results cached under one configuration are
        never served for another.
        """
        flags = "".join(
            "1" if flag else "0"
            for flag in (
                self.validate_lifetime,
                self.validate_expiration,
                self.validate_not_before,
                self.validate_issuer,
                self.validate_audience,
                self.validate_signature,
                self.validate_jti,
                self.require_token_type,
                self.validate_revocation,
                self.allow_none_algorithm,
            )
        )
        digest = hashlib.sha256()
        for part in (
            self.valid_issuer,
            ",".join(self.valid_issuers or []),
            self.valid_audience,
            ",".join(self.valid_audiences or []),
            self.required_token_type if self.require_token_type else "",
            str(int(self.clock_skew.total_seconds())),
        ):
            digest.update((part or "").encode("utf-8"))
            digest.update(b"\x00")
        for name, key in (
            ("sym", self.symmetric_key),
            ("rsa", self.rsa_key),
            ("ec", self.ecdsa_key),
        ):
            digest.update(name.encode("ascii"))
            digest.update(key_fingerprint(key).encode("ascii"))
        for kid in sorted(self.security_keys):
            digest.update(kid.encode("utf-8"))
            digest.update(key_fingerprint(self.security_keys[kid]).encode("ascii"))
        return f"{flags}:{digest.hexdigest()[:32]}"


def key_fingerprint(key: Optional[SecurityKey]) -> str:
    """SHA-256 of a key's verification material (empty for no key)."""
    if key is None:
        return ""
    if key.kind == KeyKind.SYMMETRIC:
        material = key.material
    else:
        material = key.public_key().public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    return hashlib.sha256(material).hexdigest()
