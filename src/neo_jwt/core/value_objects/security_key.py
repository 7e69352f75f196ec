"""Security key value object.

Keys are tagged by kind so the signature engine can pick the right
primitive without inspecting raw key types at verify time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from ..exceptions import InvalidKeyError


class KeyKind(str, Enum):
    """Kind of key material."""
    SYMMETRIC = "symmetric"
    RSA = "rsa"
    ECDSA = "ecdsa"


_RSA_TYPES = (rsa.RSAPrivateKey, rsa.RSAPublicKey)
_EC_TYPES = (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)
_PEM_MARKER = "-----BEGIN"


@dataclass(frozen=True)
class SecurityKey:
    """Signing or verification key.

    ``material`` is raw bytes for symmetric keys and a ``cryptography`` key
    object for RSA and ECDSA keys.
    """

    kind: KeyKind
    material: Any
    key_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate key material against its kind."""
        if self.kind == KeyKind.SYMMETRIC:
            if not isinstance(self.material, (bytes, bytearray)) or not self.material:
                raise InvalidKeyError("Symmetric key cannot be empty.", key_kind=self.kind.value)
            object.__setattr__(self, "material", bytes(self.material))
        elif self.kind == KeyKind.RSA:
            if not isinstance(self.material, _RSA_TYPES):
                raise InvalidKeyError("RSA key material must be an RSA key.", key_kind=self.kind.value)
        elif self.kind == KeyKind.ECDSA:
            if not isinstance(self.material, _EC_TYPES):
                raise InvalidKeyError("ECDSA key material must be an EC key.", key_kind=self.kind.value)

        if self.key_id is not None and not str(self.key_id).strip():
            raise InvalidKeyError("Key ID cannot be empty.", key_kind=self.kind.value)

    @classmethod
    def symmetric(cls, secret: Union[bytes, str], key_id: Optional[str] = None) -> "SecurityKey":
        """Create an HMAC key. Text secrets are UTF-8 encoded."""
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        return cls(KeyKind.SYMMETRIC, secret, key_id)

    @classmethod
    def rsa(cls, key: Any, key_id: Optional[str] = None) -> "SecurityKey":
        """Create an RSA key from a key object or PEM text."""
        if isinstance(key, (bytes, str)):
            return cls._from_pem_as(key, KeyKind.RSA, key_id)
        return cls(KeyKind.RSA, key, key_id)

    @classmethod
    def ecdsa(cls, key: Any, key_id: Optional[str] = None) -> "SecurityKey":
        """Create an ECDSA key from a key object or PEM text."""
        if isinstance(key, (bytes, str)):
            return cls._from_pem_as(key, KeyKind.ECDSA, key_id)
        return cls(KeyKind.ECDSA, key, key_id)

    @classmethod
    def from_pem(
        cls,
        pem: Union[bytes, str],
        password: Optional[bytes] = None,
        key_id: Optional[str] = None,
    ) -> "SecurityKey":
        """Load a PEM private or public key and tag it by its type.

        Args:
            pem: PEM encoded key
            password: Password for an encrypted private key
            key_id: Optional key identifier

        Returns:
            RSA or ECDSA security key

        Raises:
            InvalidKeyError: If the PEM cannot be loaded or is neither RSA nor EC
        """
        data = pem.encode("ascii") if isinstance(pem, str) else pem
        try:
            if b"PRIVATE KEY" in data:
                key = serialization.load_pem_private_key(data, password=password)
            else:
                key = serialization.load_pem_public_key(data)
        except (ValueError, TypeError) as e:
            raise InvalidKeyError(f"Cannot load PEM key: {e}") from e

        if isinstance(key, _RSA_TYPES):
            return cls(KeyKind.RSA, key, key_id)
        if isinstance(key, _EC_TYPES):
            return cls(KeyKind.ECDSA, key, key_id)
        raise InvalidKeyError(f"Unsupported PEM key type: {type(key).__name__}")

    @classmethod
    def coerce(cls, key: Any, key_id: Optional[str] = None) -> "SecurityKey":
        """Turn bytes, PEM text or a ``cryptography`` key into a SecurityKey.

        Plain text that is not PEM is treated as an HMAC secret.
        """
        if isinstance(key, SecurityKey):
            return key
        if isinstance(key, _RSA_TYPES):
            return cls(KeyKind.RSA, key, key_id)
        if isinstance(key, _EC_TYPES):
            return cls(KeyKind.ECDSA, key, key_id)
        if isinstance(key, str):
            if key.lstrip().startswith(_PEM_MARKER):
                return cls.from_pem(key, key_id=key_id)
            return cls.symmetric(key, key_id)
        if isinstance(key, (bytes, bytearray)):
            if bytes(key).lstrip().startswith(_PEM_MARKER.encode("ascii")):
                return cls.from_pem(bytes(key), key_id=key_id)
            return cls.symmetric(bytes(key), key_id)
        raise InvalidKeyError(f"Unsupported key type: {type(key).__name__}")

    @classmethod
    def _from_pem_as(cls, pem: Union[bytes, str], kind: KeyKind, key_id: Optional[str]) -> "SecurityKey":
        key = cls.from_pem(pem, key_id=key_id)
        if key.kind != kind:
            raise InvalidKeyError(
                f"PEM key is {key.kind.value}, expected {kind.value}.",
                key_kind=key.kind.value,
            )
        return key

    @property
    def is_private(self) -> bool:
        return isinstance(self.material, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey))

    def public_key(self) -> Any:
        """Verification half of an asymmetric key (symmetric keys return bytes)."""
        if self.is_private:
            return self.material.public_key()
        return self.material

    def with_key_id(self, key_id: Optional[str]) -> "SecurityKey":
        return SecurityKey(self.kind, self.material, key_id)

    def __repr__(self) -> str:
        # Never expose secret material
        return f"SecurityKey(kind={self.kind.value!r}, key_id={self.key_id!r})"
