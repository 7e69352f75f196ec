"""Signature engine for JWS algorithms.

Handles ONLY signing and verification of the ``header.payload`` signing
input. Key selection and token parsing happen elsewhere.
"""

import hashlib
import hmac
import logging
import threading
from typing import Any, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ...core.constants import (
    ALGORITHM_NONE,
    ECDSA_ALGORITHMS,
    HMAC_ALGORITHMS,
    RSA_ALGORITHMS,
)
from ...core.exceptions import InvalidKeyError, UnsupportedAlgorithmError
from ...core.value_objects import KeyKind, SecurityKey

logger = logging.getLogger(__name__)

_HASHLIB_DIGESTS = {
    "256": hashlib.sha256,
    "384": hashlib.sha384,
    "512": hashlib.sha512,
}

_CRYPTO_DIGESTS = {
    "256": hashes.SHA256,
    "384": hashes.SHA384,
    "512": hashes.SHA512,
}


def key_kind_for(algorithm: Optional[str]) -> Optional[KeyKind]:
    """Key kind an algorithm needs, or None for unknown algorithms."""
    if algorithm in HMAC_ALGORITHMS:
        return KeyKind.SYMMETRIC
    if algorithm in RSA_ALGORITHMS:
        return KeyKind.RSA
    if algorithm in ECDSA_ALGORITHMS:
        return KeyKind.ECDSA
    return None


def is_key_compatible(algorithm: Optional[str], key: Optional[SecurityKey]) -> bool:
    """Check that a key's kind matches the algorithm family."""
    kind = key_kind_for(algorithm)
    return key is not None and kind is not None and key.kind == kind


def _ec_component_size(key: Any) -> int:
    return (key.curve.key_size + 7) // 8


class SignatureEngine:
    """Signs and verifies JWS signing input.

    Supports HS256/384/512 (HMAC), RS256/384/512 (RSASSA-PKCS1-v1_5) and
    ES256/384/512 (ECDSA with raw ``r || s`` signatures). ``verify_calls``
    counts every verification attempt.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._verify_calls = 0

    @property
    def verify_calls(self) -> int:
        return self._verify_calls

    def reset_counters(self) -> None:
        with self._lock:
            self._verify_calls = 0

    def sign(self, signing_input: bytes, algorithm: str, key: Any) -> bytes:
        """Sign the signing input.

        Args:
            signing_input: ASCII bytes of ``b64(header).b64(payload)``
            algorithm: JWS algorithm name
            key: SecurityKey, or anything SecurityKey.coerce accepts

        Returns:
            Raw signature bytes

        Raises:
            InvalidKeyError: If the key is empty or unusable for the algorithm
            UnsupportedAlgorithmError: If the algorithm is unknown or ``none``
        """
        expected_kind = key_kind_for(algorithm)
        if expected_kind is None:
            raise UnsupportedAlgorithmError(algorithm)
        if key is None:
            raise InvalidKeyError("Signing key cannot be null.", algorithm=algorithm)

        security_key = SecurityKey.coerce(key)
        if security_key.kind != expected_kind:
            raise InvalidKeyError(
                f"Algorithm {algorithm} requires a {expected_kind.value} key, "
                f"got {security_key.kind.value}.",
                algorithm=algorithm,
                key_kind=security_key.kind.value,
            )

        bits = algorithm[2:]
        if expected_kind == KeyKind.SYMMETRIC:
            signature = hmac.new(security_key.material, signing_input, _HASHLIB_DIGESTS[bits]).digest()
        elif expected_kind == KeyKind.RSA:
            self._require_private(security_key, algorithm)
            signature = security_key.material.sign(
                signing_input, padding.PKCS1v15(), _CRYPTO_DIGESTS[bits]()
            )
        else:
            self._require_private(security_key, algorithm)
            der = security_key.material.sign(signing_input, ec.ECDSA(_CRYPTO_DIGESTS[bits]()))
            r, s = decode_dss_signature(der)
            size = _ec_component_size(security_key.material)
            signature = r.to_bytes(size, "big") + s.to_bytes(size, "big")

        logger.debug(f"Signed {len(signing_input)} bytes with {algorithm}")
        return signature

    def verify(self, signing_input: bytes, signature: bytes, algorithm: str, key: SecurityKey) -> bool:
        """Verify a signature.

        Returns False for a bad signature, an unknown algorithm, ``none``, or
        a key whose kind does not match the algorithm.
        """
        with self._lock:
            self._verify_calls += 1

        if algorithm == ALGORITHM_NONE or not is_key_compatible(algorithm, key):
            return False
        if not signature:
            return False

        bits = algorithm[2:]
        if key.kind == KeyKind.SYMMETRIC:
            expected = hmac.new(key.material, signing_input, _HASHLIB_DIGESTS[bits]).digest()
            return hmac.compare_digest(expected, signature)

        public_key = key.public_key()
        try:
            if key.kind == KeyKind.RSA:
                public_key.verify(signature, signing_input, padding.PKCS1v15(), _CRYPTO_DIGESTS[bits]())
            else:
                size = _ec_component_size(public_key)
                if len(signature) != 2 * size:
                    return False
                r = int.from_bytes(signature[:size], "big")
                s = int.from_bytes(signature[size:], "big")
                public_key.verify(
                    encode_dss_signature(r, s), signing_input, ec.ECDSA(_CRYPTO_DIGESTS[bits]())
                )
        except InvalidSignature:
            return False
        return True

    @staticmethod
    def _require_private(key: SecurityKey, algorithm: str) -> None:
        if not key.is_private:
            raise InvalidKeyError(
                f"Algorithm {algorithm} requires a private key for signing.",
                algorithm=algorithm,
                key_kind=key.kind.value,
            )
