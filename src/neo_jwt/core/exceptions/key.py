"""Cryptographic input exceptions.

Raised by the builder and signature engine when the caller supplies key
material or an algorithm that cannot be used. These indicate caller
misuse, never data-driven validation failures.
"""

from typing import Optional

from .base import NeoJwtError


class InvalidKeyError(NeoJwtError, ValueError):
    """Raised when key material is empty or unusable for an algorithm."""

    def __init__(self, message: str, *, algorithm: Optional[str] = None, key_kind: Optional[str] = None):
        super().__init__(message, details={"algorithm": algorithm, "key_kind": key_kind})
        self.algorithm = algorithm
        self.key_kind = key_kind


class UnsupportedAlgorithmError(NeoJwtError, ValueError):
    """Raised when an algorithm name is not one the engine implements."""

    def __init__(self, algorithm: Optional[str]):
        super().__init__(f"Unsupported algorithm: {algorithm}", details={"algorithm": algorithm})
        self.algorithm = algorithm
