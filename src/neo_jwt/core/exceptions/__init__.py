"""Exceptions for neo-jwt.

Structural failures (FormatError, DecodeError) and caller misuse
(InvalidArgumentError, InvalidKeyError, UnsupportedAlgorithmError) are
raised. Validation failures are never raised; they are returned as
ValidationResult data.
"""

from .base import NeoJwtError, create_error_response
from .token import (
    FormatError,
    DecodeError,
    ClaimNotFoundError,
    ClaimTypeMismatchError,
    InvalidArgumentError,
    SerializationError,
)
from .key import InvalidKeyError, UnsupportedAlgorithmError

__all__ = [
    "NeoJwtError",
    "create_error_response",
    "FormatError",
    "DecodeError",
    "ClaimNotFoundError",
    "ClaimTypeMismatchError",
    "InvalidArgumentError",
    "SerializationError",
    "InvalidKeyError",
    "UnsupportedAlgorithmError",
]
