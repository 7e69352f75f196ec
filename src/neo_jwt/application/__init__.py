"""Application layer: building, parsing, signing, validating and refreshing tokens."""

from .builder import JwtBuilder
from .parser import JwtParser
from .signing import SignatureEngine
from .validators import (
    JwtValidator,
    ValidationContext,
    ValidationError,
    ValidationParameters,
    ValidationResult,
)
from .lifetime import JwtRefresher, RefreshResult

__all__ = [
    "JwtBuilder",
    "JwtParser",
    "SignatureEngine",
    "JwtValidator",
    "ValidationContext",
    "ValidationError",
    "ValidationParameters",
    "ValidationResult",
    "JwtRefresher",
    "RefreshResult",
]
