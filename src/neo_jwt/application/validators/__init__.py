"""Token validation: parameters, results and the validation pipeline."""

from .context import ValidationContext
from .jwt_validator import JwtValidator
from .parameters import ValidationParameters, key_fingerprint
from .result import ValidationError, ValidationResult

__all__ = [
    "JwtValidator",
    "ValidationContext",
    "ValidationError",
    "ValidationParameters",
    "ValidationResult",
    "key_fingerprint",
]
