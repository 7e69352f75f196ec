"""Token value objects.

Immutable value objects for the token domain: tagged claim values,
tagged security keys and validation failure codes.
"""

from .claim_value import ClaimKind, ClaimValue
from .security_key import KeyKind, SecurityKey
from .validation_code import ValidationCode

__all__ = [
    "ClaimKind",
    "ClaimValue",
    "KeyKind",
    "SecurityKey",
    "ValidationCode",
]
