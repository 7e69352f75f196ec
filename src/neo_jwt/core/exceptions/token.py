"""Structural and claim-access exceptions.

Raised when a token is not well-formed compact JWS syntax, or when a
caller asks a token for a claim it does not carry.
"""

from typing import Any, Optional

from .base import NeoJwtError


class FormatError(NeoJwtError):
    """Raised when a token is not a well-formed three-segment JWT."""
    pass


class DecodeError(FormatError):
    """Raised when base64url text cannot be decoded."""
    pass


class ClaimNotFoundError(NeoJwtError, LookupError):
    """Raised when a requested header or payload claim is absent."""

    def __init__(self, claim_name: str, location: str = "payload"):
        super().__init__(
            f"Claim '{claim_name}' not found in JWT {location}.",
            details={"claim": claim_name, "location": location},
        )
        self.claim_name = claim_name
        self.location = location


class ClaimTypeMismatchError(NeoJwtError, TypeError):
    """Raised when a claim cannot be converted to the requested type."""

    def __init__(self, claim_name: str, expected_type: Any, actual_value: Optional[Any] = None):
        type_name = getattr(expected_type, "__name__", str(expected_type))
        super().__init__(
            f"Cannot convert claim '{claim_name}' value to type {type_name}.",
            details={
                "claim": claim_name,
                "expected_type": type_name,
                "actual_type": type(actual_value).__name__,
            },
        )
        self.claim_name = claim_name
        self.expected_type = expected_type


class InvalidArgumentError(NeoJwtError, ValueError):
    """Raised on programming-contract violations (empty names, tokens, ids)."""
    pass


class SerializationError(NeoJwtError):
    """Raised when claims cannot be serialized to or from JSON."""
    pass
