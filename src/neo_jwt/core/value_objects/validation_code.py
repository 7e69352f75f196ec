"""Validation failure codes."""

from enum import Enum


class ValidationCode(str, Enum):
    """Reason a token failed validation."""
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_NOT_YET_VALID = "token_not_yet_valid"
    INVALID_ISSUER = "invalid_issuer"
    INVALID_AUDIENCE = "invalid_audience"
    INVALID_SIGNATURE = "invalid_signature"
    MISSING_CLAIM = "missing_claim"
    INVALID_CLAIM_VALUE = "invalid_claim_value"
    JTI_MISSING = "jti_missing"
    JTI_ALREADY_USED = "jti_already_used"
    TOKEN_REVOKED = "token_revoked"
