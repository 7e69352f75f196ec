"""Revocation registry and token repository implementations."""

from .jwt_revoker import DEFAULT_REVOCATION_REASON, JwtRevoker
from .memory_token_repository import MemoryTokenRepository
from .repository_revoker import (
    REVOCATION_REASON_KEY,
    REVOKED_TOKEN_TYPE,
    TokenRepositoryRevoker,
)

__all__ = [
    "DEFAULT_REVOCATION_REASON",
    "JwtRevoker",
    "MemoryTokenRepository",
    "REVOCATION_REASON_KEY",
    "REVOKED_TOKEN_TYPE",
    "TokenRepositoryRevoker",
]
