"""Token domain entities."""

from .jwt_token import JwtToken
from .token_info import RevocationRecord, TokenInfo

__all__ = [
    "JwtToken",
    "RevocationRecord",
    "TokenInfo",
]
