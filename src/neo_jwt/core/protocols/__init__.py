"""Collaborator protocols.

Contracts the engine consumes or exposes. Implementations live in the
infrastructure and application layers, and callers may substitute
their own.
"""

from .claim_serializer import ClaimSerializer
from .claims_transformer import ClaimsTransformer
from .token_cache import TokenCache
from .token_refresher import TokenRefresher
from .token_repository import TokenRepository
from .token_revoker import TokenRevoker
from .token_store import TokenStore

__all__ = [
    "ClaimSerializer",
    "ClaimsTransformer",
    "TokenCache",
    "TokenRefresher",
    "TokenRepository",
    "TokenRevoker",
    "TokenStore",
]
