"""Token lifetime management: refresh tokens and access token rotation."""

from .refresh_result import RefreshResult
from .refresher import JwtRefresher, access_token_hash

__all__ = [
    "JwtRefresher",
    "RefreshResult",
    "access_token_hash",
]
