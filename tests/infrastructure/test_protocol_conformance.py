"""Implementations satisfy the collaborator protocols."""

from neo_jwt.application import JwtRefresher
from neo_jwt.core.protocols import (
    ClaimSerializer,
    TokenCache,
    TokenRefresher,
    TokenRepository,
    TokenRevoker,
    TokenStore,
)
from neo_jwt.infrastructure.cache import MemoryTokenCache, MemoryTokenStore
from neo_jwt.infrastructure.repositories import JwtRevoker, MemoryTokenRepository, TokenRepositoryRevoker
from neo_jwt.infrastructure.serializers import JsonClaimSerializer


class TestProtocolConformance:
    """Test cases for runtime protocol checks."""

    def test_caches_and_stores(self):
        """Test the in-memory cache and store."""
        assert isinstance(MemoryTokenCache(evict_in_background=False), TokenCache)
        assert isinstance(MemoryTokenStore(), TokenStore)

    def test_revokers(self):
        """Test both revokers satisfy TokenRevoker."""
        assert isinstance(JwtRevoker(), TokenRevoker)
        assert isinstance(TokenRepositoryRevoker(MemoryTokenRepository()), TokenRevoker)

    def test_repository(self):
        """Test the in-memory repository."""
        assert isinstance(MemoryTokenRepository(), TokenRepository)

    def test_refresher_and_serializer(self, hmac_key):
        """Test the refresher and the JSON serializer."""
        assert isinstance(JwtRefresher(hmac_key), TokenRefresher)
        assert isinstance(JsonClaimSerializer(), ClaimSerializer)
