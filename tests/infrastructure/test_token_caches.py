"""Tests for the token cache, token store and serialized token storage."""

import pytest
from datetime import timedelta

from neo_jwt.application.validators import ValidationResult
from neo_jwt.config.settings import JwtSettings
from neo_jwt.core.entities import JwtToken
from neo_jwt.core.exceptions import InvalidArgumentError
from neo_jwt.infrastructure.cache import MemoryTokenCache, MemoryTokenStore, SerializedTokenStorage


class TestMemoryTokenCache:
    """Test cases for MemoryTokenCache."""

    @pytest.fixture
    def cache(self, clock):
        return MemoryTokenCache(max_size=2, evict_in_background=False, clock=clock)

    def test_parsed_tokens(self, cache, parser, signed_token):
        """Test parsed tokens round-trip by raw form."""
        token = parser.parse(signed_token)
        cache.set_parsed_token(signed_token, token)
        assert cache.get_parsed_token(signed_token) is token
        cache.remove_parsed_token(signed_token)
        assert cache.get_parsed_token(signed_token) is None

    def test_validation_results_expire(self, cache, clock):
        """Test validation results honour their TTL."""
        cache.set_validation_result("key", ValidationResult.success(), timedelta(seconds=5))
        assert cache.get_validation_result("key") is not None
        clock.advance(timedelta(seconds=5))
        assert cache.get_validation_result("key") is None

    def test_stores_are_bounded_independently(self, cache):
        """Test each store keeps its own bound."""
        for i in range(3):
            cache.set_validation_result(f"r{i}", ValidationResult.success())
        cache.set_parsed_token("raw", JwtToken({}, {}))

        stats = cache.get_stats()
        assert stats["validation_results"]["size"] == 2
        assert stats["validation_results"]["evictions"] == 1
        assert stats["parsed_tokens"]["size"] == 1

    def test_default_ttl(self, clock):
        """Test default_ttl applies when a setter gets none."""
        cache = MemoryTokenCache(evict_in_background=False, default_ttl=timedelta(seconds=10), clock=clock)
        cache.set_validation_result("key", ValidationResult.success())
        clock.advance(timedelta(seconds=10))
        assert cache.get_validation_result("key") is None

    def test_clear(self, cache):
        """Test clear empties both stores."""
        cache.set_parsed_token("raw", JwtToken({}, {}))
        cache.set_validation_result("key", ValidationResult.success())
        cache.clear()
        assert len(cache.parsed_tokens) == 0
        assert len(cache.validation_results) == 0

    def test_from_settings(self):
        """Test sizing comes from settings."""
        settings = JwtSettings(cache_max_size=7, cache_duration_seconds=30, cache_evict_in_background=False)
        cache = MemoryTokenCache.from_settings(settings)
        assert cache.parsed_tokens.max_size == 7
        assert cache.default_ttl == timedelta(seconds=30)
        assert not cache.validation_results.evict_in_background

    @pytest.mark.asyncio
    async def test_async_variants(self, cache):
        """Test coroutine accessors."""
        token = JwtToken({"alg": "none"}, {"sub": "x"})
        await cache.set_parsed_token_async("raw", token)
        assert await cache.get_parsed_token_async("raw") is token
        await cache.set_validation_result_async("key", ValidationResult.success())
        assert await cache.get_validation_result_async("key") is not None
        await cache.clear_async()
        assert await cache.get_parsed_token_async("raw") is None


class TestMemoryTokenStore:
    """Test cases for MemoryTokenStore."""

    def test_set_get_remove(self, clock):
        """Test basic storage."""
        store = MemoryTokenStore(clock=clock)
        store.set("k", {"v": 1})
        assert store.get("k") == {"v": 1}
        store.remove("k")
        assert store.get("k") is None

    def test_empty_key_rejected(self, clock):
        """Test empty keys raise."""
        with pytest.raises(InvalidArgumentError):
            MemoryTokenStore(clock=clock).set("", "v")

    def test_ttl_and_cleanup(self, clock):
        """Test expired entries read as absent and are swept."""
        store = MemoryTokenStore(clock=clock)
        store.set("short", "v", timedelta(seconds=1))
        store.set("other", "v", timedelta(seconds=1))
        store.set("forever", "v")
        clock.advance(timedelta(seconds=1))

        assert store.get("short") is None
        assert store.cleanup_expired() == 1
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_async_variants(self, clock):
        """Test coroutine accessors."""
        store = MemoryTokenStore(clock=clock)
        await store.set_async("k", "v")
        assert await store.get_async("k") == "v"
        await store.remove_async("k")
        assert await store.get_async("k") is None
        await store.set_async("k", "v")
        await store.clear_async()
        assert len(store) == 0


class TestSerializedTokenStorage:
    """Test cases for SerializedTokenStorage."""

    @pytest.fixture
    def store(self, clock):
        return MemoryTokenStore(clock=clock)

    def test_round_trip(self, store, parser, signed_token):
        """Test a stored token reads back equal, raw form included."""
        storage = SerializedTokenStorage(store)
        token = parser.parse(signed_token)
        storage.set_token("session-1", token)

        loaded = storage.get_token("session-1")
        assert loaded == token
        assert loaded.raw == signed_token
        assert store.get("token:session-1") is not None

    def test_stale_token_round_trip(self, store, parser, signed_token):
        """Test a modified token stays stale after storage."""
        storage = SerializedTokenStorage(store)
        storage.set_token("k", parser.parse(signed_token).with_claim("role", "x"))
        loaded = storage.get_token("k")
        assert loaded.is_stale
        assert loaded.get_claim("role") == "x"

    def test_unreadable_document_is_discarded(self, store):
        """Test corrupt entries are removed and read as missing."""
        storage = SerializedTokenStorage(store)
        store.set("token:bad", "{not json")
        assert storage.get_token("bad") is None
        assert store.get("token:bad") is None

    def test_ttl(self, store, clock, parser, signed_token):
        """Test the TTL reaches the underlying store."""
        storage = SerializedTokenStorage(store)
        storage.set_token("k", parser.parse(signed_token), timedelta(seconds=5))
        clock.advance(timedelta(seconds=5))
        assert storage.get_token("k") is None

    def test_argument_checks(self, store):
        """Test empty keys, missing tokens and missing stores raise."""
        storage = SerializedTokenStorage(store)
        with pytest.raises(InvalidArgumentError):
            storage.set_token("", JwtToken({}, {}))
        with pytest.raises(InvalidArgumentError):
            storage.set_token("k", None)
        with pytest.raises(InvalidArgumentError):
            SerializedTokenStorage(None)

    @pytest.mark.asyncio
    async def test_async_round_trip(self, store, parser, signed_token):
        """Test coroutine accessors."""
        storage = SerializedTokenStorage(store)
        token = parser.parse(signed_token)
        await storage.set_token_async("k", token)
        assert await storage.get_token_async("k") == token
        await storage.remove_token_async("k")
        assert await storage.get_token_async("k") is None
