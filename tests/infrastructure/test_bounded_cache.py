"""Tests for the bounded cache."""

import threading
import pytest
from datetime import timedelta

from neo_jwt.infrastructure.cache import BoundedCache


class TestBoundedCacheEviction:
    """Test cases for size bounding."""

    def test_max_size_must_be_positive(self):
        """Test a non-positive bound is rejected."""
        with pytest.raises(ValueError):
            BoundedCache(max_size=0)

    def test_synchronous_eviction_is_fifo(self, clock):
        """Test overflow drops the oldest inserts first."""
        cache = BoundedCache(max_size=3, evict_in_background=False, clock=clock)
        for i in range(4):
            cache.put(f"k{i}", i)

        assert len(cache) == 3
        assert "k0" not in cache
        assert cache.get("k3") == 3
        assert cache.get_stats()["evictions"] == 1

    def test_re_put_moves_key_to_back(self, clock):
        """Test replacing a key refreshes its insertion order."""
        cache = BoundedCache(max_size=2, evict_in_background=False, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 3)
        cache.put("c", 4)

        assert cache.get("a") == 3
        assert cache.get("b") is None

    def test_background_eviction(self, clock):
        """Test the worker trims back to max_size and keeps the newest entry."""
        cache = BoundedCache(max_size=5, evict_in_background=True, clock=clock)
        for i in range(6):
            cache.put(f"k{i}", i)

        assert cache.wait_for_eviction(timeout=5)
        assert len(cache) == 5
        assert cache.get("k5") == 5

    def test_evict_synchronously(self, clock):
        """Test explicit eviction on the calling thread."""
        cache = BoundedCache(max_size=2, evict_in_background=True, clock=clock)
        for i in range(10):
            cache.put(f"k{i}", i)
        cache.wait_for_eviction(timeout=5)
        cache.evict_synchronously()
        assert len(cache) == 2
        assert cache.get("k9") == 9

    def test_concurrent_puts_stay_bounded(self, clock):
        """Test many writers end within the bound once eviction settles."""
        cache = BoundedCache(max_size=50, evict_in_background=True, clock=clock)

        def writer(prefix):
            for i in range(100):
                cache.put(f"{prefix}-{i}", i)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert cache.wait_for_eviction(timeout=5)
        cache.evict_synchronously()
        assert len(cache) == 50


class TestBoundedCacheExpiry:
    """Test cases for TTL handling."""

    def test_entry_expires(self, clock):
        """Test an entry reads as absent once its TTL has passed."""
        cache = BoundedCache(max_size=10, evict_in_background=False, clock=clock)
        cache.put("k", "v", ttl=timedelta(seconds=30))

        clock.advance(timedelta(seconds=29))
        assert cache.get("k") == "v"
        clock.advance(timedelta(seconds=1))
        assert cache.try_get("k") == (False, None)
        assert cache.get_stats()["expirations"] == 1

    def test_no_ttl_never_expires(self, clock):
        """Test entries without TTL stay until evicted."""
        cache = BoundedCache(max_size=10, evict_in_background=False, clock=clock)
        cache.put("k", "v")
        clock.advance(timedelta(days=365))
        assert cache.get("k") == "v"

    def test_cleanup_expired(self, clock):
        """Test the sweep removes only expired entries."""
        cache = BoundedCache(max_size=10, evict_in_background=False, clock=clock)
        cache.put("short", 1, ttl=timedelta(seconds=1))
        cache.put("long", 2, ttl=timedelta(hours=1))
        clock.advance(timedelta(seconds=2))

        assert cache.cleanup_expired() == 1
        assert len(cache) == 1


class TestBoundedCacheStats:
    """Test cases for statistics and invalidation."""

    def test_hits_and_misses(self, clock):
        """Test lookups are counted."""
        cache = BoundedCache(max_size=10, evict_in_background=False, name="demo", clock=clock)
        cache.put("k", "v")
        cache.get("k")
        cache.get("missing")

        stats = cache.get_stats()
        assert stats["name"] == "demo"
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
        assert stats["size"] == 1

    def test_invalidate(self, clock):
        """Test single and full invalidation."""
        cache = BoundedCache(max_size=10, evict_in_background=False, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)

        assert cache.invalidate("a")
        assert not cache.invalidate("a")
        cache.invalidate_all()
        assert len(cache) == 0
