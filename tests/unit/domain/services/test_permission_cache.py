"""Unit tests for PermissionCache service."""

import time

from aclcore.domain.services import PermissionCache


class TestPermissionCache:
    """Test suite for PermissionCache."""

    def test_cache_initialization(self):
        """Test cache initializes with correct TTL."""
        cache = PermissionCache(ttl_seconds=300)
        assert cache.ttl_seconds == 300
        assert cache.size() == 0

    def test_cache_set_and_get(self):
        """Test storing and retrieving from cache."""
        cache = PermissionCache(ttl_seconds=300)

        cache.set(7, {"listVMs", "startVM"})

        assert cache.get(7) == frozenset({"listVMs", "startVM"})

    def test_cached_value_is_immutable_copy(self):
        """Mutating the stored set does not change the cache."""
        cache = PermissionCache(ttl_seconds=300)
        api_names = {"listVMs"}

        cache.set(7, api_names)
        api_names.add("destroyVM")

        assert cache.get(7) == frozenset({"listVMs"})

    def test_cache_miss(self):
        """Test cache returns None for non-existent keys."""
        cache = PermissionCache(ttl_seconds=300)

        assert cache.get(7) is None

    def test_empty_set_is_a_hit(self):
        cache = PermissionCache(ttl_seconds=300)

        cache.set(7, set())

        assert cache.get(7) == frozenset()

    def test_cache_expiration(self):
        """Test cache entries expire after TTL."""
        cache = PermissionCache(ttl_seconds=1)

        cache.set(7, {"listVMs"})
        assert cache.get(7) is not None

        time.sleep(1.1)

        assert cache.get(7) is None
        assert cache.size() == 0

    def test_invalidate_account(self):
        """Test invalidating a single account."""
        cache = PermissionCache(ttl_seconds=300)
        cache.set(7, {"listVMs"})
        cache.set(8, {"listVMs"})

        cache.invalidate_account(7)
        cache.invalidate_account(999)

        assert cache.get(7) is None
        assert cache.get(8) is not None
        assert cache.size() == 1

    def test_invalidate_all(self):
        """Test clearing entire cache."""
        cache = PermissionCache(ttl_seconds=300)
        cache.set(7, {"listVMs"})
        cache.set(8, {"startVM"})

        cache.invalidate_all()

        assert cache.size() == 0

    def test_cleanup_expired(self):
        """Test removing expired entries."""
        cache = PermissionCache(ttl_seconds=1)
        cache.set(7, {"listVMs"})
        cache.set(8, {"startVM"})

        time.sleep(1.1)
        cache.ttl_seconds = 300
        cache.set(9, {"stopVM"})

        assert cache.cleanup_expired() == 2
        assert cache.size() == 1
        assert cache.get(9) is not None

    def test_write_from_before_invalidation_is_dropped(self):
        """A value computed before an invalidation is not stored."""
        cache = PermissionCache(ttl_seconds=300)
        generation = cache.generation

        cache.invalidate_all()

        assert cache.set(7, {"listVMs"}, generation) is False
        assert cache.get(7) is None
        assert cache.set(7, {"listVMs"}, cache.generation) is True
        assert cache.get(7) == frozenset({"listVMs"})

    def test_invalidate_account_advances_generation(self):
        cache = PermissionCache(ttl_seconds=300)
        generation = cache.generation

        cache.invalidate_account(8)

        assert cache.generation == generation + 1
        assert cache.set(7, {"listVMs"}, generation) is False
