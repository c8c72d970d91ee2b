"""Tests for the TTL cache."""

from __future__ import annotations

from processor.cache import CacheEntry, TTLCache


class TestTTLCache:
    def test_round_trip_before_expiry(self, clock):
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("top_users", [{"id": "1"}])
        clock.advance(59)
        assert cache.get("top_users") == [{"id": "1"}]

    def test_absent_after_expiry(self, clock):
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("top_users", [1])
        clock.advance(60)
        assert cache.get("top_users") is None
        assert "top_users" not in cache

    def test_missing_key(self, clock):
        cache = TTLCache(clock=clock)
        assert cache.get("nothing") is None
        assert cache.get_entry("nothing") is None

    def test_empty_list_is_a_hit(self, clock):
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("latest_posts", [])
        assert cache.get("latest_posts") == []
        assert "latest_posts" in cache

    def test_per_entry_ttl(self, clock):
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("short", "a", ttl=5)
        cache.set("long", "b", ttl=100)
        clock.advance(6)
        assert cache.get("short") is None
        assert cache.get("long") == "b"

    def test_non_positive_ttl_expires_immediately(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("k", "v", ttl=0)
        assert cache.get("k") is None

    def test_overwrite_resets_expiry(self, clock):
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("k", "old")
        clock.advance(8)
        entry = cache.set("k", "new")
        clock.advance(8)
        assert cache.get("k") == "new"
        assert isinstance(entry, CacheEntry)
        assert entry.expires_at == 1018

    def test_delete_and_flush(self, clock):
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.flush()
        assert len(cache) == 0

    def test_keys_skip_expired(self, clock):
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1, ttl=1)
        cache.set("b", 2)
        clock.advance(2)
        assert cache.keys() == ["b"]
