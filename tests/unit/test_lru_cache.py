"""Unit tests for LRUCache: ordering, TTL, patterns, stats and the sweeper."""

import asyncio
import random

import pytest

from src.ft_cache.domain.lru_cache import LRUCache, glob_to_regex


def _cache(clock, max_size: int = 10, ttl: float = 60) -> LRUCache[str]:
    return LRUCache(max_size=max_size, default_ttl=ttl, clock=clock)


class TestLRUOrdering:
    def test_evicts_least_recently_touched(self, clock) -> None:
        cache = _cache(clock, max_size=2)
        cache.set("a", "1")
        cache.set("b", "2")
        assert cache.get("a") == "1"
        cache.set("c", "3")

        assert cache.has("a")
        assert not cache.has("b")
        assert cache.has("c")

    def test_size_never_exceeds_max(self, clock) -> None:
        cache = _cache(clock, max_size=3)
        for i in range(10):
            cache.set(f"k{i}", str(i))
            assert cache.size() == min(i + 1, 3)
        assert cache.get_stats().evictions == 7

    def test_oldest_inserted_goes_first_without_reads(self, clock) -> None:
        cache = _cache(clock, max_size=2)
        cache.set("a", "1")
        cache.set("b", "2")
        cache.set("c", "3")
        assert cache.get("a") is None
        assert cache.get("b") == "2"

    def test_overwrite_refreshes_position_without_eviction(self, clock) -> None:
        cache = _cache(clock, max_size=2)
        cache.set("a", "1")
        cache.set("b", "2")
        cache.set("a", "1b")
        cache.set("c", "3")

        assert cache.get("a") == "1b"
        assert cache.get("b") is None
        assert cache.get_stats().evictions == 1

    def test_max_size_one(self, clock) -> None:
        cache = _cache(clock, max_size=1)
        cache.set("a", "1")
        cache.set("b", "2")
        assert cache.size() == 1
        assert cache.get("b") == "2"
        assert cache.get("a") is None

    def test_max_size_zero_stores_nothing(self, clock) -> None:
        cache = _cache(clock, max_size=0)
        cache.set("a", "1")
        assert cache.size() == 0
        assert cache.get("a") is None


class TestTTL:
    def test_value_visible_before_ttl(self, clock) -> None:
        cache = _cache(clock, ttl=10)
        cache.set("k", "v")
        clock.advance(9.999)
        assert cache.get("k") == "v"

    def test_value_absent_at_ttl(self, clock) -> None:
        cache = _cache(clock, ttl=10)
        cache.set("k", "v")
        clock.advance(10)
        assert cache.get("k") is None
        assert cache.size() == 0

    def test_expiry_counts_miss_and_eviction(self, clock) -> None:
        cache = _cache(clock, ttl=10)
        cache.set("k", "v")
        clock.advance(11)
        cache.get("k")
        stats = cache.get_stats()
        assert stats.misses == 1
        assert stats.evictions == 1

    def test_per_entry_ttl_overrides_default(self, clock) -> None:
        cache = _cache(clock, ttl=100)
        cache.set("short", "v", ttl=5)
        cache.set("long", "v")
        clock.advance(5)
        assert cache.get("short") is None
        assert cache.get("long") == "v"

    def test_zero_ttl_is_already_expired(self, clock) -> None:
        cache = _cache(clock)
        cache.set("k", "v", ttl=0)
        assert cache.get("k") is None

    def test_has_respects_expiry_without_stats(self, clock) -> None:
        cache = _cache(clock, ttl=10)
        cache.set("k", "v")
        assert cache.has("k") is True
        clock.advance(10)
        assert cache.has("k") is False
        stats = cache.get_stats()
        assert stats.hits == 0
        assert stats.misses == 0
        assert cache.size() == 0

    def test_overwrite_resets_ttl(self, clock) -> None:
        cache = _cache(clock, ttl=10)
        cache.set("k", "v1")
        clock.advance(8)
        cache.set("k", "v2")
        clock.advance(8)
        assert cache.get("k") == "v2"


class TestDeletePattern:
    def test_removes_only_matching_user(self, clock) -> None:
        cache = _cache(clock, max_size=100)
        rng = random.Random(7)
        for _ in range(5):
            cache.clear()
            keys = {
                f"user:{rng.choice(['42', '420', '4', '7'])}:{rng.choice(['categories', 'report'])}:{i}"
                for i in range(30)
            }
            for key in keys:
                cache.set(key, "x")
            expected = {k for k in keys if k.startswith("user:42:")}

            removed = cache.delete_pattern("user:42:*")

            assert removed == len(expected)
            remaining = {k for k in keys if cache.has(k)}
            assert remaining == keys - expected

    def test_regex_metacharacters_are_literal(self, clock) -> None:
        cache = _cache(clock)
        cache.set("user:a.b:x", "1")
        cache.set("user:aXb:x", "2")
        cache.set("user:(a):x", "3")

        assert cache.delete_pattern("user:a.b:*") == 1
        assert cache.has("user:aXb:x")
        assert cache.delete_pattern("user:(a):*") == 1

    def test_pattern_without_wildcard_is_exact(self, clock) -> None:
        cache = _cache(clock)
        cache.set("user:1:categories", "x")
        cache.set("user:1:categories:expense", "y")
        assert cache.delete_pattern("user:1:categories") == 1
        assert cache.has("user:1:categories:expense")

    def test_malformed_pattern_never_raises(self, clock) -> None:
        cache = _cache(clock)
        cache.set("user:[1:x", "v")
        assert cache.delete_pattern("user:[1:*") == 1

    def test_glob_to_regex_anchors_whole_key(self) -> None:
        regex = glob_to_regex("user:1:*")
        assert regex.fullmatch("user:1:categories")
        assert not regex.fullmatch("xuser:1:categories")
        assert not regex.fullmatch("user:10:categories")


class TestStats:
    def test_fresh_cache_hit_rate_zero(self, clock) -> None:
        assert _cache(clock).get_stats().hit_rate == 0

    def test_hit_rate_is_percentage(self, clock) -> None:
        cache = _cache(clock)
        cache.set("k", "v")
        cache.get("k")
        cache.get("k")
        cache.get("k")
        cache.get("missing")
        stats = cache.get_stats()
        assert stats.hits == 3
        assert stats.misses == 1
        assert stats.hit_rate == 75
        assert stats.size == 1

    def test_clear_keeps_counters(self, clock) -> None:
        cache = _cache(clock)
        cache.set("k", "v")
        cache.get("k")
        cache.clear()
        stats = cache.get_stats()
        assert stats.size == 0
        assert stats.hits == 1

    def test_delete_returns_presence(self, clock) -> None:
        cache = _cache(clock)
        cache.set("k", "v")
        assert cache.delete("k") is True
        assert cache.delete("k") is False

    def test_hit_count_tracked_per_entry(self, clock) -> None:
        cache = _cache(clock)
        cache.set("k", "v")
        cache.get("k")
        cache.get("k")
        assert cache._entries["k"].hit_count == 2


class TestGetOrSet:
    async def test_producer_called_once_while_warm(self, clock) -> None:
        cache = _cache(clock)
        calls = 0

        async def produce() -> str:
            nonlocal calls
            calls += 1
            return "value"

        assert await cache.get_or_set("k", produce) == "value"
        assert await cache.get_or_set("k", produce) == "value"
        assert calls == 1

    async def test_producer_error_propagates_and_caches_nothing(self, clock) -> None:
        cache = _cache(clock)

        async def fail() -> str:
            raise RuntimeError("store down")

        with pytest.raises(RuntimeError):
            await cache.get_or_set("k", fail)
        assert not cache.has("k")

    async def test_custom_ttl(self, clock) -> None:
        cache = _cache(clock, ttl=100)

        async def produce() -> str:
            return "v"

        await cache.get_or_set("k", produce, ttl=1)
        clock.advance(1)
        assert cache.get("k") is None


class TestSweeper:
    def test_sweep_removes_only_expired(self, clock) -> None:
        cache = _cache(clock, ttl=10)
        cache.set("old", "v")
        clock.advance(5)
        cache.set("new", "v")
        clock.advance(5)

        assert cache.sweep_expired() == 1
        assert cache.has("new")
        assert cache.size() == 1

    async def test_background_sweep_runs_and_stops(self, clock) -> None:
        cache = _cache(clock, ttl=10)
        cache.set("k", "v")
        clock.advance(10)

        cache.start_sweeper(interval=0.01)
        assert cache.sweeping
        await asyncio.sleep(0.05)
        await cache.stop_sweeper()

        assert not cache.sweeping
        assert cache.size() == 0

    async def test_stop_without_start_is_noop(self, clock) -> None:
        cache = _cache(clock)
        await cache.stop_sweeper()
        assert not cache.sweeping

    async def test_restart_replaces_previous_task(self, clock) -> None:
        cache = _cache(clock)
        first = cache.start_sweeper(interval=10)
        second = cache.start_sweeper(interval=10)
        await asyncio.sleep(0.01)
        assert first.cancelled()
        assert second is not first
        await cache.stop_sweeper()
