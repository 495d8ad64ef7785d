"""
Tests for the lock-guarded cache wrappers.
"""

import asyncio
import threading

import pytest

from recencycache import (
    MISSING,
    AsyncRecencyCache,
    BaseCacheStore,
    CacheStoreError,
    InvalidConfiguration,
    ThreadSafeRecencyCache,
)


class TestThreadSafeRecencyCache:
    """ThreadSafeRecencyCache behaves like the plain cache and stays consistent under threads."""

    def test_is_a_cache_store(self):
        assert isinstance(ThreadSafeRecencyCache(2), BaseCacheStore)

    def test_rejects_invalid_capacity(self):
        with pytest.raises(InvalidConfiguration):
            ThreadSafeRecencyCache(0)

    def test_basic_lru_behaviour(self):
        cache = ThreadSafeRecencyCache(capacity=2, name="shared")
        cache.put(1, "A")
        cache.put(2, "B")
        assert cache.get(1) == "A"
        cache.put(3, "C")

        assert cache.get(2, MISSING) is MISSING
        assert list(cache) == [3, 1]
        assert cache.items() == [(3, "C"), (1, "A")]
        assert cache.most_recent() == 3
        assert cache.least_recent() == 1
        assert cache.capacity == 2
        assert cache.name == "shared"
        assert len(cache) == 2

    def test_remove_clear_and_stats(self):
        cache = ThreadSafeRecencyCache(capacity=3)
        cache.put("a", 1)
        cache.put("b", 2)
        assert cache.peek("a") == 1
        assert cache.remove("a") is True
        assert "a" not in cache

        stats = cache.get_stats()
        assert stats["thread_safe"] is True
        assert stats["current_size"] == 1

        cache.clear()
        assert cache.size() == 0

    def test_concurrent_writers_keep_capacity_bound(self):
        cache = ThreadSafeRecencyCache(capacity=50)
        errors = []

        def writer(worker_id: int):
            try:
                for i in range(2000):
                    key = (worker_id, i % 120)
                    cache.put(key, i)
                    cache.get((worker_id, (i * 7) % 120))
                    assert cache.size() <= 50
            except Exception as e:  # surfaced through the errors list
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert cache.size() == 50
        cache.check_invariants()

        metrics = cache.get_metrics()
        assert metrics.hits + metrics.misses == 8 * 2000

    def test_eviction_listener_runs_under_lock(self):
        cache = None
        seen_sizes = []

        def listener(key, value):
            # RLock lets the listener call back into the cache
            seen_sizes.append(cache.size())

        cache = ThreadSafeRecencyCache(capacity=1, on_evict=listener)
        cache.put("a", 1)
        cache.put("b", 2)
        assert seen_sizes == [1]

    def test_miss_leaves_order_and_size_unchanged(self):
        cache = ThreadSafeRecencyCache(capacity=3)
        for key in ("a", "b", "c"):
            cache.put(key, key.upper())
        before = cache.keys()

        assert cache.get("zzz", MISSING) is MISSING
        assert cache.keys() == before == ["c", "b", "a"]
        assert cache.size() == 3
        assert cache.least_recent() == "a"

    def test_metric_labels_follow_wrapped_cache(self):
        cache = ThreadSafeRecencyCache(capacity=1, name="wrapped")
        assert cache.metric_labels["cache"] == "wrapped"
        assert cache.metric_labels["instance"] == str(cache._cache.instance_id)


class TestAsyncRecencyCache:
    """AsyncRecencyCache serves coroutine callers."""

    @pytest.mark.asyncio
    async def test_basic_lru_behaviour(self):
        cache = AsyncRecencyCache(capacity=2)
        await cache.put(1, "A")
        await cache.put(2, "B")
        assert await cache.get(1) == "A"
        await cache.put(3, "C")

        assert await cache.get(2) is None
        assert await cache.keys() == [3, 1]
        assert await cache.items() == [(3, "C"), (1, "A")]
        assert await cache.peek(1) == "A"
        assert await cache.size() == 2
        assert cache.capacity == 2

    @pytest.mark.asyncio
    async def test_remove_and_clear(self):
        cache = AsyncRecencyCache(capacity=2)
        await cache.put("a", 1)
        assert await cache.remove("a") is True
        assert await cache.remove("a") is False
        await cache.put("b", 2)
        await cache.clear()
        assert await cache.size() == 0

    @pytest.mark.asyncio
    async def test_concurrent_tasks(self):
        cache = AsyncRecencyCache(capacity=10, name="tasks")

        async def worker(worker_id: int):
            for i in range(200):
                await cache.put((worker_id, i % 25), i)
                await cache.get((worker_id, (i * 3) % 25))
                await asyncio.sleep(0)

        await asyncio.gather(*(worker(n) for n in range(5)))

        assert await cache.size() == 10
        metrics = await cache.get_metrics()
        assert metrics.total_lookups == 5 * 200
        assert metrics.evictions > 0
        await cache.check_invariants()

    @pytest.mark.asyncio
    async def test_context_manager_clears_on_exit(self):
        async with AsyncRecencyCache(capacity=2) as cache:
            await cache.put("a", 1)
            assert await cache.size() == 1
        assert await cache.size() == 0

    @pytest.mark.asyncio
    async def test_miss_leaves_order_and_size_unchanged(self):
        cache = AsyncRecencyCache(capacity=3)
        for key in ("a", "b", "c"):
            await cache.put(key, key.upper())
        before = await cache.keys()

        assert await cache.get("zzz", MISSING) is MISSING
        assert await cache.keys() == before == ["c", "b", "a"]
        assert await cache.size() == 3
        assert (await cache.get_metrics()).misses == 1

    @pytest.mark.asyncio
    async def test_recency_queries_and_stats(self):
        cache = AsyncRecencyCache(capacity=2, name="tasks")
        assert await cache.most_recent() is None
        assert await cache.least_recent() is None

        await cache.put("a", 1)
        await cache.put("b", 2)
        await cache.get("a")
        assert await cache.most_recent() == "a"
        assert await cache.least_recent() == "b"

        stats = await cache.get_stats()
        assert stats["async_safe"] is True
        assert stats["name"] == "tasks"
        assert stats["hits"] == 1
        assert stats["most_recent"] == "a"
        assert cache.metric_labels["cache"] == "tasks"
        await cache.check_invariants()

    @pytest.mark.asyncio
    async def test_contains_does_not_promote(self):
        cache = AsyncRecencyCache(capacity=2)
        await cache.put("a", 1)
        await cache.put("b", 2)

        assert await cache.contains("a") is True
        assert await cache.contains("zzz") is False
        assert await cache.keys() == ["b", "a"]
        assert (await cache.get_metrics()).total_lookups == 0

    @pytest.mark.asyncio
    async def test_check_invariants_reports_corruption(self):
        cache = AsyncRecencyCache(capacity=2)
        await cache.put("a", 1)
        cache._cache._index.pop("a")
        with pytest.raises(CacheStoreError):
            await cache.check_invariants()

    def test_can_be_built_outside_event_loop(self):
        cache = AsyncRecencyCache(capacity=2)
        assert cache._lock is None

        async def use():
            await cache.put("a", 1)
            return await cache.get("a")

        assert asyncio.run(use()) == 1
        assert cache._lock is not None
