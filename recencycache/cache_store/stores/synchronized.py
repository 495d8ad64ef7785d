"""
Lock-guarded wrappers for sharing one cache between threads or tasks.

Both ``get`` and ``put`` relink the shared recency sequence, so every call
runs under a single lock covering the whole cache.
"""

import asyncio
import logging
import threading
from typing import Any, Hashable, List, Optional, Tuple

from recencycache.cache_store.base import BaseCacheStore
from recencycache.cache_store.stores.in_memory import (
    CacheMetrics,
    EvictionListener,
    FixedCapacityRecencyCache,
)
from recencycache.utils.metrics import MetricsRegistry

logger = logging.getLogger(__name__)


class ThreadSafeRecencyCache(BaseCacheStore):
    """
    :class:`FixedCapacityRecencyCache` guarded by a re-entrant lock.

    Takes the same arguments as the wrapped cache. Iteration helpers return
    snapshots taken under the lock.
    """

    def __init__(
        self,
        capacity: int,
        on_evict: Optional[EvictionListener] = None,
        name: str = "default",
        metrics_registry: Optional[MetricsRegistry] = None,
    ):
        self._cache = FixedCapacityRecencyCache(
            capacity,
            on_evict=on_evict,
            name=name,
            metrics_registry=metrics_registry,
        )
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._cache.capacity

    @property
    def name(self) -> str:
        return self._cache.name

    @property
    def metric_labels(self) -> dict:
        return self._cache.metric_labels

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._cache.get(key, default)

    def peek(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._cache.peek(key, default)

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._cache.put(key, value)

    def remove(self, key: Hashable) -> bool:
        with self._lock:
            return self._cache.remove(key)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        with self._lock:
            return self._cache.size()

    def keys(self) -> List[Hashable]:
        with self._lock:
            return self._cache.keys()

    def __iter__(self):
        return iter(self.keys())

    def items(self) -> List[Tuple[Hashable, Any]]:
        with self._lock:
            return self._cache.items()

    def most_recent(self) -> Optional[Hashable]:
        with self._lock:
            return self._cache.most_recent()

    def least_recent(self) -> Optional[Hashable]:
        with self._lock:
            return self._cache.least_recent()

    def get_metrics(self) -> CacheMetrics:
        with self._lock:
            return self._cache.get_metrics()

    def get_stats(self) -> dict:
        with self._lock:
            stats = self._cache.get_stats()
        stats['thread_safe'] = True
        return stats

    def check_invariants(self) -> None:
        with self._lock:
            self._cache.check_invariants()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cache!r})"


class AsyncRecencyCache:
    """
    Coroutine interface to a :class:`FixedCapacityRecencyCache`.

    Operations never await while holding the cache in an inconsistent
    state; the asyncio lock serialises callers sharing the instance across
    tasks on one event loop. The lock is created by the first operation, so
    the wrapper can be built before the loop is running.

    Used as an async context manager, the cache is cleared on exit.
    """

    def __init__(
        self,
        capacity: int,
        on_evict: Optional[EvictionListener] = None,
        name: str = "default",
        metrics_registry: Optional[MetricsRegistry] = None,
    ):
        self._cache = FixedCapacityRecencyCache(
            capacity,
            on_evict=on_evict,
            name=name,
            metrics_registry=metrics_registry,
        )
        self._lock: Optional[asyncio.Lock] = None

    def _get_lock(self) -> asyncio.Lock:
        # Called from a coroutine, so the lock belongs to the running loop.
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def capacity(self) -> int:
        return self._cache.capacity

    @property
    def name(self) -> str:
        return self._cache.name

    @property
    def metric_labels(self) -> dict:
        return self._cache.metric_labels

    async def get(self, key: Hashable, default: Any = None) -> Any:
        async with self._get_lock():
            return self._cache.get(key, default)

    async def peek(self, key: Hashable, default: Any = None) -> Any:
        async with self._get_lock():
            return self._cache.peek(key, default)

    async def contains(self, key: Hashable) -> bool:
        """Membership test that neither promotes the key nor counts a lookup."""
        async with self._get_lock():
            return key in self._cache

    async def put(self, key: Hashable, value: Any) -> None:
        async with self._get_lock():
            self._cache.put(key, value)

    async def remove(self, key: Hashable) -> bool:
        async with self._get_lock():
            return self._cache.remove(key)

    async def clear(self) -> None:
        async with self._get_lock():
            self._cache.clear()
        logger.debug("Cleared async cache %r", self._cache.name)

    async def size(self) -> int:
        async with self._get_lock():
            return self._cache.size()

    async def keys(self) -> List[Hashable]:
        async with self._get_lock():
            return self._cache.keys()

    async def items(self) -> List[Tuple[Hashable, Any]]:
        async with self._get_lock():
            return self._cache.items()

    async def most_recent(self) -> Optional[Hashable]:
        async with self._get_lock():
            return self._cache.most_recent()

    async def least_recent(self) -> Optional[Hashable]:
        async with self._get_lock():
            return self._cache.least_recent()

    async def get_metrics(self) -> CacheMetrics:
        async with self._get_lock():
            return self._cache.get_metrics()

    async def get_stats(self) -> dict:
        async with self._get_lock():
            stats = self._cache.get_stats()
        stats['async_safe'] = True
        return stats

    async def check_invariants(self) -> None:
        async with self._get_lock():
            self._cache.check_invariants()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Drop every entry; listeners are not called."""
        await self.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cache!r})"
