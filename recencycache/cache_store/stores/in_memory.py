"""
Fixed-capacity in-memory cache with least-recently-used eviction.

Every successful read or write moves a key to the most-recently-used end of
the recency order; inserting a new key into a full cache evicts the key at
the least-recently-used end. Lookup, insert, promotion and eviction are all
O(1): a dict maps keys to arena handles and the recency order is a doubly
linked list of handles inside an :class:`EntryArena`.

Not thread-safe. Use :class:`ThreadSafeRecencyCache` or
:class:`AsyncRecencyCache` to share one instance.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Tuple

from recencycache.cache_store.arena import HEAD, TAIL, EntryArena
from recencycache.cache_store.base import BaseCacheStore
from recencycache.exceptions import CacheOperationError, CacheStoreError
from recencycache.utils.logging import MetricsLogger
from recencycache.utils.metrics import MetricsRegistry
from recencycache.utils.validation import validate_cache_name, validate_capacity, validate_key

logger = logging.getLogger(__name__)
_events = MetricsLogger(logger)

EvictionListener = Callable[[Hashable, Any], None]

_instance_ids = itertools.count(1)


@dataclass
class CacheMetrics:
    """
    Hit, miss and eviction bookkeeping for a single cache.

    Attributes:
        hits: Number of successful lookups
        misses: Number of failed lookups
        evictions: Number of entries evicted to make room for new keys
        current_size: Number of entries at the time of the snapshot
        max_size: Capacity of the cache
    """
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    current_size: int = 0
    max_size: int = 0

    @property
    def total_lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return self.hits / self.total_lookups if self.total_lookups > 0 else 0.0

    def to_dict(self) -> dict:
        """Convert metrics to a dictionary for easy serialization."""
        return {
            'hits': self.hits,
            'misses': self.misses,
            'evictions': self.evictions,
            'hit_rate': self.hit_rate,
            'current_size': self.current_size,
            'max_size': self.max_size,
        }

    def __str__(self) -> str:
        return (
            f"CacheMetrics(hits={self.hits}, misses={self.misses}, "
            f"hit_rate={self.hit_rate:.1%}, size={self.current_size}/{self.max_size}, "
            f"evictions={self.evictions})"
        )


class FixedCapacityRecencyCache(BaseCacheStore):
    """
    Fixed-capacity key/value cache with LRU eviction.

    Args:
        capacity: Maximum number of entries; must be at least 1
        on_evict: Called with ``(key, value)`` after an entry is evicted to
            make room for a new key. Not called for :meth:`remove` or
            :meth:`clear`.
        name: Name used in log records and metric labels
        metrics_registry: Registry to publish hit/miss/eviction counters to,
            labelled with ``name`` and a process-unique ``instance`` id

    Raises:
        InvalidConfiguration: If capacity is not a positive integer.
    """

    def __init__(
        self,
        capacity: int,
        on_evict: Optional[EvictionListener] = None,
        name: str = "default",
        metrics_registry: Optional[MetricsRegistry] = None,
    ):
        validate_capacity(capacity)
        validate_cache_name(name)

        self._capacity = capacity
        self._on_evict = on_evict
        self.name = name

        self._index: Dict[Hashable, int] = {}
        self._arena = EntryArena()

        self._metrics = CacheMetrics(max_size=capacity)

        self.instance_id = next(_instance_ids)
        self.metric_labels = {'cache': name, 'instance': str(self.instance_id)}

        self._hits_counter = None
        self._misses_counter = None
        self._evictions_counter = None
        self._size_gauge = None
        if metrics_registry is not None:
            labels = self.metric_labels
            self._hits_counter = metrics_registry.counter(
                "recencycache_hits_total", "Cache lookups that found the key", labels)
            self._misses_counter = metrics_registry.counter(
                "recencycache_misses_total", "Cache lookups that missed", labels)
            self._evictions_counter = metrics_registry.counter(
                "recencycache_evictions_total", "Entries evicted at capacity", labels)
            self._size_gauge = metrics_registry.gauge(
                "recencycache_size", "Current number of cached entries", labels)
            self._size_gauge.set(0)

        logger.debug("Created cache %r with capacity %d", name, capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: Hashable, default: Any = None) -> Any:
        """
        Get a cached value and promote the key to most recently used.

        A miss returns ``default`` and leaves size and order untouched.
        """
        handle = self._index.get(validate_key(key))
        if handle is None:
            self._metrics.misses += 1
            if self._misses_counter is not None:
                self._misses_counter.increment()
            _events.log_cache_miss(self.name, key)
            return default

        self._arena.move_to_front(handle)
        self._metrics.hits += 1
        if self._hits_counter is not None:
            self._hits_counter.increment()
        _events.log_cache_hit(self.name, key)
        return self._arena[handle].value

    def peek(self, key: Hashable, default: Any = None) -> Any:
        """Get a cached value without promoting it or counting a lookup."""
        handle = self._index.get(validate_key(key))
        if handle is None:
            return default
        return self._arena[handle].value

    def put(self, key: Hashable, value: Any) -> None:
        """
        Insert or overwrite ``key`` and promote it to most recently used.

        Overwriting an existing key keeps the size unchanged. Inserting a new
        key into a full cache first evicts the least recently used entry.

        Raises:
            CacheOperationError: If the ``on_evict`` listener raises. The
                cache already holds the new entry when this happens.
        """
        handle = self._index.get(validate_key(key))
        if handle is not None:
            self._arena[handle].value = value
            self._arena.move_to_front(handle)
            return

        evicted = None
        if len(self._index) >= self._capacity:
            evicted = self._evict_lru()

        handle = self._arena.allocate(key, value)
        self._arena.push_front(handle)
        self._index[key] = handle
        self._update_size()

        if evicted is not None and self._on_evict is not None:
            evicted_key, evicted_value = evicted
            try:
                self._on_evict(evicted_key, evicted_value)
            except Exception as e:
                logger.error(f"Eviction listener failed for key {evicted_key!r}: {e}", exc_info=True)
                raise CacheOperationError(
                    f"Eviction listener failed for key {evicted_key!r}", original_exception=e
                ) from e

    def _evict_lru(self) -> Tuple[Hashable, Any]:
        handle = self._arena.back()
        entry = self._arena[handle]
        key, value = entry.key, entry.value
        self._unlink_and_release(key, handle)

        self._metrics.evictions += 1
        if self._evictions_counter is not None:
            self._evictions_counter.increment()
        _events.log_eviction(self.name, key, size=len(self._index))
        return key, value

    def _unlink_and_release(self, key: Hashable, handle: int) -> None:
        del self._index[key]
        self._arena.unlink(handle)
        self._arena.release(handle)

    def remove(self, key: Hashable) -> bool:
        """
        Remove a key from the cache.

        Args:
            key: The key to remove

        Returns:
            bool: True if the key was found and removed, False otherwise
        """
        handle = self._index.get(validate_key(key))
        if handle is None:
            return False
        self._unlink_and_release(key, handle)
        self._update_size()
        return True

    def clear(self) -> None:
        self._index.clear()
        self._arena.reset()
        self._update_size()

    def size(self) -> int:
        return len(self._index)

    def _update_size(self) -> None:
        self._metrics.current_size = len(self._index)
        if self._size_gauge is not None:
            self._size_gauge.set(len(self._index))

    def __iter__(self) -> Iterator[Hashable]:
        """Iterate keys from most to least recently used."""
        for handle in self._arena.handles():
            yield self._arena[handle].key

    def keys(self) -> List[Hashable]:
        return list(self)

    def items(self) -> List[Tuple[Hashable, Any]]:
        """Key/value pairs from most to least recently used."""
        return [(self._arena[h].key, self._arena[h].value) for h in self._arena.handles()]

    def most_recent(self) -> Optional[Hashable]:
        """Key at the most-recently-used end, or None if the cache is empty."""
        handle = self._arena.front()
        return None if handle is None else self._arena[handle].key

    def least_recent(self) -> Optional[Hashable]:
        """Key that the next insert into a full cache would evict."""
        handle = self._arena.back()
        return None if handle is None else self._arena[handle].key

    def get_metrics(self) -> CacheMetrics:
        """
        Get a snapshot of the current cache metrics.

        Returns:
            CacheMetrics: A copy that later operations do not modify
        """
        return CacheMetrics(
            hits=self._metrics.hits,
            misses=self._metrics.misses,
            evictions=self._metrics.evictions,
            current_size=len(self._index),
            max_size=self._capacity,
        )

    def get_stats(self) -> dict:
        """Get cache statistics as a dictionary."""
        stats = self.get_metrics().to_dict()
        stats['name'] = self.name
        stats['capacity'] = self._capacity
        stats['most_recent'] = self.most_recent()
        stats['least_recent'] = self.least_recent()
        return stats

    def check_invariants(self) -> None:
        """
        Verify that the key index and the recency sequence agree.

        Walks the whole sequence, so this is O(n); meant for tests and
        debugging.

        Raises:
            CacheStoreError: If the two views have diverged.
        """
        seen = {}
        prev = HEAD
        for handle in self._arena.handles():
            entry = self._arena[handle]
            if entry.prev != prev:
                raise CacheStoreError(f"Broken back link at handle {handle}")
            if entry.key in seen:
                raise CacheStoreError(f"Duplicate key {entry.key!r} in recency sequence")
            seen[entry.key] = handle
            prev = handle
        if self._arena[TAIL].prev != prev:
            raise CacheStoreError("Broken back link at tail sentinel")
        if seen != self._index:
            raise CacheStoreError("Recency sequence and key index hold different entries")
        if not len(self._arena) == len(self._index) <= self._capacity:
            raise CacheStoreError(
                f"Size mismatch: {len(self._arena)} linked, {len(self._index)} indexed, "
                f"capacity {self._capacity}"
            )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"size={len(self._index)}, capacity={self._capacity})"
        )


LRUCache = FixedCapacityRecencyCache
