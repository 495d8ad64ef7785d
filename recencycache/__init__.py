"""
recencycache - Fixed-Capacity LRU Cache
=======================================

An in-memory key/value cache with least-recently-used eviction and O(1)
``get``/``put``, backed by an index-linked entry arena.
"""

__version__ = "0.1.0"

from .cache_store import (
    MISSING,
    AsyncRecencyCache,
    BaseCacheStore,
    CacheMetrics,
    Entry,
    EntryArena,
    FixedCapacityRecencyCache,
    LRUCache,
    ThreadSafeRecencyCache,
)
from .config import CacheConfig, create_cache
from .exceptions import (
    CacheOperationError,
    CacheStoreError,
    ConfigurationError,
    InvalidConfiguration,
    RecencyCacheError,
    ValidationError,
)

__all__ = [
    "FixedCapacityRecencyCache",
    "LRUCache",
    "ThreadSafeRecencyCache",
    "AsyncRecencyCache",
    "BaseCacheStore",
    "CacheMetrics",
    "Entry",
    "EntryArena",
    "MISSING",
    "CacheConfig",
    "create_cache",
    "RecencyCacheError",
    "ConfigurationError",
    "InvalidConfiguration",
    "CacheStoreError",
    "CacheOperationError",
    "ValidationError",
]
