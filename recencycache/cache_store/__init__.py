"""
Cache store package for recencycache.

This package contains the store base class, the entry arena and the store implementations.
"""

# Base classes
from .base import BaseCacheStore, MISSING

# Arena
from .arena import Entry, EntryArena

# Store Implementations (from stores subpackage)
from .stores import (
    AsyncRecencyCache,
    CacheMetrics,
    FixedCapacityRecencyCache,
    LRUCache,
    ThreadSafeRecencyCache,
)

__all__ = [
    # Base classes
    "BaseCacheStore",
    "MISSING",
    # Arena
    "Entry",
    "EntryArena",
    # Stores
    "CacheMetrics",
    "FixedCapacityRecencyCache",
    "LRUCache",
    "ThreadSafeRecencyCache",
    "AsyncRecencyCache",
]
