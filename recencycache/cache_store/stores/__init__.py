"""
Cache store implementations for recencycache.
"""

from .in_memory import CacheMetrics, FixedCapacityRecencyCache, LRUCache
from .synchronized import AsyncRecencyCache, ThreadSafeRecencyCache

__all__ = [
    "CacheMetrics",
    "FixedCapacityRecencyCache",
    "LRUCache",
    "ThreadSafeRecencyCache",
    "AsyncRecencyCache",
]
