#!/usr/bin/env python3
"""
Basic recencycache Demo
=======================

Walks through get/put, eviction, the eviction listener and the stats a
cache keeps.
"""

from recencycache import MISSING, FixedCapacityRecencyCache
from recencycache.utils.logging_config import LoggingPresets


def basic_demo():
    LoggingPresets.development()

    evicted = []
    cache = FixedCapacityRecencyCache(
        capacity=2,
        name="demo",
        on_evict=lambda key, value: evicted.append((key, value)),
    )

    cache.put(1, "A")
    cache.put(2, "B")
    print(f"get(1) -> {cache.get(1)!r}")  # key 1 becomes most recently used

    cache.put(3, "C")  # evicts key 2
    print(f"evicted: {evicted}")

    result = cache.get(2, MISSING)
    print(f"get(2) -> {'not found' if result is MISSING else result!r}")
    print(f"get(1) -> {cache.get(1)!r}")

    print(f"order (most recent first): {cache.keys()}")
    print(cache.get_metrics())


if __name__ == "__main__":
    basic_demo()
