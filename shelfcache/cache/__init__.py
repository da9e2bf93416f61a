"""
Shelfcache — Cache Module

Named TTL caches with pluggable eviction and write-through persistence.

- manager.py: CacheManager, the registry and every entry operation
- entry.py: per-cache state (entries, tracking, size accounting, snapshots)
- eviction.py: LRU / LFU / FIFO victim selection
- factory.py: construction and lifespan of the process-wide manager

Usage:
    from shelfcache.cache import cache_manager_lifespan

    async with cache_manager_lifespan() as manager:
        await manager.create_cache("stats", {"max_entries": 20, "strategy": "lfu"})
        await manager.set("stats", "genres", {"fiction": 12})
        value = await manager.get("stats", "genres")
"""

from .entry import Cache, CacheEntry, estimate_size
from .eviction import (
    EvictionPolicy,
    FIFOPolicy,
    LFUPolicy,
    LRUPolicy,
    eviction_batch_size,
    get_policy,
)
from .factory import cache_manager_lifespan, initialize_cache_manager
from .manager import CacheManager

__all__ = [
    # Manager and lifecycle
    "CacheManager",
    "cache_manager_lifespan",
    "initialize_cache_manager",
    # State
    "Cache",
    "CacheEntry",
    "estimate_size",
    # Eviction
    "EvictionPolicy",
    "LRUPolicy",
    "LFUPolicy",
    "FIFOPolicy",
    "eviction_batch_size",
    "get_policy",
]
