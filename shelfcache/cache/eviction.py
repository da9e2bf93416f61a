"""
Shelfcache — Eviction Policies

One policy object per strategy, chosen when a cache is created and fixed for
its lifetime. A policy only picks the next victim; removal and accounting stay
with the cache.

- LRU: least recently touched key (head of ``access_order``)
- LFU: lowest use count; ties go to the key tracked the longest
- FIFO: oldest inserted key (head of ``entries``)

Eviction removes a batch of ``ceil(max_entries * ratio)`` keys (at least one),
stopping early if the cache empties.
"""

import logging
import math
from abc import ABC, abstractmethod

from ..config.schemas import EvictionStrategy
from .entry import Cache

logger = logging.getLogger(__name__)

DEFAULT_EVICTION_RATIO = 0.1


class EvictionPolicy(ABC):
    """Selects which key a full cache should give up next."""

    strategy: EvictionStrategy

    @abstractmethod
    def select_victim(self, cache: Cache) -> str | None:
        """Return the key to evict, or None if the cache is empty."""


class LRUPolicy(EvictionPolicy):
    strategy = EvictionStrategy.LRU

    def select_victim(self, cache: Cache) -> str | None:
        return next(iter(cache.access_order), None)


class LFUPolicy(EvictionPolicy):
    strategy = EvictionStrategy.LFU

    def select_victim(self, cache: Cache) -> str | None:
        # min() keeps the first minimum in iteration order
        return min(cache.access_count, key=cache.access_count.__getitem__, default=None)


class FIFOPolicy(EvictionPolicy):
    strategy = EvictionStrategy.FIFO

    def select_victim(self, cache: Cache) -> str | None:
        return next(iter(cache.entries), None)


_POLICIES: dict[EvictionStrategy, EvictionPolicy] = {
    EvictionStrategy.LRU: LRUPolicy(),
    EvictionStrategy.LFU: LFUPolicy(),
    EvictionStrategy.FIFO: FIFOPolicy(),
}


def get_policy(strategy: EvictionStrategy | str) -> EvictionPolicy:
    """Look up the shared policy instance for a strategy."""
    return _POLICIES[EvictionStrategy(strategy)]


def eviction_batch_size(max_entries: int, ratio: float = DEFAULT_EVICTION_RATIO) -> int:
    """Number of keys removed per eviction round."""
    # round() absorbs float noise such as 30 * 0.1 == 3.0000000000000004
    return max(1, math.ceil(round(max_entries * ratio, 9)))


def evict(cache: Cache, policy: EvictionPolicy, batch_size: int) -> list[str]:
    """
    Remove up to ``batch_size`` victims from ``cache``.

    Returns:
        Evicted keys, in eviction order
    """
    evicted: list[str] = []
    for _ in range(batch_size):
        if not cache.entries:
            break
        key = policy.select_victim(cache)
        if key is None:
            break
        if cache.remove(key) is not None:
            evicted.append(key)

    cache.evictions += len(evicted)
    if evicted:
        logger.debug(
            f"Evicted {len(evicted)} entries from cache '{cache.name}'",
            extra={"cache_name": cache.name, "strategy": policy.strategy.value, "evicted": evicted},
        )
    return evicted
