"""
Shelfcache — Cache Manager

Registry of named, independently configured TTL caches.

Features:
- Lazy cache creation: every entry operation auto-creates an unknown cache
- LRU / LFU / FIFO batch eviction when a cache reaches capacity
- Lazy expiry on read plus a periodic background sweep
- Best-effort write-through persistence of persistent caches to a BlobStore
- Single-flight ``get_or_set``: concurrent misses on one key run the producer once

All public entry operations are coroutines and are serialised by one
``asyncio.Lock``. Persistence failures are logged and never reach the caller.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from ..config.schemas import CacheManagerConfig, CacheOptions
from ..errors import ConfigurationError
from ..persistence.interface import BlobStore
from .entry import Cache, CacheEntry, estimate_size
from .eviction import EvictionPolicy, evict, eviction_batch_size, get_policy

logger = logging.getLogger(__name__)

Producer = Callable[[], Any]

_MISSING = object()


class _FillLock:
    """Per-key lock shared by concurrent ``get_or_set`` callers."""

    __slots__ = ("lock", "waiters")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.waiters = 0


class CacheManager:
    """
    Process-wide owner of all named caches.

    Construct once at program start, call ``start()`` inside the running event
    loop to launch the expiry sweeper, and ``await destroy()`` on shutdown.
    """

    def __init__(
        self,
        config: CacheManagerConfig | None = None,
        store: BlobStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the cache manager.

        Args:
            config: Manager-wide defaults and sweep settings
            store: Durable store for persistent caches (None disables persistence)
            clock: Source of epoch seconds, injectable for tests
        """
        self.config = config or CacheManagerConfig()
        self.store = store
        self._clock = clock

        self._caches: dict[str, Cache] = {}
        self._policies: dict[str, EvictionPolicy] = {}
        self._lock = asyncio.Lock()
        self._fill_locks: dict[tuple[str, str], _FillLock] = {}
        self._sweeper: asyncio.Task[None] | None = None

    # ------------ Lifecycle ------------

    def start(self) -> None:
        """Start the background expiry sweep. Must be called from a running event loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop(), name="shelfcache-sweeper")
        logger.info(
            "Cache expiry sweeper started",
            extra={"interval_seconds": self.config.sweep_interval_seconds},
        )

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    async def destroy(self) -> None:
        """Stop the sweeper, flush every persistent cache, then drop the registry."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None

        async with self._lock:
            for cache in self._caches.values():
                await self._persist(cache)
            count = len(self._caches)
            self._caches.clear()
            self._policies.clear()

        logger.info(f"Cache manager destroyed ({count} caches released)", extra={"cache_count": count})

    async def _sweep_loop(self) -> None:
        interval = self.config.sweep_interval_seconds
        while True:
            await asyncio.sleep(interval)
            try:
                await self.cleanup()
            except Exception as e:
                logger.error(
                    f"Unexpected error during cache expiry sweep: {e}",
                    extra={"error": str(e)},
                    exc_info=True,
                )

    # ------------ Cache registry ------------

    def _resolve_options(self, options: CacheOptions | Mapping[str, Any] | None) -> CacheOptions:
        if options is None:
            return self.config.default_options()
        if isinstance(options, CacheOptions):
            return options
        try:
            return CacheOptions.model_validate({**self.config.default_options().model_dump(), **options})
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid cache options",
                details={"validation_errors": e.errors(), "options": dict(options)},
            ) from e

    async def create_cache(
        self,
        name: str,
        options: CacheOptions | Mapping[str, Any] | None = None,
    ) -> Cache:
        """
        Create (or replace) a named cache.

        Unset options fall back to the manager defaults. A persistent cache is
        restored from the durable store before it is returned. An existing
        cache with the same name is replaced and its contents dropped.

        Raises:
            ConfigurationError: If ``options`` fail validation
        """
        resolved = self._resolve_options(options)
        async with self._lock:
            return await self._create_cache(name, resolved)

    async def _create_cache(self, name: str, options: CacheOptions) -> Cache:
        if name in self._caches:
            logger.debug(f"Replacing existing cache '{name}'", extra={"cache_name": name})

        cache = Cache(name, options, created_at=self._clock())
        self._caches[name] = cache
        self._policies[name] = get_policy(options.strategy)

        if options.persistent:
            await self._restore(cache)

        logger.info(
            f"Cache '{name}' created",
            extra={
                "cache_name": name,
                "strategy": options.strategy.value,
                "max_entries": options.max_entries,
                "ttl_seconds": options.ttl_seconds,
                "persistent": options.persistent,
            },
        )
        return cache

    async def get_cache(
        self,
        name: str,
        options: CacheOptions | Mapping[str, Any] | None = None,
    ) -> Cache:
        """Return the named cache, creating it with ``options`` if it does not exist."""
        async with self._lock:
            return await self._get_or_create(name, options)

    async def _get_or_create(
        self,
        name: str,
        options: CacheOptions | Mapping[str, Any] | None = None,
    ) -> Cache:
        cache = self._caches.get(name)
        if cache is None:
            cache = await self._create_cache(name, self._resolve_options(options))
        return cache

    def list_caches(self) -> list[str]:
        """List registered cache names."""
        return list(self._caches.keys())

    # ------------ Entry operations ------------

    async def set(self, cache_name: str, key: str, value: Any, ttl: float | None = None) -> bool:
        """
        Store a value.

        Args:
            cache_name: Target cache (created if missing)
            key: Entry key
            value: Value to store
            ttl: Lifetime in seconds (None = cache default)

        Returns:
            True; oversized values are accepted
        """
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            self._store_entry(cache, key, value, ttl)
            await self._persist(cache)
            return True

    def _store_entry(self, cache: Cache, key: str, value: Any, ttl: float | None) -> None:
        now = self._clock()
        lifetime = ttl if ttl is not None else cache.options.ttl_seconds
        entry = CacheEntry(
            value=value,
            expires_at=now + lifetime,
            created_at=now,
            size=estimate_size(value),
        )

        if len(cache) >= cache.options.max_entries:
            batch = eviction_batch_size(cache.options.max_entries, self.config.eviction_ratio)
            evict(cache, self._policies[cache.name], batch)

        cache.insert(key, entry)
        cache.sets += 1

    def _lookup(self, cache: Cache, key: str) -> Any:
        """Counted read: returns the value or ``_MISSING``, updating stats and tracking."""
        entry = cache.entries.get(key)
        if entry is None:
            cache.misses += 1
            return _MISSING

        if entry.is_expired(self._clock()):
            cache.remove(key)
            cache.expirations += 1
            cache.misses += 1
            return _MISSING

        entry.access_count += 1
        cache.touch(key)
        cache.hits += 1
        return entry.value

    def _peek(self, cache: Cache, key: str) -> Any:
        """Uncounted read: returns the value or ``_MISSING`` without touching stats or tracking."""
        entry = cache.entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return _MISSING
        return entry.value

    async def get(self, cache_name: str, key: str) -> Any | None:
        """
        Retrieve a value.

        Returns:
            The cached value, or None if the key is missing or expired
        """
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            value = self._lookup(cache, key)
        return None if value is _MISSING else value

    async def lookup(self, cache_name: str, key: str) -> tuple[bool, Any]:
        """
        Counted read that tells a stored None apart from a miss.

        Returns:
            ``(found, value)``; value is None when not found
        """
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            value = self._lookup(cache, key)
        if value is _MISSING:
            return False, None
        return True, value

    async def exists(self, cache_name: str, key: str) -> bool:
        """Check for a fresh entry without counting a hit or miss."""
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            entry = cache.entries.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock()):
                cache.remove(key)
                cache.expirations += 1
                return False
            return True

    async def get_or_set(
        self,
        cache_name: str,
        key: str,
        producer: Producer,
        ttl: float | None = None,
    ) -> Any:
        """
        Return the cached value, or compute, store and return it.

        ``producer`` may be a plain callable or return an awaitable. Concurrent
        callers missing on the same key wait for a single producer run and
        share its result. Exceptions from ``producer`` propagate unchanged and
        nothing is stored.
        """
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            value = self._lookup(cache, key)
        if value is not _MISSING:
            return value

        fill_key = (cache_name, key)
        fill = self._fill_locks.get(fill_key)
        if fill is None:
            fill = self._fill_locks[fill_key] = _FillLock()
        fill.waiters += 1

        try:
            async with fill.lock:
                # Another caller may have filled the key while we waited
                async with self._lock:
                    cache = await self._get_or_create(cache_name)
                    value = self._peek(cache, key)
                if value is not _MISSING:
                    return value

                result = producer()
                if inspect.isawaitable(result):
                    result = await result

                await self.set(cache_name, key, result, ttl)
                return result
        finally:
            fill.waiters -= 1
            if fill.waiters == 0:
                self._fill_locks.pop(fill_key, None)

    async def delete(self, cache_name: str, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if an entry was removed, False if the key was absent
        """
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            if cache.remove(key) is None:
                return False
            cache.deletes += 1
            await self._persist(cache)
            return True

    async def clear(self, cache_name: str) -> None:
        """Empty a cache and reset its counters. A persistent cache also loses its durable blob."""
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            size = len(cache)
            cache.reset()
            if cache.options.persistent:
                await self._remove_blob(cache)
        logger.info(f"Cleared {size} entries from cache '{cache_name}'", extra={"cache_name": cache_name})

    async def get_many(self, cache_name: str, keys: list[str]) -> dict[str, Any]:
        """Retrieve several keys; missing and expired keys are omitted."""
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            result = {}
            for key in keys:
                value = self._lookup(cache, key)
                if value is not _MISSING:
                    result[key] = value
            return result

    async def set_many(self, cache_name: str, items: Mapping[str, Any], ttl: float | None = None) -> int:
        """Store several values with one persistence write. Returns the number stored."""
        if not items:
            return 0
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            for key, value in items.items():
                self._store_entry(cache, key, value, ttl)
            await self._persist(cache)
            return len(items)

    async def delete_many(self, cache_name: str, keys: list[str]) -> int:
        """Delete several keys with one persistence write. Returns the number removed."""
        async with self._lock:
            cache = await self._get_or_create(cache_name)
            count = 0
            for key in keys:
                if cache.remove(key) is not None:
                    count += 1
            cache.deletes += count
            if count:
                await self._persist(cache)
            return count

    async def cleanup(self) -> int:
        """
        Remove expired entries from every cache.

        Persistent caches that lost entries are written once afterwards.

        Returns:
            Number of entries removed
        """
        removed = 0
        async with self._lock:
            now = self._clock()
            for cache in self._caches.values():
                expired = cache.expired_keys(now)
                for key in expired:
                    cache.remove(key)
                cache.expirations += len(expired)
                if expired:
                    removed += len(expired)
                    await self._persist(cache)

        if removed:
            logger.debug(f"Expiry sweep removed {removed} entries", extra={"removed": removed})
        return removed

    # ------------ Stats ------------

    def _stats_for(self, cache: Cache) -> dict[str, Any]:
        total_requests = cache.hits + cache.misses
        return {
            "name": cache.name,
            "size": len(cache),
            "memory_size": cache.total_size,
            "hits": cache.hits,
            "misses": cache.misses,
            "hit_rate": cache.hits / total_requests if total_requests > 0 else 0.0,
            "config": cache.options.model_dump(mode="json"),
            "sets": cache.sets,
            "deletes": cache.deletes,
            "evictions": cache.evictions,
            "expirations": cache.expirations,
            "created_at": cache.created_at,
        }

    def get_stats(self, cache_name: str | None = None) -> dict[str, Any] | None:
        """
        Get cache statistics.

        Args:
            cache_name: A single cache, or None for every registered cache

        Returns:
            Stats for the named cache (None if unknown), or a mapping of
            cache name to stats
        """
        if cache_name is not None:
            cache = self._caches.get(cache_name)
            return self._stats_for(cache) if cache is not None else None

        return {name: self._stats_for(cache) for name, cache in self._caches.items()}

    # ------------ Persistence ------------

    async def _persist(self, cache: Cache) -> None:
        """Write the full snapshot of a persistent cache. Failures are logged, never raised."""
        if not cache.options.persistent or self.store is None:
            return

        try:
            blob = json.dumps(cache.to_snapshot(self._clock()), ensure_ascii=False)
            await self.store.put(cache.name, blob)
        except Exception as e:
            logger.warning(
                f"Failed to save persistent cache '{cache.name}': {e}",
                extra={"cache_name": cache.name, "error": str(e)},
                exc_info=True,
            )

    async def _restore(self, cache: Cache) -> None:
        """Load the unexpired part of a persistent cache's snapshot. Failures are logged, never raised."""
        if self.store is None:
            logger.warning(
                f"Cache '{cache.name}' is persistent but no durable store is configured",
                extra={"cache_name": cache.name},
            )
            return

        try:
            blob = await self.store.get(cache.name)
            if blob is None:
                return
            restored = cache.restore(json.loads(blob), self._clock())
            logger.debug(
                f"Restored {restored} entries into cache '{cache.name}'",
                extra={"cache_name": cache.name, "restored": restored},
            )
        except Exception as e:
            logger.warning(
                f"Failed to load persistent cache '{cache.name}': {e}",
                extra={"cache_name": cache.name, "error": str(e)},
                exc_info=True,
            )

    async def _remove_blob(self, cache: Cache) -> None:
        if self.store is None:
            return
        try:
            await self.store.remove(cache.name)
        except Exception as e:
            logger.warning(
                f"Failed to remove persistent cache '{cache.name}': {e}",
                extra={"cache_name": cache.name, "error": str(e)},
                exc_info=True,
            )
