"""
Shelfcache — Cache Manager Factory

Canonical construction of the process-wide CacheManager. The manager is built
once at program start and passed to its consumers; there is no module-level
instance.

Examples:
    from shelfcache.cache import cache_manager_lifespan

    async with cache_manager_lifespan() as manager:
        await manager.set("books", "isbn:9780141439518", {"title": "Emma"})

    # Or explicitly supply config and store (e.g., for tests)
    manager = initialize_cache_manager(config, store=MemoryBlobStore())
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from ..config import ShelfcacheConfig, get_config
from ..persistence import BlobStore, create_blob_store
from .manager import CacheManager

logger = logging.getLogger(__name__)


def initialize_cache_manager(
    config: ShelfcacheConfig | None = None,
    store: BlobStore | None = None,
    clock: Callable[[], float] = time.time,
) -> CacheManager:
    """
    Build a CacheManager from configuration. The sweeper is not started.

    Args:
        config: Root configuration (uses global config if not provided)
        store: Durable store (built from ``config.store`` if not provided)
        clock: Source of epoch seconds

    Returns:
        New CacheManager instance

    Raises:
        ConfigurationError: If the configured store is unavailable
    """
    if config is None:
        config = get_config()

    if store is None:
        store = create_blob_store(config.store)

    manager = CacheManager(config=config.cache, store=store, clock=clock)
    logger.info(
        "Cache manager initialized",
        extra={"store": type(store).__name__, "sweep_interval_seconds": config.cache.sweep_interval_seconds},
    )
    return manager


@asynccontextmanager
async def cache_manager_lifespan(
    config: ShelfcacheConfig | None = None,
    store: BlobStore | None = None,
) -> AsyncIterator[CacheManager]:
    """
    Run a started CacheManager for the duration of the block.

    On exit the manager is destroyed (persistent caches flushed) and, when the
    store was built here, the store is closed.
    """
    owns_store = store is None
    manager = initialize_cache_manager(config, store=store)
    manager.start()
    try:
        yield manager
    finally:
        await manager.destroy()
        if owns_store and manager.store is not None:
            await manager.store.close()
