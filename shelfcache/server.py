"""
Shelfcache — MCP Server

FastMCP server (stdio transport) exposing the cache manager as tools.

- One CacheManager per server process, built in the lifespan and destroyed on shutdown
- Configuration via typed Pydantic models only
- Structured JSON logging
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from . import tools
from .cache import CacheManager, cache_manager_lifespan
from .config import load_config
from .errors import CacheError
from .observability import setup_logging

logger = logging.getLogger(__name__)

_manager: CacheManager | None = None


@asynccontextmanager
async def server_lifespan(server: Any) -> AsyncIterator[None]:
    """Server lifespan manager (startup/shutdown)."""
    global _manager

    config = load_config()
    setup_logging(level=config.log_level, fmt=config.log_format)
    logger.info(f"Starting Shelfcache server (environment: {config.environment.value})")

    async with cache_manager_lifespan(config) as manager:
        _manager = manager
        try:
            yield
        finally:
            _manager = None
            logger.info("Shelfcache server shutting down")


mcp = FastMCP("Shelfcache - Library Tracker Cache", lifespan=server_lifespan)


def _require_manager() -> CacheManager:
    if _manager is None:
        raise CacheError("Cache manager is not running")
    return _manager


@mcp.tool()
async def cache_create(
    cache_name: str,
    ttl_seconds: float | None = None,
    max_entries: int | None = None,
    strategy: str | None = None,
    persistent: bool | None = None,
) -> dict[str, Any]:
    """
    Create or replace a named cache.

    Args:
        cache_name: Cache name
        ttl_seconds: Default entry lifetime in seconds
        max_entries: Capacity that triggers eviction
        strategy: lru, lfu or fifo
        persistent: Write-through to the durable store
    """
    return await tools.cache_create(
        _require_manager(),
        cache_name=cache_name,
        ttl_seconds=ttl_seconds,
        max_entries=max_entries,
        strategy=strategy,
        persistent=persistent,
    )


@mcp.tool()
async def cache_get(cache_name: str, key: str) -> dict[str, Any]:
    """
    Retrieve value from a cache.

    Args:
        cache_name: Cache name (created on first use)
        key: Cache key to retrieve
    """
    return await tools.cache_get(_require_manager(), cache_name=cache_name, key=key)


@mcp.tool()
async def cache_set(cache_name: str, key: str, value: Any, ttl: float | None = None) -> dict[str, Any]:
    """
    Store value in a cache.

    Args:
        cache_name: Cache name (created on first use)
        key: Cache key
        value: Value to store
        ttl: Time-to-live in seconds (None = cache default)
    """
    return await tools.cache_set(_require_manager(), cache_name=cache_name, key=key, value=value, ttl=ttl)


@mcp.tool()
async def cache_delete(cache_name: str, key: str) -> dict[str, Any]:
    """
    Delete key from a cache.

    Args:
        cache_name: Cache name
        key: Cache key to delete
    """
    return await tools.cache_delete(_require_manager(), cache_name=cache_name, key=key)


@mcp.tool()
async def cache_clear(cache_name: str) -> dict[str, Any]:
    """
    Remove every entry from a cache.

    Args:
        cache_name: Cache name
    """
    return await tools.cache_clear(_require_manager(), cache_name=cache_name)


@mcp.tool()
async def cache_stats(cache_name: str | None = None) -> dict[str, Any]:
    """
    Get cache statistics.

    Args:
        cache_name: Cache name, or omit for every cache
    """
    return await tools.cache_stats(_require_manager(), cache_name=cache_name)


def main() -> None:
    """CLI entry point for the shelfcache command."""
    mcp.run()


if __name__ == "__main__":
    main()
