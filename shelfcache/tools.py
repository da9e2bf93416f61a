"""
Shelfcache — Cache Tools

Tool bodies behind the MCP server. Each takes the CacheManager as its first
positional argument and validated keyword inputs, and returns a JSON-ready
dict. Kept free of FastMCP so they can be called directly.
"""

import logging
from typing import Any

from .cache import CacheManager
from .errors import CacheNotFoundError, ConfigurationError, ErrorCode, make_error_response
from .validation import (
    CacheClearInput,
    CacheCreateInput,
    CacheDeleteInput,
    CacheGetInput,
    CacheSetInput,
    CacheStatsInput,
    validate_input,
)

logger = logging.getLogger(__name__)


@validate_input(CacheCreateInput)
async def cache_create(
    manager: CacheManager,
    cache_name: str,
    ttl_seconds: float | None = None,
    max_entries: int | None = None,
    strategy: str | None = None,
    persistent: bool | None = None,
) -> dict[str, Any]:
    """Create or replace a named cache; unset options use the manager defaults."""
    options = {
        field: value
        for field, value in (
            ("ttl_seconds", ttl_seconds),
            ("max_entries", max_entries),
            ("strategy", strategy),
            ("persistent", persistent),
        )
        if value is not None
    }
    try:
        cache = await manager.create_cache(cache_name, options)
    except ConfigurationError as e:
        return make_error_response(ErrorCode.INVALID_PARAMETER_VALUE, e.message, e.details)

    return {"success": True, "cache_name": cache.name, "config": cache.options.model_dump(mode="json")}


@validate_input(CacheGetInput)
async def cache_get(manager: CacheManager, cache_name: str, key: str) -> dict[str, Any]:
    """Retrieve a value; ``found`` distinguishes a miss from a stored None."""
    found, value = await manager.lookup(cache_name, key)
    return {"success": True, "found": found, "value": value}


@validate_input(CacheSetInput)
async def cache_set(
    manager: CacheManager,
    cache_name: str,
    key: str,
    value: Any,
    ttl: float | None = None,
) -> dict[str, Any]:
    """Store a value, optionally overriding the cache TTL."""
    stored = await manager.set(cache_name, key, value, ttl)
    return {"success": stored}


@validate_input(CacheDeleteInput)
async def cache_delete(manager: CacheManager, cache_name: str, key: str) -> dict[str, Any]:
    """Delete a key; ``deleted`` is False when it was absent."""
    deleted = await manager.delete(cache_name, key)
    return {"success": True, "deleted": deleted}


@validate_input(CacheClearInput)
async def cache_clear(manager: CacheManager, cache_name: str) -> dict[str, Any]:
    await manager.clear(cache_name)
    return {"success": True}


@validate_input(CacheStatsInput)
async def cache_stats(manager: CacheManager, cache_name: str | None = None) -> dict[str, Any]:
    """Stats for one cache, or for all caches when no name is given."""
    stats = manager.get_stats(cache_name)
    if stats is None:
        error = CacheNotFoundError(cache_name or "")
        return make_error_response(ErrorCode.CACHE_NOT_FOUND, error.message, error.details)
    return {"success": True, "stats": stats}
