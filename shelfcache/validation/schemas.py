"""
Shelfcache — Tool Input Schemas

Pydantic models validating the inputs of the cache MCP tools.
"""

from typing import Any

from pydantic import BaseModel, Field

from ..config.schemas import EvictionStrategy


class CacheNameInput(BaseModel):
    """Input carrying only a cache name."""

    cache_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Cache name (1-200 characters)",
    )


class CacheKeyInput(CacheNameInput):
    """Input addressing one entry."""

    key: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Cache key (1-1000 characters)",
    )


class CacheGetInput(CacheKeyInput):
    """Input validation for cache_get tool."""


class CacheDeleteInput(CacheKeyInput):
    """Input validation for cache_delete tool."""


class CacheSetInput(CacheKeyInput):
    """Input validation for cache_set tool."""

    value: Any = Field(..., description="Value to store (JSON-serializable for persistent caches)")
    ttl: float | None = Field(
        default=None,
        gt=0,
        le=86400 * 30,  # 30 days max
        description="Time-to-live in seconds (None = cache default)",
    )


class CacheClearInput(CacheNameInput):
    """Input validation for cache_clear tool."""


class CacheStatsInput(BaseModel):
    """Input validation for cache_stats tool."""

    cache_name: str | None = Field(
        default=None,
        min_length=1,
        max_length=200,
        description="Cache name, or None for every cache",
    )


class CacheCreateInput(CacheNameInput):
    """Input validation for cache_create tool."""

    ttl_seconds: float | None = Field(default=None, gt=0, description="Default entry lifetime in seconds")
    max_entries: int | None = Field(default=None, ge=1, description="Capacity that triggers eviction")
    strategy: EvictionStrategy | None = Field(default=None, description="lru, lfu or fifo")
    persistent: bool | None = Field(default=None, description="Write-through to the durable store")
