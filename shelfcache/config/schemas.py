"""
Shelfcache — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration must be defined here and validated at startup.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


class EvictionStrategy(str, Enum):
    """Victim selection strategies for a full cache."""

    LRU = "lru"
    LFU = "lfu"
    FIFO = "fifo"


class StoreBackend(str, Enum):
    """Supported durable blob stores."""

    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"


class CacheOptions(BaseModel):
    """
    Per-cache configuration.

    Immutable once a cache is created. Fields left unset by the caller
    fall back to the manager-wide defaults.
    """

    ttl_seconds: float = Field(default=300.0, gt=0, description="Default entry lifetime in seconds")
    max_entries: int = Field(default=100, ge=1, description="Entry count that triggers eviction")
    strategy: EvictionStrategy = Field(default=EvictionStrategy.LRU, description="Eviction strategy")
    persistent: bool = Field(default=False, description="Write-through to the durable store")

    model_config = ConfigDict(frozen=True, extra="forbid")


class CacheManagerConfig(BaseModel):
    """Manager-wide cache defaults and background sweep settings."""

    default_ttl_seconds: float = Field(default=300.0, gt=0, description="Default TTL for new caches")
    default_max_entries: int = Field(default=100, ge=1, description="Default capacity for new caches")
    default_strategy: EvictionStrategy = Field(default=EvictionStrategy.LRU, description="Default strategy")
    default_persistent: bool = Field(default=False, description="Whether new caches persist by default")
    sweep_interval_seconds: float = Field(default=60.0, gt=0, description="Expiry sweep interval")
    eviction_ratio: float = Field(
        default=0.1,
        gt=0,
        le=1,
        description="Fraction of max_entries removed per eviction batch",
    )

    def default_options(self) -> CacheOptions:
        """Build the CacheOptions used when a caller supplies none."""
        return CacheOptions(
            ttl_seconds=self.default_ttl_seconds,
            max_entries=self.default_max_entries,
            strategy=self.default_strategy,
            persistent=self.default_persistent,
        )


class StoreConfig(BaseModel):
    """Durable blob store configuration."""

    backend: StoreBackend = Field(default=StoreBackend.MEMORY, description="Durable store backend")
    key_prefix: str = Field(default="cache_", description="Prefix applied to every blob key")
    path: str = Field(default="./data/cache", description="Directory for the file store")

    # Redis-specific settings (only used when backend=redis)
    redis_url: str | None = Field(default=None, validate_default=True, description="Redis connection URL")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str | None, info: Any) -> str | None:
        """Ensure redis_url is provided when backend is redis."""
        backend = info.data.get("backend")
        if backend == StoreBackend.REDIS and not v:
            raise ValueError("redis_url is required when store backend is 'redis'")
        return v


class ShelfcacheConfig(BaseModel):
    """Root configuration for Shelfcache."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="Log output format")

    cache: CacheManagerConfig = Field(default_factory=CacheManagerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    model_config = ConfigDict(validate_assignment=True)
