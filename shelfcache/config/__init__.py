"""
Shelfcache — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    CacheManagerConfig,
    CacheOptions,
    Environment,
    EvictionStrategy,
    LogFormat,
    LogLevel,
    ShelfcacheConfig,
    StoreBackend,
    StoreConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "ShelfcacheConfig",
    # Enums
    "Environment",
    "EvictionStrategy",
    "LogFormat",
    "LogLevel",
    "StoreBackend",
    # Config sections
    "CacheManagerConfig",
    "CacheOptions",
    "StoreConfig",
]
