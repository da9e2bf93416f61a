"""
Shelfcache — Durable Store Factory

Builds the durable blob store selected by configuration:
- memory (default): process-local, lost on exit
- file: one JSON file per cache under CACHE_STORE_PATH
- redis: selected automatically when REDIS_URL is set; redis is imported lazily
"""

from __future__ import annotations

import logging

from ..config import StoreBackend, StoreConfig, get_config
from ..errors import ConfigurationError
from .file import FileBlobStore
from .interface import BlobStore
from .memory import MemoryBlobStore

logger = logging.getLogger(__name__)


def _create_redis_store(config: StoreConfig) -> BlobStore:
    """Internal helper to construct a redis blob store with lazy import."""
    if not config.redis_url:
        raise ConfigurationError(
            "REDIS_URL must be set when CACHE_STORE_BACKEND=redis",
            details={"env": "REDIS_URL", "backend": "redis"},
        )

    # Lazy import to avoid hard dependency when another store is used
    try:
        from .redis import RedisBlobStore
    except ImportError as e:
        logger.error(
            "Redis store selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis store selected but redis client is unavailable. Install with: pip install 'redis>=5.0.0'.",
            details={"package": "redis>=5.0.0", "error": str(e), "backend": "redis"},
        ) from e

    return RedisBlobStore(
        redis_url=config.redis_url,
        key_prefix=config.key_prefix,
        socket_timeout=config.redis_socket_timeout,
    )


def create_blob_store(config: StoreConfig | None = None) -> BlobStore:
    """
    Create a durable blob store based on configuration.

    Args:
        config: Store configuration (uses global config if not provided)

    Returns:
        Configured BlobStore instance

    Raises:
        ConfigurationError: If the backend is unknown or unavailable
    """
    if config is None:
        config = get_config().store

    logger.info(
        "Creating durable store with backend: %s",
        config.backend.value,
        extra={"backend": config.backend.value, "key_prefix": config.key_prefix},
    )

    if config.backend == StoreBackend.MEMORY:
        return MemoryBlobStore(key_prefix=config.key_prefix)
    if config.backend == StoreBackend.FILE:
        return FileBlobStore(path=config.path, key_prefix=config.key_prefix)
    if config.backend == StoreBackend.REDIS:
        return _create_redis_store(config)

    raise ConfigurationError(
        f"Unknown store backend: {config.backend}",
        details={"backend": str(config.backend), "supported": [b.value for b in StoreBackend]},
    )
