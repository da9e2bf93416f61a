"""
Shelfcache — Redis Blob Store

Asynchronous Redis durable store. Each cache snapshot is one string value
under ``<key_prefix><cache name>``; no TTL is applied because entry expiry
is handled by the cache manager on restore.

Requires: redis>=5.0 with asyncio support

Example:
    store = RedisBlobStore(redis_url="redis://localhost:6379/0")
    await store.put("books", blob)
    blob = await store.get("books")
"""

from __future__ import annotations

import logging

from ..errors import PersistenceError, StoreConnectionError
from .interface import BlobStore

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4+)
    from redis.asyncio import Redis
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import RedisError
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisBlobStore(BlobStore):
    """Redis blob store."""

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "cache_",
        socket_timeout: int = 5,
    ) -> None:
        """
        Initialize Redis blob store.

        Args:
            redis_url: Connection URL, e.g., redis://localhost:6379/0 or rediss:// for TLS
            key_prefix: Prefix for all keys
            socket_timeout: Socket timeout in seconds
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        super().__init__(key_prefix)

        # Lazy connection; connects on first command
        self._client = Redis.from_url(  # type: ignore[call-overload]
            url=redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
        )

    async def put(self, name: str, blob: str) -> None:
        try:
            await self._client.set(self._make_key(name), blob)
        except RedisConnectionError as e:
            raise StoreConnectionError("redis", {"cache_name": name, "error": str(e)}) from e
        except RedisError as e:
            raise PersistenceError(
                f"Failed to write blob for cache '{name}': {e}",
                details={"cache_name": name, "error": str(e)},
            ) from e

    async def get(self, name: str) -> str | None:
        try:
            return await self._client.get(self._make_key(name))
        except RedisConnectionError as e:
            raise StoreConnectionError("redis", {"cache_name": name, "error": str(e)}) from e
        except RedisError as e:
            raise PersistenceError(
                f"Failed to read blob for cache '{name}': {e}",
                details={"cache_name": name, "error": str(e)},
            ) from e

    async def remove(self, name: str) -> None:
        try:
            await self._client.delete(self._make_key(name))
        except RedisConnectionError as e:
            raise StoreConnectionError("redis", {"cache_name": name, "error": str(e)}) from e
        except RedisError as e:
            raise PersistenceError(
                f"Failed to remove blob for cache '{name}': {e}",
                details={"cache_name": name, "error": str(e)},
            ) from e

    async def close(self) -> None:
        try:
            await self._client.aclose()
            logger.debug("Redis blob store closed")
        except Exception as e:
            logger.error(
                f"Error closing Redis client: {e}",
                extra={"error": str(e)},
                exc_info=True,
            )
