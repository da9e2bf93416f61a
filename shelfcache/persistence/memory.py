"""
Shelfcache — Memory Blob Store

Process-local durable store. Shared between manager instances to simulate
a restart in tests, and used as the default when no durable backend is
configured.
"""

import logging

from .interface import BlobStore

logger = logging.getLogger(__name__)


class MemoryBlobStore(BlobStore):
    """In-memory blob store backed by a dict."""

    def __init__(self, key_prefix: str = "cache_") -> None:
        super().__init__(key_prefix)
        self._blobs: dict[str, str] = {}

    async def put(self, name: str, blob: str) -> None:
        self._blobs[self._make_key(name)] = blob

    async def get(self, name: str) -> str | None:
        return self._blobs.get(self._make_key(name))

    async def remove(self, name: str) -> None:
        self._blobs.pop(self._make_key(name), None)

    def keys(self) -> list[str]:
        """List stored keys (prefixed)."""
        return list(self._blobs.keys())

    async def close(self) -> None:
        logger.debug("Memory blob store closed", extra={"blob_count": len(self._blobs)})
