"""
Shelfcache — Durable Store Interface

Defines the abstract interface that all durable blob stores must implement.
A store holds one opaque string blob per cache name.
"""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """
    Abstract base class for durable blob stores.

    The cache manager only ever calls ``put``, ``get`` and ``remove``.
    Implementations raise PersistenceError on failure; the manager
    catches and logs those errors.
    """

    def __init__(self, key_prefix: str = "cache_") -> None:
        self.key_prefix = key_prefix

    def _make_key(self, name: str) -> str:
        """Create the prefixed storage key for a cache name."""
        return f"{self.key_prefix}{name}"

    @abstractmethod
    async def put(self, name: str, blob: str) -> None:
        """
        Store a blob, replacing any existing one.

        Args:
            name: Cache name
            blob: Serialized cache snapshot
        """

    @abstractmethod
    async def get(self, name: str) -> str | None:
        """
        Retrieve a blob.

        Args:
            name: Cache name

        Returns:
            The stored blob, or None if nothing is stored under that name
        """

    @abstractmethod
    async def remove(self, name: str) -> None:
        """
        Delete a blob. Removing a missing blob is a no-op.

        Args:
            name: Cache name
        """

    async def close(self) -> None:
        """Release store resources. Should be called during graceful shutdown."""
        return None
