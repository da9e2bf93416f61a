"""
Shelfcache — Persistence Module

Durable blob stores used for write-through cache persistence.

- interface.py: BlobStore contract (put / get / remove)
- memory.py, file.py: always available
- redis.py: lazy-loaded via factory.py

Usage:
    from shelfcache.persistence import create_blob_store

    store = create_blob_store()
    await store.put("books", blob)
"""

from .factory import create_blob_store
from .file import FileBlobStore
from .interface import BlobStore
from .memory import MemoryBlobStore

__all__ = [
    "BlobStore",
    "FileBlobStore",
    "MemoryBlobStore",
    "create_blob_store",
]
