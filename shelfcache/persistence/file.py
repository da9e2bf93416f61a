"""
Shelfcache — File Blob Store

Stores each cache snapshot as one JSON file in a directory. File names are the
URL-quoted storage key, so any cache name maps to a single flat file.
Writes go to a temporary file first and are swapped in with ``os.replace``.
Blocking file I/O runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from urllib.parse import quote

from ..errors import PersistenceError
from .interface import BlobStore

logger = logging.getLogger(__name__)


class FileBlobStore(BlobStore):
    """Directory-backed blob store."""

    def __init__(self, path: str | Path, key_prefix: str = "cache_") -> None:
        super().__init__(key_prefix)
        self.path = Path(path)

    def _file_for(self, name: str) -> Path:
        return self.path / f"{quote(self._make_key(name), safe='')}.json"

    def _write(self, target: Path, blob: str) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f"{target.name}.tmp")
        tmp.write_text(blob, encoding="utf-8")
        os.replace(tmp, target)

    async def put(self, name: str, blob: str) -> None:
        target = self._file_for(name)
        try:
            await asyncio.to_thread(self._write, target, blob)
        except OSError as e:
            raise PersistenceError(
                f"Failed to write blob for cache '{name}': {e}",
                details={"cache_name": name, "path": str(target), "error": str(e)},
            ) from e

    async def get(self, name: str) -> str | None:
        target = self._file_for(name)
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(
                f"Failed to read blob for cache '{name}': {e}",
                details={"cache_name": name, "path": str(target), "error": str(e)},
            ) from e

    async def remove(self, name: str) -> None:
        target = self._file_for(name)
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Failed to remove blob for cache '{name}': {e}",
                details={"cache_name": name, "path": str(target), "error": str(e)},
            ) from e
        logger.debug("Removed blob file", extra={"cache_name": name, "path": str(target)})
