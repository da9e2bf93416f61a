"""
Shelfcache — Cache State

Entry and per-cache state objects. A ``Cache`` owns its entries, the recency
and frequency tracking used by eviction policies, size accounting and
counters. It performs no I/O and knows nothing about eviction policy or
persistence; the manager drives it.

Snapshot format (one JSON blob per cache):

    {
        "items": {key: {"value", "expiresAt", "createdAt", "accessCount", "size"}},
        "accessOrder": [key, ...],          # least recently used first
        "accessCount": [[key, count], ...], # tracking-insertion order
        "hits": int,
        "misses": int,
        "savedAt": float,                   # epoch seconds
    }
"""

from __future__ import annotations

import json
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any

from ..config.schemas import CacheOptions

logger = logging.getLogger(__name__)


def estimate_size(value: Any) -> int:
    """
    Estimate the size of a value in bytes from its compact JSON encoding.

    Values that cannot be JSON-encoded fall back to a rough estimate of two
    bytes per character of their ``str()`` form.
    """
    try:
        return len(json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8"))
    except (TypeError, ValueError):
        return len(str(value)) * 2


@dataclass
class CacheEntry:
    """A single cached value and its metadata."""

    value: Any
    expires_at: float
    created_at: float
    access_count: int = 0
    size: int = 0

    def is_expired(self, now: float) -> bool:
        """An entry is expired from its ``expires_at`` instant onwards."""
        return now >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "expiresAt": self.expires_at,
            "createdAt": self.created_at,
            "accessCount": self.access_count,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        return cls(
            value=data.get("value"),
            expires_at=float(data["expiresAt"]),
            created_at=float(data.get("createdAt", 0.0)),
            access_count=int(data.get("accessCount", 0)),
            size=int(data.get("size", 0)),
        )


class Cache:
    """
    State of one named cache.

    Invariants maintained by every mutator:
    - ``total_size`` is the sum of ``size`` over ``entries``
    - every key in ``entries`` has a slot in ``access_order`` and ``access_count``
    - tracking for removed keys is dropped immediately
    """

    def __init__(self, name: str, options: CacheOptions, created_at: float) -> None:
        self.name = name
        self.options = options
        self.created_at = created_at

        # Insertion-ordered; FIFO victims come from the front
        self.entries: dict[str, CacheEntry] = {}
        # Recency order, most recently used at the end
        self.access_order: OrderedDict[str, None] = OrderedDict()
        # Use counts; dict order is the order keys were first tracked
        self.access_count: dict[str, int] = {}

        self.total_size = 0

        # Stats
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.deletes = 0
        self.evictions = 0
        self.expirations = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def touch(self, key: str) -> None:
        """Mark ``key`` as most recently used and bump its use count."""
        self.access_order.pop(key, None)
        self.access_order[key] = None
        self.access_count[key] = self.access_count.get(key, 0) + 1

    def insert(self, key: str, entry: CacheEntry) -> None:
        """Insert or replace an entry, keeping size accounting in step."""
        old = self.entries.get(key)
        if old is not None:
            self.total_size -= old.size
        self.entries[key] = entry
        self.total_size += entry.size
        self.touch(key)

    def remove(self, key: str) -> CacheEntry | None:
        """Remove an entry and its tracking. Returns the removed entry, if any."""
        self.access_order.pop(key, None)
        self.access_count.pop(key, None)
        entry = self.entries.pop(key, None)
        if entry is not None:
            self.total_size -= entry.size
        return entry

    def expired_keys(self, now: float) -> list[str]:
        return [key for key, entry in self.entries.items() if entry.is_expired(now)]

    def reset(self) -> None:
        """Drop all entries, tracking and counters."""
        self.entries.clear()
        self.access_order.clear()
        self.access_count.clear()
        self.total_size = 0
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.deletes = 0
        self.evictions = 0
        self.expirations = 0

    def to_snapshot(self, now: float) -> dict[str, Any]:
        """Serialize the full cache state into a JSON-ready dict."""
        return {
            "items": {key: entry.to_dict() for key, entry in self.entries.items()},
            "accessOrder": list(self.access_order),
            "accessCount": [[key, count] for key, count in self.access_count.items()],
            "hits": self.hits,
            "misses": self.misses,
            "savedAt": now,
        }

    def restore(self, snapshot: dict[str, Any], now: float) -> int:
        """
        Replace in-memory state with the unexpired part of a snapshot.

        The snapshot is fully parsed before any state is touched, so a
        malformed snapshot raises and leaves the cache unchanged.

        Returns:
            Number of entries restored
        """
        entries: dict[str, CacheEntry] = {}
        for key, raw in (snapshot.get("items") or {}).items():
            entry = CacheEntry.from_dict(raw)
            if not entry.is_expired(now):
                entries[key] = entry

        access_order: OrderedDict[str, None] = OrderedDict(
            (key, None) for key in snapshot.get("accessOrder") or [] if key in entries
        )
        for key in entries:
            if key not in access_order:
                access_order[key] = None
                access_order.move_to_end(key, last=False)

        access_count = {key: int(count) for key, count in snapshot.get("accessCount") or [] if key in entries}
        for key in entries:
            access_count.setdefault(key, 0)

        hits = int(snapshot.get("hits", 0))
        misses = int(snapshot.get("misses", 0))

        self.entries = entries
        self.access_order = access_order
        self.access_count = access_count
        self.total_size = sum(entry.size for entry in entries.values())
        self.hits = hits
        self.misses = misses

        dropped = len(snapshot.get("items") or {}) - len(entries)
        if dropped:
            logger.debug(
                f"Dropped {dropped} expired entries while restoring cache '{self.name}'",
                extra={"cache_name": self.name, "dropped": dropped},
            )
        return len(entries)
