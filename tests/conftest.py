"""
Shelfcache — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio

from shelfcache.cache import CacheManager
from shelfcache.config import CacheManagerConfig
from shelfcache.persistence import MemoryBlobStore

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingStore(MemoryBlobStore):
    """Blob store whose every operation raises."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    async def put(self, name: str, blob: str) -> None:
        self.calls += 1
        raise OSError("quota exceeded")

    async def get(self, name: str) -> str | None:
        self.calls += 1
        raise OSError("store unavailable")

    async def remove(self, name: str) -> None:
        self.calls += 1
        raise OSError("store unavailable")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def manager_config() -> CacheManagerConfig:
    return CacheManagerConfig(default_ttl_seconds=300, default_max_entries=100, sweep_interval_seconds=60)


@pytest_asyncio.fixture
async def manager(
    manager_config: CacheManagerConfig,
    memory_store: MemoryBlobStore,
    clock: FakeClock,
) -> AsyncGenerator[CacheManager, None]:
    """A cache manager on a fake clock, destroyed after the test."""
    cache_manager = CacheManager(config=manager_config, store=memory_store, clock=clock)
    yield cache_manager
    await cache_manager.destroy()


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample values a reading tracker would cache."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "simple_none": None,
        "book": {"title": "Middlemarch", "author": "George Eliot", "pages": 880},
        "shelf": [
            {"id": 1, "title": "Emma"},
            {"id": 2, "title": "Persuasion"},
        ],
    }


@pytest.fixture
def temp_cache_dir(tmp_path: Any) -> str:
    """Create a temporary directory for file store testing."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return str(cache_dir)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest_asyncio.fixture
async def make_manager(clock: FakeClock) -> AsyncGenerator[Any, None]:
    """Factory for extra managers on the shared fake clock; all are destroyed after the test."""
    created: list[CacheManager] = []

    def _make(store: Any = None, **config: Any) -> CacheManager:
        cache_manager = CacheManager(config=CacheManagerConfig(**config), store=store, clock=clock)
        created.append(cache_manager)
        return cache_manager

    yield _make

    for cache_manager in created:
        await cache_manager.destroy()
