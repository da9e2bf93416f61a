"""
Shelfcache — Cache Tool Tests

Tool bodies called directly, including input validation failures.
"""

import pytest

from shelfcache import tools
from shelfcache.cache import CacheManager


class TestCacheTools:
    @pytest.mark.asyncio
    async def test_set_then_get(self, manager: CacheManager) -> None:
        result = await tools.cache_set(manager, cache_name="books", key="isbn:1", value={"title": "Emma"})
        assert result == {"success": True}

        result = await tools.cache_get(manager, cache_name="books", key="isbn:1")
        assert result == {"success": True, "found": True, "value": {"title": "Emma"}}

    @pytest.mark.asyncio
    async def test_get_miss(self, manager: CacheManager) -> None:
        result = await tools.cache_get(manager, cache_name="books", key="missing")

        assert result == {"success": True, "found": False, "value": None}

    @pytest.mark.asyncio
    async def test_get_records_hits_and_misses(self, manager: CacheManager) -> None:
        await tools.cache_set(manager, cache_name="books", key="a", value=1)
        for _ in range(3):
            await tools.cache_get(manager, cache_name="books", key="a")
        for _ in range(2):
            await tools.cache_get(manager, cache_name="books", key="missing")

        stats = manager.get_stats("books")

        assert stats["hits"] == 3
        assert stats["misses"] == 2
        assert stats["hit_rate"] == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_get_stored_none_is_found(self, manager: CacheManager) -> None:
        await tools.cache_set(manager, cache_name="books", key="k", value=None)

        result = await tools.cache_get(manager, cache_name="books", key="k")

        assert result == {"success": True, "found": True, "value": None}
        assert manager.get_stats("books")["hits"] == 1

    @pytest.mark.asyncio
    async def test_delete(self, manager: CacheManager) -> None:
        await tools.cache_set(manager, cache_name="books", key="k", value=1)

        assert (await tools.cache_delete(manager, cache_name="books", key="k"))["deleted"] is True
        assert (await tools.cache_delete(manager, cache_name="books", key="k"))["deleted"] is False

    @pytest.mark.asyncio
    async def test_clear(self, manager: CacheManager) -> None:
        await tools.cache_set(manager, cache_name="books", key="k", value=1)

        assert await tools.cache_clear(manager, cache_name="books") == {"success": True}
        assert (await tools.cache_get(manager, cache_name="books", key="k"))["found"] is False

    @pytest.mark.asyncio
    async def test_create(self, manager: CacheManager) -> None:
        result = await tools.cache_create(manager, cache_name="stats", max_entries=5, strategy="lfu")

        assert result["success"] is True
        assert result["config"]["max_entries"] == 5
        assert result["config"]["strategy"] == "lfu"
        assert result["config"]["ttl_seconds"] == 300

    @pytest.mark.asyncio
    async def test_stats(self, manager: CacheManager) -> None:
        await tools.cache_set(manager, cache_name="books", key="k", value=1)

        single = await tools.cache_stats(manager, cache_name="books")
        assert single["stats"]["size"] == 1

        everything = await tools.cache_stats(manager)
        assert set(everything["stats"]) == {"books"}

    @pytest.mark.asyncio
    async def test_stats_unknown_cache(self, manager: CacheManager) -> None:
        result = await tools.cache_stats(manager, cache_name="nope")

        assert result["success"] is False
        assert result["error_code"] == "CACHE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_invalid_input(self, manager: CacheManager) -> None:
        result = await tools.cache_get(manager, cache_name="books", key="")

        assert result["success"] is False
        assert result["error_code"] == "INVALID_INPUT"
        assert result["details"]["validation_errors"][0]["field"] == "key"

    @pytest.mark.asyncio
    async def test_invalid_ttl(self, manager: CacheManager) -> None:
        result = await tools.cache_set(manager, cache_name="books", key="k", value=1, ttl=-5)

        assert result["error_code"] == "INVALID_INPUT"
        assert manager.list_caches() == []

    @pytest.mark.asyncio
    async def test_invalid_strategy(self, manager: CacheManager) -> None:
        result = await tools.cache_create(manager, cache_name="stats", strategy="random")

        assert result["error_code"] == "INVALID_INPUT"
