"""
Shelfcache — Configuration Loader Tests
"""

from pathlib import Path

import pytest

from shelfcache.config import (
    CacheManagerConfig,
    EvictionStrategy,
    LogFormat,
    StoreBackend,
    load_config,
    reload_config,
)
from shelfcache.errors import ConfigurationError

_ENV_VARS = (
    "CACHE_DEFAULT_TTL_SECONDS",
    "CACHE_DEFAULT_MAX_ENTRIES",
    "CACHE_DEFAULT_STRATEGY",
    "CACHE_DEFAULT_PERSISTENT",
    "CACHE_SWEEP_INTERVAL_SECONDS",
    "CACHE_EVICTION_RATIO",
    "CACHE_STORE_BACKEND",
    "CACHE_STORE_PATH",
    "CACHE_STORE_PREFIX",
    "REDIS_URL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate each test from the caller's environment and any .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = reload_config()

        assert config.cache.default_ttl_seconds == 300
        assert config.cache.default_max_entries == 100
        assert config.cache.default_strategy == EvictionStrategy.LRU
        assert config.cache.default_persistent is False
        assert config.cache.sweep_interval_seconds == 60
        assert config.store.backend == StoreBackend.MEMORY
        assert config.store.key_prefix == "cache_"
        assert config.log_format == LogFormat.JSON

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_DEFAULT_TTL_SECONDS", "30")
        monkeypatch.setenv("CACHE_DEFAULT_MAX_ENTRIES", "10")
        monkeypatch.setenv("CACHE_DEFAULT_STRATEGY", "FIFO")
        monkeypatch.setenv("CACHE_DEFAULT_PERSISTENT", "true")
        monkeypatch.setenv("CACHE_STORE_BACKEND", "file")
        monkeypatch.setenv("CACHE_STORE_PATH", "/tmp/shelf")

        config = reload_config()

        assert config.cache.default_ttl_seconds == 30
        assert config.cache.default_max_entries == 10
        assert config.cache.default_strategy == EvictionStrategy.FIFO
        assert config.cache.default_persistent is True
        assert config.store.backend == StoreBackend.FILE
        assert config.store.path == "/tmp/shelf"

    def test_redis_auto_detected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

        config = reload_config()

        assert config.store.backend == StoreBackend.REDIS
        assert config.store.redis_url == "redis://localhost:6379/0"

    def test_redis_backend_without_url_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_STORE_BACKEND", "redis")

        with pytest.raises(ConfigurationError):
            reload_config()

    def test_invalid_value_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_DEFAULT_MAX_ENTRIES", "0")

        with pytest.raises(ConfigurationError) as exc_info:
            reload_config()

        assert "validation_errors" in exc_info.value.details

    def test_malformed_number_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_DEFAULT_TTL_SECONDS", "five minutes")

        with pytest.raises(ConfigurationError):
            reload_config()

    def test_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / "custom.env"
        env_file.write_text("CACHE_DEFAULT_MAX_ENTRIES=42\n")
        # Registered with monkeypatch so the value written by the .env file is undone
        monkeypatch.setenv("CACHE_DEFAULT_MAX_ENTRIES", "7")

        config = load_config(env_file=str(env_file), reload=True)

        assert config.cache.default_max_entries == 42

    def test_cached_instance(self) -> None:
        first = reload_config()
        assert load_config() is first


class TestCacheManagerConfig:
    def test_default_options(self) -> None:
        config = CacheManagerConfig(default_ttl_seconds=12, default_strategy=EvictionStrategy.LFU)

        options = config.default_options()

        assert options.ttl_seconds == 12
        assert options.strategy == EvictionStrategy.LFU
        assert options.max_entries == 100
