"""
Shelfcache — Configuration Loader

Loads and validates configuration from environment variables and .env files.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import ShelfcacheConfig

logger = logging.getLogger(__name__)

_config_instance: ShelfcacheConfig | None = None


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> ShelfcacheConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated ShelfcacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    # Auto-detect store backend: Redis if REDIS_URL is set, else memory
    redis_url = os.getenv("REDIS_URL")
    store_backend = "redis" if redis_url else "memory"

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "json").lower(),
            "cache": {
                "default_ttl_seconds": float(os.getenv("CACHE_DEFAULT_TTL_SECONDS", "300")),
                "default_max_entries": int(os.getenv("CACHE_DEFAULT_MAX_ENTRIES", "100")),
                "default_strategy": os.getenv("CACHE_DEFAULT_STRATEGY", "lru").lower(),
                "default_persistent": _env_bool("CACHE_DEFAULT_PERSISTENT"),
                "sweep_interval_seconds": float(os.getenv("CACHE_SWEEP_INTERVAL_SECONDS", "60")),
                "eviction_ratio": float(os.getenv("CACHE_EVICTION_RATIO", "0.1")),
            },
            "store": {
                "backend": os.getenv("CACHE_STORE_BACKEND", store_backend).lower(),
                "key_prefix": os.getenv("CACHE_STORE_PREFIX", "cache_"),
                "path": os.getenv("CACHE_STORE_PATH", "./data/cache"),
                "redis_url": redis_url,
                "redis_socket_timeout": int(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            },
        }
    except ValueError as e:
        logger.error(f"Malformed numeric environment variable: {e}", exc_info=True)
        raise ConfigurationError(
            f"Malformed numeric environment variable: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = ShelfcacheConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment.value})",
            extra={
                "environment": _config_instance.environment.value,
                "store_backend": _config_instance.store.backend.value,
            },
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> ShelfcacheConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current ShelfcacheConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> ShelfcacheConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded ShelfcacheConfig instance
    """
    return load_config(env_file=env_file, reload=True)
