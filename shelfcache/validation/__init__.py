"""
Shelfcache — Validation Module

Input validation for the MCP tool surface.
"""

from .decorators import validate_input
from .schemas import (
    CacheClearInput,
    CacheCreateInput,
    CacheDeleteInput,
    CacheGetInput,
    CacheSetInput,
    CacheStatsInput,
)

__all__ = [
    "validate_input",
    "CacheClearInput",
    "CacheCreateInput",
    "CacheDeleteInput",
    "CacheGetInput",
    "CacheSetInput",
    "CacheStatsInput",
]
