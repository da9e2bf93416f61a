"""
Shelfcache — Core Error Types

Defines the exception hierarchy for the cache manager runtime.
All exceptions inherit from ShelfcacheError for consistent error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for tool responses.

    Used for structured error handling and client-side error recovery.
    """

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_PARAMETER_VALUE = "INVALID_PARAMETER_VALUE"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Cache errors
    CACHE_FAILURE = "CACHE_FAILURE"
    CACHE_MISS = "CACHE_MISS"
    CACHE_NOT_FOUND = "CACHE_NOT_FOUND"

    # Persistence errors
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ShelfcacheError(Exception):
    """Base exception for all Shelfcache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ShelfcacheError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class CacheError(ShelfcacheError):
    """Base exception for cache-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class CacheNotFoundError(CacheError):
    """Raised when a named cache is required but not registered."""

    def __init__(self, name: str):
        super().__init__(
            f"Cache not found: {name}",
            {"cache_name": name, "error_code": ErrorCode.CACHE_NOT_FOUND},
        )
        self.status_code = 404


class PersistenceError(ShelfcacheError):
    """Raised by durable stores when a read, write or remove fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=503)


class StoreConnectionError(PersistenceError):
    """Raised when the durable store backend cannot be reached."""

    def __init__(self, backend: str, details: dict[str, Any] | None = None):
        message = f"Failed to connect to durable store: {backend}"
        merged = {"backend": backend, "error_code": ErrorCode.STORE_UNAVAILABLE}
        merged.update(details or {})
        super().__init__(message, merged)


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response for MCP tools.

    Args:
        error_code: Standard error code
        message: Human-readable error message
        context: Additional context/details

    Returns:
        Standardized error response dictionary

    Example:
        >>> make_error_response(ErrorCode.CACHE_NOT_FOUND, "Cache not found: books", {"cache_name": "books"})
        {'success': False, 'error_code': 'CACHE_NOT_FOUND', 'message': 'Cache not found: books', 'details': {'cache_name': 'books'}}
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }
