"""
Shelfcache — Observability Module

Structured JSON logging for the runtime.

Usage:
    from shelfcache.observability import setup_logging

    setup_logging(level="DEBUG", fmt="json")
"""

from .structured_logging import JSONFormatter, setup_logging

__all__ = [
    "JSONFormatter",
    "setup_logging",
]
