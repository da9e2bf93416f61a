"""
Shelfcache — named TTL caches for the library tracker.
"""

__version__ = "1.0.0"
