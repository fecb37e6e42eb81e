"""Fail-open resilience layer for the cache.

The resilient manager decorates any CacheManager. Every cache it hands out
shares one CircuitState, so a fault seen through one cache name gates all
of them until the retry interval has passed.
"""

from .circuit_state import DEFAULT_RETRY_INTERVAL, CircuitState
from .resilient_cache import ResilientCache, ResilientCacheManager

__all__ = [
    "DEFAULT_RETRY_INTERVAL",
    "CircuitState",
    "ResilientCache",
    "ResilientCacheManager",
]
