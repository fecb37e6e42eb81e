"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis cache -> resilient Redis cache, SQLite -> PostgreSQL)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from currency_exchange.protocols import CacheManager

    manager: CacheManager = RedisCacheManager.create()
    manager: CacheManager = ResilientCacheManager.create(manager)  # also works
    ```
"""

from .cache import Cache, CacheManager
from .exchange_store import ExchangeStore

__all__ = [
    "Cache",
    "CacheManager",
    "ExchangeStore",
]
