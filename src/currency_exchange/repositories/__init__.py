"""Repository layer for data access.

This layer binds the protocols to concrete backends:
- Redis for the cache (RedisCacheManager, RedisCache)
- SQLAlchemy for the relational store (SqlAlchemyExchangeRepository)

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from currency_exchange.protocols import Cache, CacheManager, ExchangeStore

from .exchange_repository import SqlAlchemyExchangeRepository
from .redis_cache import RedisCache, RedisCacheManager

__all__ = [
    "Cache",
    "CacheManager",
    "ExchangeStore",
    "RedisCache",
    "RedisCacheManager",
    "SqlAlchemyExchangeRepository",
]
