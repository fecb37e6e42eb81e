"""Currency Exchange - exchange-rate CRUD service with a fail-open cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (Cache, CacheManager, ExchangeStore)
    - repositories: Data access implementations (Redis cache, SQLAlchemy store)
    - resilience: Circuit-breaking decorators that make any cache fail open
    - services: Business logic
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from currency_exchange.repositories import RedisCacheManager, SqlAlchemyExchangeRepository
    from currency_exchange.resilience import ResilientCacheManager
    from currency_exchange.services import ExchangeService

    service = ExchangeService.create(
        repository=SqlAlchemyExchangeRepository.create(),
        cache_manager=ResilientCacheManager.create(RedisCacheManager.create()),
    )
    ```

For HTTP API:
    ```python
    from currency_exchange.api.app import app
    ```
"""

from currency_exchange.config import get_redis_client, settings
from currency_exchange.dto import ExchangeRequest, ExchangeResponse, PatchExchangeRequest
from currency_exchange.entities import CurrencyExchangeEntity, ValueWrapper
from currency_exchange.exceptions import (
    CurrencyExchangeError,
    DuplicateExchangeError,
    OptimisticLockError,
    ValueRetrievalError,
)
from currency_exchange.handlers import ExchangeHandler
from currency_exchange.protocols import Cache, CacheManager, ExchangeStore
from currency_exchange.repositories import RedisCache, RedisCacheManager, SqlAlchemyExchangeRepository
from currency_exchange.resilience import CircuitState, ResilientCache, ResilientCacheManager
from currency_exchange.services import ExchangeService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "Cache",
    "CacheManager",
    "ExchangeStore",
    # Resilience
    "CircuitState",
    "ResilientCache",
    "ResilientCacheManager",
    # Services (business logic)
    "ExchangeService",
    # Handlers (HTTP)
    "ExchangeHandler",
    # Repositories (data access)
    "RedisCache",
    "RedisCacheManager",
    "SqlAlchemyExchangeRepository",
    # Entities (domain models)
    "CurrencyExchangeEntity",
    "ValueWrapper",
    # Errors
    "CurrencyExchangeError",
    "DuplicateExchangeError",
    "OptimisticLockError",
    "ValueRetrievalError",
    # DTOs (API contracts)
    "ExchangeRequest",
    "ExchangeResponse",
    "PatchExchangeRequest",
]
