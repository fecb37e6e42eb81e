"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository / Cache
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from currency_exchange.services import ExchangeService

    service = ExchangeService.create(repository=repo, cache_manager=manager)

    # Or without a cache
    service = ExchangeService(repository=repo)
    ```
"""

from .exchange_service import CACHE_NAME, ExchangeService, exchange_key

__all__ = [
    "CACHE_NAME",
    "ExchangeService",
    "exchange_key",
]
