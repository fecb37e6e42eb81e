"""Exchange service for core business logic.

This service coordinates the repository (source of truth) and the exchange
value cache. Caching is explicit: reads go through ``get_or_load``, writes
``put`` after the row is saved and deletes ``evict`` after the row is gone.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any

from currency_exchange.entities import CurrencyExchangeEntity
from currency_exchange.protocols import Cache, CacheManager, ExchangeStore
from currency_exchange.resilience import ResilientCacheManager

logger = logging.getLogger(__name__)

CACHE_NAME = "exchangeValue"


def exchange_key(from_currency: str, to_currency: str) -> str:
    """Build the cache key for a currency pair."""
    return f"{from_currency}_{to_currency}"


class ExchangeService:
    """Exchange-rate CRUD with a write-through cache.

    This service depends on PROTOCOLS, not concrete implementations:
    - ExchangeStore: SQLite, PostgreSQL, or any SQLAlchemy database
    - CacheManager: plain Redis, resilient Redis, or nothing at all

    Cached values are JSON-compatible dicts.

    Example:
        ```python
        from currency_exchange.repositories import RedisCacheManager, SqlAlchemyExchangeRepository
        from currency_exchange.resilience import ResilientCacheManager
        from currency_exchange.services import ExchangeService

        service = ExchangeService.create(
            repository=SqlAlchemyExchangeRepository.create(),
            cache_manager=ResilientCacheManager.create(RedisCacheManager.create()),
        )
        service.retrieve_exchange_value("USD", "INR")
        ```
    """

    def __init__(
        self,
        repository: ExchangeStore,
        cache_manager: CacheManager | None = None,
    ) -> None:
        """Initialize the exchange service.

        Args:
            repository: Exchange-rate store (required).
            cache_manager: Source of the exchange value cache. None disables caching.
        """
        self._repository = repository
        self._cache_manager = cache_manager

    @classmethod
    def create(
        cls,
        repository: ExchangeStore,
        cache_manager: CacheManager | None = None,
    ) -> "ExchangeService":
        """Factory method to create ExchangeService.

        Args:
            repository: Exchange-rate store (required).
            cache_manager: Cache manager. If None, caching is disabled.

        Returns:
            Configured ExchangeService instance
        """
        return cls(repository=repository, cache_manager=cache_manager)

    def _cache(self) -> Cache | None:
        if self._cache_manager is None:
            return None
        return self._cache_manager.get_cache(CACHE_NAME)

    @staticmethod
    def _to_cache_value(entity: CurrencyExchangeEntity | None) -> dict[str, Any] | None:
        if entity is None:
            return None
        return {
            "id": entity.id,
            "from": entity.from_currency,
            "to": entity.to_currency,
            "conversionMultiple": str(entity.conversion_multiple),
            "version": entity.version,
        }

    @staticmethod
    def _from_cache_value(value: dict[str, Any] | None) -> CurrencyExchangeEntity | None:
        if value is None:
            return None
        return CurrencyExchangeEntity(
            id=value["id"],
            from_currency=value["from"],
            to_currency=value["to"],
            conversion_multiple=Decimal(value["conversionMultiple"]),
            version=value["version"],
        )

    def retrieve_exchange_value(self, from_currency: str, to_currency: str) -> CurrencyExchangeEntity | None:
        """Look up the rate for a currency pair, read-through the cache.

        A missing row is cached too, as None, until a create or update
        overwrites the key.

        Args:
            from_currency: Source currency code
            to_currency: Target currency code

        Returns:
            The entity, or None if the pair is unknown

        Raises:
            ValueRetrievalError: If the cache is bypassed and the database read fails
        """

        def load() -> dict[str, Any] | None:
            return self._to_cache_value(self._repository.find_by_from_and_to(from_currency, to_currency))

        cache = self._cache()
        if cache is None:
            return self._from_cache_value(load())
        return self._from_cache_value(cache.get_or_load(exchange_key(from_currency, to_currency), load))

    def create_exchange(self, entity: CurrencyExchangeEntity) -> CurrencyExchangeEntity:
        """Persist a new rate and write it to the cache.

        Raises:
            DuplicateExchangeError: If the pair already exists
        """
        saved = self._repository.save(entity)
        self._write_through(saved)
        return saved

    def update_exchange(self, entity_id: int, entity: CurrencyExchangeEntity) -> CurrencyExchangeEntity | None:
        """Replace the rate stored under ``entity_id``.

        The incoming entity's version, when set, must match the stored one.

        Returns:
            The updated entity, or None if there is no such row

        Raises:
            OptimisticLockError: If the row changed since the caller read it
        """
        existing = self._repository.find_by_id(entity_id)
        if existing is None:
            return None

        saved = self._repository.save(replace(entity, id=entity_id))
        self._refresh_cache(existing, saved)
        return saved

    def patch_exchange(
        self,
        entity_id: int,
        from_currency: str | None = None,
        to_currency: str | None = None,
        conversion_multiple: Decimal | None = None,
    ) -> CurrencyExchangeEntity | None:
        """Change only the given fields of the rate stored under ``entity_id``.

        Returns:
            The patched entity, or None if there is no such row

        Raises:
            OptimisticLockError: If another request updated the row in between
        """
        existing = self._repository.find_by_id(entity_id)
        if existing is None:
            return None

        changes: dict[str, Any] = {}
        if from_currency is not None:
            changes["from_currency"] = from_currency
        if to_currency is not None:
            changes["to_currency"] = to_currency
        if conversion_multiple is not None:
            changes["conversion_multiple"] = conversion_multiple

        saved = self._repository.save(replace(existing, **changes))
        self._refresh_cache(existing, saved)
        return saved

    def delete_exchange(self, from_currency: str, to_currency: str) -> bool:
        """Delete the rate for a currency pair and evict its cache entry.

        The key is evicted whether or not a row existed.

        Returns:
            True if a row was deleted
        """
        existing = self._repository.find_by_from_and_to(from_currency, to_currency)
        deleted = existing is not None and self._repository.delete_by_id(existing.id)

        cache = self._cache()
        if cache is not None:
            cache.evict(exchange_key(from_currency, to_currency))
        return deleted

    def _write_through(self, entity: CurrencyExchangeEntity) -> None:
        cache = self._cache()
        if cache is not None:
            cache.put(entity.exchange_key, self._to_cache_value(entity))

    def _refresh_cache(self, previous: CurrencyExchangeEntity, saved: CurrencyExchangeEntity) -> None:
        cache = self._cache()
        if cache is None:
            return
        if previous.exchange_key != saved.exchange_key:
            logger.debug("Currency pair changed %s -> %s", previous.exchange_key, saved.exchange_key)
            cache.evict(previous.exchange_key)
        cache.put(saved.exchange_key, self._to_cache_value(saved))

    def is_healthy(self) -> bool:
        """Check if the database is reachable.

        The cache is optional, so its state does not count.
        """
        return self._repository.health_check()

    @property
    def cache_status(self) -> str:
        """Cache circuit state: "open", "closed", or "disabled" without a cache."""
        if self._cache_manager is None:
            return "disabled"
        if isinstance(self._cache_manager, ResilientCacheManager):
            return self._cache_manager.circuit.status
        return "closed"

    @property
    def repository(self) -> ExchangeStore:
        """Get the underlying repository (for testing)."""
        return self._repository

    @property
    def cache_manager(self) -> CacheManager | None:
        """Get the underlying cache manager (for testing)."""
        return self._cache_manager
