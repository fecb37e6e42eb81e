"""Currency exchange persistence protocol.

Defines the interface for the relational store holding exchange rates.
The database is the source of truth; the cache only mirrors it.
"""

from typing import Protocol, runtime_checkable

from currency_exchange.entities import CurrencyExchangeEntity


@runtime_checkable
class ExchangeStore(Protocol):
    """Protocol for exchange-rate repositories."""

    def find_by_from_and_to(self, from_currency: str, to_currency: str) -> CurrencyExchangeEntity | None:
        """Find the rate for a currency pair.

        Args:
            from_currency: Source currency code
            to_currency: Target currency code

        Returns:
            The entity if stored, None otherwise
        """
        ...

    def find_by_id(self, entity_id: int) -> CurrencyExchangeEntity | None:
        """Find a rate by primary key."""
        ...

    def save(self, entity: CurrencyExchangeEntity) -> CurrencyExchangeEntity:
        """Insert or update an entity.

        Args:
            entity: The entity to persist. When ``version`` is set it must
                match the stored version.

        Returns:
            The persisted entity with id and version populated

        Raises:
            OptimisticLockError: If the row changed since it was read
            DuplicateExchangeError: If the currency pair already exists
        """
        ...

    def delete_by_id(self, entity_id: int) -> bool:
        """Delete a row.

        Returns:
            True if deleted, False if no such row
        """
        ...

    def health_check(self) -> bool:
        """Check if the database is accessible."""
        ...
