"""Currency exchange domain entity."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CurrencyExchangeEntity:
    """Domain entity for a conversion rate between two currencies.

    Attributes:
        id: Primary key, None until persisted
        from_currency: Source currency code (e.g. "USD")
        to_currency: Target currency code (e.g. "INR")
        conversion_multiple: Amount of target currency per unit of source
        version: Optimistic locking marker, None until persisted
        environment: Port of the instance that served the entity (not persisted)
    """

    from_currency: str
    to_currency: str
    conversion_multiple: Decimal
    id: int | None = None
    version: int | None = None
    environment: str | None = None

    @property
    def exchange_key(self) -> str:
        """Composite cache key for this currency pair."""
        return f"{self.from_currency}_{self.to_currency}"
