"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services,
repositories and the cache layer. They are NOT used for API contracts -
use DTOs from the dto package for that.
"""

from .currency_exchange import CurrencyExchangeEntity
from .value_wrapper import ValueWrapper

__all__ = ["CurrencyExchangeEntity", "ValueWrapper"]
