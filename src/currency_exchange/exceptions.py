"""Exception types raised by the currency exchange service.

Store-side cache faults never surface from the resilient cache layer, so
there is no exception type for them here. What remains are the failures a
caller has to handle: a read-through whose fallback loader failed, and the
conflicts reported by the persistence layer.
"""

from collections.abc import Callable
from typing import Any


class CurrencyExchangeError(Exception):
    """Base class for all service errors."""


class ValueRetrievalError(CurrencyExchangeError):
    """Raised when a value loader fails and there is nothing left to return.

    The loader's own exception is chained as ``__cause__``.

    Attributes:
        key: The cache key that was being resolved
        loader: The loader callable that failed
    """

    def __init__(self, key: str, loader: Callable[[], Any], cause: BaseException) -> None:
        self.key = key
        self.loader = loader
        super().__init__(f"Value for key '{key}' could not be loaded using '{loader!r}': {cause}")
        self.__cause__ = cause


class OptimisticLockError(CurrencyExchangeError):
    """Raised when a row was modified by another request since it was read."""

    def __init__(self, entity_id: int | None, message: str | None = None) -> None:
        self.entity_id = entity_id
        super().__init__(message or f"CurrencyExchange {entity_id} was modified concurrently")


class DuplicateExchangeError(CurrencyExchangeError):
    """Raised when a from/to currency pair is already stored."""

    def __init__(self, from_currency: str, to_currency: str) -> None:
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(f"CurrencyExchange {from_currency} -> {to_currency} already exists")
