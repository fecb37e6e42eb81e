"""Cache capability protocols.

Defines the key-value cache surface the service layer talks to. Two kinds
of implementation satisfy it:
- A passthrough binding straight onto a cache backend (Redis by default)
- The resilient decorator, which wraps any other implementation and
  fails open when the backend is unreachable
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from currency_exchange.entities import ValueWrapper

T = TypeVar("T")


@runtime_checkable
class Cache(Protocol):
    """Protocol for a single named cache.

    Any method may raise when the backend is unavailable, unless the
    implementation documents otherwise.
    """

    @property
    def name(self) -> str:
        """Return the cache name."""
        ...

    @property
    def native_cache(self) -> Any:
        """Return the underlying native cache handle."""
        ...

    def get(self, key: str) -> ValueWrapper | None:
        """Look up a key.

        Args:
            key: The key to look up

        Returns:
            A ValueWrapper (whose value may be None) if present, None on a miss
        """
        ...

    def get_typed(self, key: str, value_type: type[T]) -> T | None:
        """Look up a key and check the type of the cached value.

        Args:
            key: The key to look up
            value_type: Expected type of the value

        Returns:
            The cached value, or None if absent

        Raises:
            TypeError: If the cached value is not a ``value_type``
        """
        ...

    def get_or_load(self, key: str, loader: Callable[[], T]) -> T:
        """Return the cached value, computing it with ``loader`` on a miss.

        Args:
            key: The key to look up
            loader: Zero-argument callable producing the value

        Returns:
            The cached or freshly loaded value

        Raises:
            ValueRetrievalError: If the loader fails
        """
        ...

    def put(self, key: str, value: Any) -> None:
        """Store a value under a key."""
        ...

    def put_if_absent(self, key: str, value: Any) -> ValueWrapper | None:
        """Store a value unless the key is already present.

        Returns:
            The existing value if there was one, None if the value was stored
        """
        ...

    def evict(self, key: str) -> None:
        """Remove a key if present."""
        ...

    def clear(self) -> None:
        """Remove every entry of this cache."""
        ...


@runtime_checkable
class CacheManager(Protocol):
    """Protocol for a factory of named caches."""

    def get_cache(self, name: str) -> Cache | None:
        """Look up (or create) a cache by name.

        Returns:
            The cache, or None if the manager does not know the name
        """
        ...

    def get_cache_names(self) -> set[str]:
        """Return the names of the caches known to this manager."""
        ...
