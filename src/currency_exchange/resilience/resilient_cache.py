"""Fail-open decorators for caches and cache managers.

Read faults degrade to cache misses, write/evict/clear faults are dropped,
and a read-through falls back to calling the loader directly.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from currency_exchange.config import settings
from currency_exchange.entities import ValueWrapper
from currency_exchange.exceptions import ValueRetrievalError
from currency_exchange.protocols import Cache, CacheManager

from .circuit_state import DEFAULT_RETRY_INTERVAL, CircuitState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResilientCache:
    """Cache decorator that absorbs backend faults.

    This class satisfies the Cache protocol through structural typing.
    It holds the delegate by reference and never exposes it, except
    through ``native_cache``, which like ``name`` is passed straight
    through without gating.

    Every other operation first consults the shared circuit. A denied
    attempt returns the miss-shaped result without touching the backend.
    A backend fault opens the circuit and returns the same miss-shaped
    result; a success closes it again. A ValueRetrievalError raised by the
    delegate means the loader failed, not the backend, so it propagates
    without opening the circuit or calling the loader a second time.
    """

    def __init__(
        self,
        delegate: Cache,
        circuit: CircuitState,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
    ) -> None:
        """Initialize the resilient cache.

        Args:
            delegate: The cache to protect (required).
            circuit: Breaker state shared with sibling caches (required).
            retry_interval: Seconds after a failure before the backend is retried.
        """
        self._delegate = delegate
        self._circuit = circuit
        self._retry_interval = retry_interval

    @property
    def name(self) -> str:
        return self._delegate.name

    @property
    def native_cache(self) -> Any:
        return self._delegate.native_cache

    @property
    def circuit(self) -> CircuitState:
        """Get the shared circuit state."""
        return self._circuit

    def _should_try(self, operation: str, key: str | None = None) -> bool:
        if self._circuit.allows_attempt(self._retry_interval):
            return True
        logger.debug("Cache '%s' circuit open, skipping %s for key %r", self.name, operation, key)
        return False

    def _report_success(self) -> None:
        if self._circuit.record_success():
            logger.info("Cache '%s' reachable again, circuit closed", self.name)

    def _report_failure(self, operation: str, key: str | None, exc: Exception) -> None:
        self._circuit.record_failure()
        logger.warning(
            "Cache '%s' %s failed for key %r, circuit opened for %.1fs: %s",
            self.name,
            operation,
            key,
            self._retry_interval,
            exc,
        )

    def get(self, key: str) -> ValueWrapper | None:
        if not self._should_try("get", key):
            return None
        try:
            result = self._delegate.get(key)
        except Exception as e:
            self._report_failure("get", key, e)
            return None
        self._report_success()
        return result

    def get_typed(self, key: str, value_type: type[T]) -> T | None:
        if not self._should_try("get", key):
            return None
        try:
            result = self._delegate.get_typed(key, value_type)
        except Exception as e:
            self._report_failure("get", key, e)
            return None
        self._report_success()
        return result

    def get_or_load(self, key: str, loader: Callable[[], T]) -> T:
        """Read-through lookup that falls back to the loader.

        When the circuit denies the attempt or the backend fails, the
        loader is called directly and its result is returned without
        being written back to the cache.

        Raises:
            ValueRetrievalError: If the loader fails
        """
        if not self._should_try("get", key):
            return self._load(key, loader)
        try:
            result = self._delegate.get_or_load(key, loader)
        except ValueRetrievalError:
            # The loader failed inside the delegate; the backend itself did not.
            raise
        except Exception as e:
            self._report_failure("get", key, e)
            return self._load(key, loader)
        self._report_success()
        return result

    @staticmethod
    def _load(key: str, loader: Callable[[], T]) -> T:
        try:
            return loader()
        except Exception as e:
            raise ValueRetrievalError(key, loader, e) from e

    def put(self, key: str, value: Any) -> None:
        if not self._should_try("put", key):
            return
        try:
            self._delegate.put(key, value)
        except Exception as e:
            self._report_failure("put", key, e)
            return
        self._report_success()

    def put_if_absent(self, key: str, value: Any) -> ValueWrapper | None:
        if not self._should_try("put_if_absent", key):
            return None
        try:
            result = self._delegate.put_if_absent(key, value)
        except Exception as e:
            self._report_failure("put_if_absent", key, e)
            return None
        self._report_success()
        return result

    def evict(self, key: str) -> None:
        if not self._should_try("evict", key):
            return
        try:
            self._delegate.evict(key)
        except Exception as e:
            self._report_failure("evict", key, e)
            return
        self._report_success()

    def clear(self) -> None:
        if not self._should_try("clear"):
            return
        try:
            self._delegate.clear()
        except Exception as e:
            self._report_failure("clear", None, e)
            return
        self._report_success()


class ResilientCacheManager:
    """CacheManager decorator handing out ResilientCache instances.

    This class satisfies the CacheManager protocol through structural
    typing. All caches it produces share this manager's CircuitState,
    which lives exactly as long as the manager.

    Example:
        ```python
        from currency_exchange.repositories import RedisCacheManager
        from currency_exchange.resilience import ResilientCacheManager

        manager = ResilientCacheManager.create(RedisCacheManager.create())
        cache = manager.get_cache("exchangeValue")
        cache.get("USD_INR")  # None instead of an error when Redis is down
        ```
    """

    def __init__(
        self,
        delegate: CacheManager,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
        circuit: CircuitState | None = None,
    ) -> None:
        """Initialize the resilient cache manager.

        Args:
            delegate: The cache manager to protect (required).
            retry_interval: Seconds after a failure before the backend is retried.
            circuit: Breaker state to use. Defaults to a new closed circuit.
        """
        self._delegate = delegate
        self._retry_interval = retry_interval
        self._circuit = circuit or CircuitState()

    @classmethod
    def create(
        cls,
        delegate: CacheManager,
        retry_interval: float | None = None,
    ) -> "ResilientCacheManager":
        """Factory method to create ResilientCacheManager with defaults.

        Args:
            delegate: The cache manager to protect (required).
            retry_interval: Retry interval in seconds. If None, uses settings.

        Returns:
            Configured ResilientCacheManager
        """
        if retry_interval is None:
            retry_interval = settings.cache_retry_interval
        return cls(delegate=delegate, retry_interval=retry_interval)

    def get_cache(self, name: str) -> ResilientCache | None:
        cache = self._delegate.get_cache(name)
        if cache is None:
            return None
        return ResilientCache(cache, self._circuit, self._retry_interval)

    def get_cache_names(self) -> set[str]:
        """Return the delegate's cache names, or an empty set if listing fails."""
        try:
            return set(self._delegate.get_cache_names())
        except Exception as e:
            logger.warning("Listing cache names failed, reporting none: %s", e)
            return set()

    @property
    def circuit(self) -> CircuitState:
        """Get the circuit state shared by all produced caches."""
        return self._circuit

    @property
    def retry_interval(self) -> float:
        return self._retry_interval
