"""Redis implementation of Cache and CacheManager.

This is the passthrough binding: every operation goes straight to Redis
and any connection fault propagates to the caller. Wrap the manager in a
ResilientCacheManager to make it fail open.

Entries are stored as JSON strings under ``{prefix}{cache name}::{key}``
with a fixed TTL that reads of non-None values refresh (time-to-idle).
"""

import json
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

import redis

from currency_exchange.config import get_redis_client, settings
from currency_exchange.entities import ValueWrapper
from currency_exchange.exceptions import ValueRetrievalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RedisCache:
    """A named cache stored in Redis.

    This class satisfies the Cache protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        name: str,
        redis_client: redis.Redis,
        ttl: int,
        key_prefix: str = "",
        time_to_idle: bool = True,
        allow_null_values: bool = True,
    ) -> None:
        """Initialize the Redis cache.

        Args:
            name: The cache name, part of every entry key.
            redis_client: Redis client instance (required).
            ttl: Time-to-live for entries in seconds.
            key_prefix: Prefix put before the cache name in entry keys.
            time_to_idle: Refresh the TTL of a non-None entry when it is read.
            allow_null_values: Whether None may be cached.
        """
        self._name = name
        self._client = redis_client
        self._ttl = ttl
        self._key_prefix = key_prefix
        self._time_to_idle = time_to_idle
        self._allow_null_values = allow_null_values

    @property
    def name(self) -> str:
        return self._name

    @property
    def native_cache(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client

    def _entry_key(self, key: str) -> str:
        return f"{self._key_prefix}{self._name}::{key}"

    def _serialize(self, value: Any) -> str:
        if value is None and not self._allow_null_values:
            raise ValueError(
                f"Cache '{self._name}' does not allow None values; "
                "enable allow_null_values or skip caching None"
            )
        return json.dumps(value)

    def get(self, key: str) -> ValueWrapper | None:
        entry_key = self._entry_key(key)
        raw = self._client.get(entry_key)
        if raw is None:
            return None

        value = json.loads(raw)
        # Cached misses (None) keep their original TTL so a skipped write-through cannot pin them.
        if self._time_to_idle and value is not None:
            self._client.expire(entry_key, self._ttl)
        return ValueWrapper(value)

    def get_typed(self, key: str, value_type: type[T]) -> T | None:
        wrapper = self.get(key)
        if wrapper is None or wrapper.value is None:
            return None
        if not isinstance(wrapper.value, value_type):
            raise TypeError(
                f"Cached value for key '{key}' is not of required type "
                f"{value_type.__name__}: {wrapper.value!r}"
            )
        return wrapper.value

    def get_or_load(self, key: str, loader: Callable[[], T]) -> T:
        wrapper = self.get(key)
        if wrapper is not None:
            return wrapper.value

        try:
            value = loader()
        except Exception as e:
            raise ValueRetrievalError(key, loader, e) from e

        self.put(key, value)
        return value

    def put(self, key: str, value: Any) -> None:
        self._client.set(self._entry_key(key), self._serialize(value), ex=self._ttl)

    def put_if_absent(self, key: str, value: Any) -> ValueWrapper | None:
        stored = self._client.set(self._entry_key(key), self._serialize(value), ex=self._ttl, nx=True)
        if stored:
            return None
        return self.get(key)

    def evict(self, key: str) -> None:
        self._client.delete(self._entry_key(key))

    def clear(self) -> None:
        keys = list(self._client.scan_iter(match=f"{self._key_prefix}{self._name}::*"))
        if keys:
            self._client.delete(*keys)
        logger.debug("Cleared %d entries from cache '%s'", len(keys), self._name)


class RedisCacheManager:
    """Creates and remembers RedisCache instances sharing one client.

    This class satisfies the CacheManager protocol through structural
    typing. Caches are created on first lookup unless runtime creation is
    disabled, in which case only ``initial_cache_names`` are served.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        ttl: int | None = None,
        key_prefix: str | None = None,
        time_to_idle: bool = True,
        allow_null_values: bool = True,
        initial_cache_names: Iterable[str] = (),
        allow_runtime_creation: bool = True,
    ) -> None:
        """Initialize the Redis cache manager.

        Args:
            redis_client: Redis client instance. If None, creates default.
            ttl: Time-to-live for entries in seconds. Defaults to settings.
            key_prefix: Entry key prefix. Defaults to settings.
            time_to_idle: Refresh entry TTLs on reads.
            allow_null_values: Whether caches accept None values.
            initial_cache_names: Caches to create up front.
            allow_runtime_creation: Create unknown caches on lookup.
        """
        self._client = redis_client or get_redis_client()
        self._ttl = ttl or settings.cache_ttl
        self._key_prefix = settings.cache_key_prefix if key_prefix is None else key_prefix
        self._time_to_idle = time_to_idle
        self._allow_null_values = allow_null_values
        self._allow_runtime_creation = allow_runtime_creation
        self._caches: dict[str, RedisCache] = {}
        self._lock = threading.Lock()

        for name in initial_cache_names:
            self._caches[name] = self._create_cache(name)

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        ttl: int | None = None,
        key_prefix: str | None = None,
    ) -> "RedisCacheManager":
        """Factory method to create RedisCacheManager with defaults.

        Args:
            redis_client: Redis client. If None, creates one from settings.
            ttl: Entry TTL in seconds. If None, uses settings.
            key_prefix: Entry key prefix. If None, uses settings.

        Returns:
            Configured RedisCacheManager
        """
        return cls(redis_client=redis_client, ttl=ttl, key_prefix=key_prefix)

    def _create_cache(self, name: str) -> RedisCache:
        return RedisCache(
            name=name,
            redis_client=self._client,
            ttl=self._ttl,
            key_prefix=self._key_prefix,
            time_to_idle=self._time_to_idle,
            allow_null_values=self._allow_null_values,
        )

    def get_cache(self, name: str) -> RedisCache | None:
        cache = self._caches.get(name)
        if cache is not None or not self._allow_runtime_creation:
            return cache

        with self._lock:
            cache = self._caches.get(name)
            if cache is None:
                cache = self._create_cache(name)
                self._caches[name] = cache
                logger.debug("Created cache '%s'", name)
        return cache

    def get_cache_names(self) -> set[str]:
        return set(self._caches)

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
