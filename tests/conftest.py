"""Shared fixtures: a fake clock, a cache backend that can be switched off,
and an in-memory SQLite repository."""

from collections.abc import Callable
from typing import Any

import pytest

from currency_exchange.database import create_db_engine, init_db
from currency_exchange.entities import ValueWrapper
from currency_exchange.exceptions import ValueRetrievalError
from currency_exchange.repositories import SqlAlchemyExchangeRepository
from currency_exchange.resilience import CircuitState, ResilientCacheManager


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend:
    """State shared by every FlakyCache of one FlakyCacheManager."""

    def __init__(self) -> None:
        self.failing = False
        self.calls: list[tuple[str, str, Any]] = []
        self.data: dict[tuple[str, str], Any] = {}


class FlakyCache:
    """In-memory cache whose every call raises while the backend is failing."""

    def __init__(self, name: str, backend: FakeBackend) -> None:
        self._name = name
        self._backend = backend

    def _call(self, operation: str, key: Any = None) -> None:
        self._backend.calls.append((self._name, operation, key))
        if self._backend.failing:
            raise ConnectionError(f"cache backend for '{self._name}' unreachable")

    @property
    def name(self) -> str:
        return self._name

    @property
    def native_cache(self) -> FakeBackend:
        return self._backend

    def get(self, key: str) -> ValueWrapper | None:
        self._call("get", key)
        if (self._name, key) in self._backend.data:
            return ValueWrapper(self._backend.data[(self._name, key)])
        return None

    def get_typed(self, key: str, value_type: type) -> Any:
        self._call("get_typed", key)
        return self._backend.data.get((self._name, key))

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        self._call("get_or_load", key)
        if (self._name, key) in self._backend.data:
            return self._backend.data[(self._name, key)]
        try:
            value = loader()
        except Exception as e:
            raise ValueRetrievalError(key, loader, e) from e
        self._backend.data[(self._name, key)] = value
        return value

    def put(self, key: str, value: Any) -> None:
        self._call("put", key)
        self._backend.data[(self._name, key)] = value

    def put_if_absent(self, key: str, value: Any) -> ValueWrapper | None:
        self._call("put_if_absent", key)
        if (self._name, key) in self._backend.data:
            return ValueWrapper(self._backend.data[(self._name, key)])
        self._backend.data[(self._name, key)] = value
        return None

    def evict(self, key: str) -> None:
        self._call("evict", key)
        self._backend.data.pop((self._name, key), None)

    def clear(self) -> None:
        self._call("clear")
        for entry in [k for k in self._backend.data if k[0] == self._name]:
            del self._backend.data[entry]


class FlakyCacheManager:
    """CacheManager over a FakeBackend."""

    def __init__(self, known_names: set[str] | None = None) -> None:
        self.backend = FakeBackend()
        self.listing_fails = False
        self._known_names = known_names
        self._caches: dict[str, FlakyCache] = {}

    def get_cache(self, name: str) -> FlakyCache | None:
        if self._known_names is not None and name not in self._known_names:
            return None
        return self._caches.setdefault(name, FlakyCache(name, self.backend))

    def get_cache_names(self) -> set[str]:
        if self.listing_fails:
            raise ConnectionError("cache backend unreachable")
        return set(self._caches)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> FlakyCacheManager:
    return FlakyCacheManager()


@pytest.fixture
def resilient_manager(store, clock) -> ResilientCacheManager:
    return ResilientCacheManager(store, retry_interval=5.0, circuit=CircuitState(clock=clock))


@pytest.fixture
def repository() -> SqlAlchemyExchangeRepository:
    engine = create_db_engine("sqlite://")
    init_db(engine)
    return SqlAlchemyExchangeRepository.create(engine)


@pytest.fixture
def known_names_store() -> FlakyCacheManager:
    """A store that only serves the exchange value cache."""
    return FlakyCacheManager(known_names={"exchangeValue"})
