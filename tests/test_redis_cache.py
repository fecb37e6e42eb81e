"""
Tests for the Redis cache binding, using a mocked Redis client.
"""

from unittest.mock import MagicMock

import pytest
import redis

from currency_exchange.entities import ValueWrapper
from currency_exchange.exceptions import ValueRetrievalError
from currency_exchange.repositories import RedisCache, RedisCacheManager
from currency_exchange.resilience import ResilientCacheManager

ENTRY_KEY = "my-redis-exchangeValue::USD_INR"


@pytest.fixture
def client():
    return MagicMock(spec=redis.Redis)


@pytest.fixture
def cache(client):
    return RedisCache("exchangeValue", client, ttl=60, key_prefix="my-redis-")


def test_get_refreshes_ttl_on_read(cache, client):
    client.get.return_value = b'{"from": "USD", "to": "INR"}'

    assert cache.get("USD_INR") == ValueWrapper({"from": "USD", "to": "INR"})
    client.get.assert_called_once_with(ENTRY_KEY)
    client.expire.assert_called_once_with(ENTRY_KEY, 60)


def test_get_without_time_to_idle_uses_plain_get(client):
    cache = RedisCache("exchangeValue", client, ttl=60, key_prefix="my-redis-", time_to_idle=False)
    client.get.return_value = b'"10.5"'

    assert cache.get("USD_INR") == ValueWrapper("10.5")
    client.get.assert_called_once_with(ENTRY_KEY)
    client.expire.assert_not_called()


def test_cached_none_is_not_a_miss(cache, client):
    client.get.return_value = b"null"

    assert cache.get("USD_INR") == ValueWrapper(None)
    # a cached miss keeps the TTL it was written with
    client.expire.assert_not_called()


def test_get_typed_checks_value_type(cache, client):
    client.get.return_value = b'"10.5"'

    assert cache.get_typed("USD_INR", str) == "10.5"
    with pytest.raises(TypeError):
        cache.get_typed("USD_INR", dict)


def test_get_or_load_populates_cache_on_miss(cache, client):
    client.get.return_value = None

    assert cache.get_or_load("USD_INR", lambda: {"rate": "10.5"}) == {"rate": "10.5"}
    client.set.assert_called_once_with(ENTRY_KEY, '{"rate": "10.5"}', ex=60)


def test_get_or_load_returns_hit_without_loading(cache, client):
    client.get.return_value = b'{"rate": "10.5"}'
    loader = MagicMock()

    assert cache.get_or_load("USD_INR", loader) == {"rate": "10.5"}
    loader.assert_not_called()
    client.set.assert_not_called()


def test_get_or_load_wraps_loader_failure(cache, client):
    client.get.return_value = None

    def loader():
        raise LookupError("no row")

    with pytest.raises(ValueRetrievalError) as exc_info:
        cache.get_or_load("USD_INR", loader)

    assert exc_info.value.key == "USD_INR"
    client.set.assert_not_called()


def test_put_if_absent(cache, client):
    client.set.return_value = True
    assert cache.put_if_absent("USD_INR", "10.5") is None
    client.set.assert_called_with(ENTRY_KEY, '"10.5"', ex=60, nx=True)

    client.set.return_value = None
    client.get.return_value = b'"9.0"'
    assert cache.put_if_absent("USD_INR", "10.5") == ValueWrapper("9.0")


def test_null_values_can_be_disallowed(client):
    cache = RedisCache("exchangeValue", client, ttl=60, allow_null_values=False)

    with pytest.raises(ValueError):
        cache.put("USD_INR", None)
    client.set.assert_not_called()


def test_evict_and_clear(cache, client):
    cache.evict("USD_INR")
    client.delete.assert_called_once_with(ENTRY_KEY)

    client.delete.reset_mock()
    client.scan_iter.return_value = iter([b"my-redis-exchangeValue::A_B", b"my-redis-exchangeValue::C_D"])
    cache.clear()

    client.scan_iter.assert_called_once_with(match="my-redis-exchangeValue::*")
    client.delete.assert_called_once_with(b"my-redis-exchangeValue::A_B", b"my-redis-exchangeValue::C_D")


def test_clear_empty_cache_deletes_nothing(cache, client):
    client.scan_iter.return_value = iter([])
    cache.clear()
    client.delete.assert_not_called()


def test_manager_creates_each_cache_once(client):
    manager = RedisCacheManager(redis_client=client, ttl=60, key_prefix="my-redis-")

    first = manager.get_cache("exchangeValue")
    assert manager.get_cache("exchangeValue") is first
    assert first.name == "exchangeValue"
    assert first.native_cache is client
    assert manager.get_cache_names() == {"exchangeValue"}


def test_manager_without_runtime_creation(client):
    manager = RedisCacheManager(
        redis_client=client,
        ttl=60,
        initial_cache_names=["exchangeValue"],
        allow_runtime_creation=False,
    )

    assert manager.get_cache("other") is None
    assert manager.get_cache("exchangeValue") is not None
    assert manager.get_cache_names() == {"exchangeValue"}


def test_resilient_manager_absorbs_connection_errors(client):
    client.get.side_effect = redis.exceptions.ConnectionError("Connection refused")
    client.set.side_effect = redis.exceptions.ConnectionError("Connection refused")
    manager = ResilientCacheManager(RedisCacheManager(redis_client=client, ttl=60), retry_interval=5.0)
    cache = manager.get_cache("exchangeValue")

    assert cache.get("USD_INR") is None
    assert manager.circuit.is_open
    assert cache.get_or_load("USD_INR", lambda: "10.5") == "10.5"
    cache.put("USD_INR", "10.5")

    assert client.get.call_count == 1
    client.set.assert_not_called()
