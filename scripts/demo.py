#!/usr/bin/env python3
"""
Demo script for the fail-open exchange value cache.

Runs the service against an in-memory SQLite database and a Redis URL.
Point REDIS_URL at a port nothing listens on to watch the service keep
answering from the database while the cache circuit is open.
"""

import logging
import time
from decimal import Decimal

from currency_exchange.config import get_redis_client, settings
from currency_exchange.database import create_db_engine, init_db
from currency_exchange.entities import CurrencyExchangeEntity
from currency_exchange.repositories import RedisCacheManager, SqlAlchemyExchangeRepository
from currency_exchange.resilience import ResilientCacheManager
from currency_exchange.services import ExchangeService


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def build_service() -> tuple[ExchangeService, ResilientCacheManager]:
    engine = create_db_engine("sqlite://")
    init_db(engine)
    manager = ResilientCacheManager.create(RedisCacheManager.create(redis_client=get_redis_client()))
    service = ExchangeService.create(
        repository=SqlAlchemyExchangeRepository.create(engine),
        cache_manager=manager,
    )
    return service, manager


def demo_crud(service: ExchangeService, manager: ResilientCacheManager) -> None:
    """Create, read, update and delete one rate."""
    print_section("Exchange rate CRUD")

    created = service.create_exchange(
        CurrencyExchangeEntity(from_currency="USD", to_currency="INR", conversion_multiple=Decimal("65"))
    )
    print(f"  Created: {created}")
    print(f"  Cache circuit: {manager.circuit.status}")

    for attempt in range(1, 4):
        start_time = time.time()
        found = service.retrieve_exchange_value("USD", "INR")
        elapsed_ms = (time.time() - start_time) * 1000
        print(f"  Read #{attempt}: {found.conversion_multiple} in {elapsed_ms:.2f}ms "
              f"(circuit {manager.circuit.status})")

    updated = service.update_exchange(
        created.id,
        CurrencyExchangeEntity(from_currency="USD", to_currency="INR", conversion_multiple=Decimal("70")),
    )
    print(f"  Updated: {updated}")
    print(f"  Deleted: {service.delete_exchange('USD', 'INR')}")
    print(f"  Read after delete: {service.retrieve_exchange_value('USD', 'INR')}")


def demo_retry_window(manager: ResilientCacheManager) -> None:
    """Show the breaker waiting out its retry interval."""
    print_section("Circuit retry window")

    if not manager.circuit.is_open:
        print("  Redis is reachable; the circuit never opened.")
        return

    print(f"  Circuit open, waiting {manager.retry_interval:.1f}s before Redis is tried again...")
    time.sleep(manager.retry_interval + 0.1)
    manager.get_cache("exchangeValue").get("USD_INR")
    print(f"  After one trial call the circuit is {manager.circuit.status}")


def main() -> None:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s [%(name)s] %(message)s")
    print(f"Redis URL: {settings.redis_url}")

    service, manager = build_service()
    demo_crud(service, manager)
    demo_retry_window(manager)


if __name__ == "__main__":
    main()
