"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from currency_exchange.config import Settings, get_redis_client, settings
from currency_exchange.database import create_db_engine, init_db
from currency_exchange.handlers import ExchangeHandler
from currency_exchange.repositories import RedisCacheManager, SqlAlchemyExchangeRepository
from currency_exchange.resilience import ResilientCacheManager
from currency_exchange.services import ExchangeService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> ExchangeHandler:
    """Dependency injection for ExchangeHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ExchangeHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "exchange_handler", None)
    if handler is None:
        raise RuntimeError("ExchangeHandler not initialized. Check lifespan setup.")
    return handler


def build_exchange_service(config: Settings) -> ExchangeService:
    """Wire repository, cache and service from settings.

    With caching enabled the Redis cache manager is always wrapped in a
    ResilientCacheManager, so a Redis outage only costs cache hits.
    """
    engine = create_db_engine(config.database_url)
    init_db(engine)
    repository = SqlAlchemyExchangeRepository.create(engine)

    cache_manager = None
    if config.cache_enabled:
        cache_manager = ResilientCacheManager.create(
            RedisCacheManager.create(
                redis_client=get_redis_client(),
                ttl=config.cache_ttl,
                key_prefix=config.cache_key_prefix,
            ),
            retry_interval=config.cache_retry_interval,
        )

    return ExchangeService.create(repository=repository, cache_manager=cache_manager)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repository and cache manager (data access) - created explicitly
    2. Service (business logic) - stored in app.state.exchange_service
    3. Handler (HTTP endpoints) - stored in app.state.exchange_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Removes all services from app.state on shutdown
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    exchange_service = build_exchange_service(settings)
    exchange_handler = ExchangeHandler(exchange_service=exchange_service, environment=str(settings.api_port))

    app.state.exchange_service = exchange_service
    app.state.exchange_handler = exchange_handler

    logger.info("Exchange service initialized")
    logger.info("Database: %s", settings.database_url)
    logger.info("Cache: %s (retry interval %.1fs)", exchange_service.cache_status, settings.cache_retry_interval)

    yield

    del app.state.exchange_handler
    del app.state.exchange_service
    logger.info("Exchange service shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[ExchangeHandler, Depends(get_handler)]
