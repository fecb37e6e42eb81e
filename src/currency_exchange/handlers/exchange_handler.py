"""HTTP handlers for exchange-rate operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and not-found responses.
Optimistic locking and duplicate-pair errors are left to propagate; the
app translates them in one place.
"""

import logging

from fastapi import HTTPException, status

from currency_exchange.dto import (
    ExchangeRequest,
    ExchangeResponse,
    HealthCheckResponse,
    MessageResponse,
    PatchExchangeRequest,
)
from currency_exchange.entities import CurrencyExchangeEntity
from currency_exchange.exceptions import ValueRetrievalError
from currency_exchange.services import ExchangeService

logger = logging.getLogger(__name__)


class ExchangeHandler:
    """HTTP handlers for exchange-rate operations.

    Example:
        ```python
        handler = ExchangeHandler(exchange_service=service, environment="8000")

        @app.get("/currency-exchange/from/{from_currency}/to/{to_currency}")
        def retrieve(from_currency: str, to_currency: str):
            return handler.retrieve_exchange_value(from_currency, to_currency)
        ```
    """

    def __init__(self, exchange_service: ExchangeService, environment: str | None = None) -> None:
        """Initialize the exchange handler.

        Args:
            exchange_service: The exchange service for business logic (required).
            environment: Value reported in the ``environment`` field of responses.
        """
        self._service = exchange_service
        self._environment = environment

    def _to_response(self, entity: CurrencyExchangeEntity) -> ExchangeResponse:
        return ExchangeResponse(
            id=entity.id,
            from_currency=entity.from_currency,
            to_currency=entity.to_currency,
            conversion_multiple=entity.conversion_multiple,
            version=entity.version,
            environment=self._environment,
        )

    def retrieve_exchange_value(self, from_currency: str, to_currency: str) -> ExchangeResponse:
        """Handle GET /currency-exchange/from/{from}/to/{to} requests.

        Raises:
            HTTPException: 404 if the pair is unknown, 503 if it cannot be read
        """
        logger.info(
            "retrieve_exchange_value called with %s to %s with port : %s",
            from_currency,
            to_currency,
            self._environment,
        )
        try:
            entity = self._service.retrieve_exchange_value(from_currency, to_currency)
        except ValueRetrievalError as e:
            logger.error("Exchange value %s could not be retrieved: %s", e.key, e.__cause__)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to retrieve exchange value: {e.__cause__}",
            ) from e

        if entity is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversion record not found")
        return self._to_response(entity)

    def create_exchange(self, request: ExchangeRequest) -> ExchangeResponse:
        """Handle POST /currency-exchange requests."""
        created = self._service.create_exchange(
            CurrencyExchangeEntity(
                id=request.id,
                from_currency=request.from_currency,
                to_currency=request.to_currency,
                conversion_multiple=request.conversion_multiple,
            )
        )
        return self._to_response(created)

    def update_exchange(self, entity_id: int, request: ExchangeRequest) -> ExchangeResponse:
        """Handle PUT /currency-exchange/{id} requests.

        Raises:
            HTTPException: 404 if there is no such row
        """
        updated = self._service.update_exchange(
            entity_id,
            CurrencyExchangeEntity(
                from_currency=request.from_currency,
                to_currency=request.to_currency,
                conversion_multiple=request.conversion_multiple,
                version=request.version,
            ),
        )
        if updated is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CurrencyExchange not found")
        return self._to_response(updated)

    def patch_exchange(self, entity_id: int, request: PatchExchangeRequest) -> ExchangeResponse:
        """Handle PATCH /currency-exchange/{id} requests.

        Raises:
            HTTPException: 404 if there is no such row
        """
        patched = self._service.patch_exchange(
            entity_id,
            from_currency=request.from_currency,
            to_currency=request.to_currency,
            conversion_multiple=request.conversion_multiple,
        )
        if patched is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CurrencyExchange not found")
        return self._to_response(patched)

    def delete_exchange(self, from_currency: str, to_currency: str) -> MessageResponse:
        """Handle DELETE /currency-exchange/from/{from}/to/{to} requests.

        Raises:
            HTTPException: 404 if the pair is unknown
        """
        if not self._service.delete_exchange(from_currency, to_currency):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CurrencyExchange not found")
        return MessageResponse(message="CurrencyExchange deleted")

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        database_healthy = self._service.is_healthy()
        return HealthCheckResponse(
            status="healthy" if database_healthy else "unhealthy",
            database_healthy=database_healthy,
            cache_circuit=self._service.cache_status,
        )
