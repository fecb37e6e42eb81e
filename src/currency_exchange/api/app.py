from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from currency_exchange.api.dependencies import HandlerDep, lifespan
from currency_exchange.config import settings
from currency_exchange.dto import (
    ErrorResponse,
    ExchangeRequest,
    ExchangeResponse,
    HealthCheckResponse,
    MessageResponse,
    PatchExchangeRequest,
)
from currency_exchange.exceptions import DuplicateExchangeError, OptimisticLockError

CONFLICT_MESSAGE = "CurrencyExchange has been modified by another request. Please reload and retry."

app = FastAPI(
    title="Currency Exchange API",
    description="Currency exchange rates backed by a relational store with a fail-open Redis cache",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def conflict_response(exc: OptimisticLockError | DuplicateExchangeError) -> JSONResponse:
    """Map a persistence conflict to a 409 response body."""
    if isinstance(exc, DuplicateExchangeError):
        body = ErrorResponse(error="DUPLICATE", message=str(exc))
    else:
        body = ErrorResponse(error="CONFLICT", message=CONFLICT_MESSAGE)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())


@app.exception_handler(OptimisticLockError)
async def handle_optimistic_lock(request: Request, exc: OptimisticLockError) -> JSONResponse:
    return conflict_response(exc)


@app.exception_handler(DuplicateExchangeError)
async def handle_duplicate_exchange(request: Request, exc: DuplicateExchangeError) -> JSONResponse:
    return conflict_response(exc)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Currency Exchange API",
        "version": "0.1.0",
        "description": "Currency exchange rates with a fail-open Redis cache",
        "endpoints": {
            "exchange": "/currency-exchange",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
def health(handler: HandlerDep) -> JSONResponse:
    """Health check endpoint; 503 when the database is unreachable."""
    result = handler.health_check()
    status_code = status.HTTP_200_OK if result.database_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=result.model_dump())


@app.get("/currency-exchange/from/{from_currency}/to/{to_currency}", response_model=ExchangeResponse)
def retrieve_exchange_value(from_currency: str, to_currency: str, handler: HandlerDep) -> ExchangeResponse:
    """Get the conversion rate for a currency pair."""
    return handler.retrieve_exchange_value(from_currency, to_currency)


@app.post("/currency-exchange", response_model=ExchangeResponse, status_code=status.HTTP_201_CREATED)
def create_exchange(request: ExchangeRequest, handler: HandlerDep) -> ExchangeResponse:
    """Create a conversion rate."""
    return handler.create_exchange(request)


@app.put("/currency-exchange/{entity_id}", response_model=ExchangeResponse)
def update_exchange(entity_id: int, request: ExchangeRequest, handler: HandlerDep) -> ExchangeResponse:
    """Replace a conversion rate."""
    return handler.update_exchange(entity_id, request)


@app.patch("/currency-exchange/{entity_id}", response_model=ExchangeResponse)
def patch_exchange(entity_id: int, request: PatchExchangeRequest, handler: HandlerDep) -> ExchangeResponse:
    """Partially update a conversion rate."""
    return handler.patch_exchange(entity_id, request)


@app.delete("/currency-exchange/from/{from_currency}/to/{to_currency}", response_model=MessageResponse)
def delete_exchange(from_currency: str, to_currency: str, handler: HandlerDep) -> MessageResponse:
    """Delete the conversion rate for a currency pair."""
    return handler.delete_exchange(from_currency, to_currency)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "currency_exchange.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
