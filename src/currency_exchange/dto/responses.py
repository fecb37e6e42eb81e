"""Response DTOs for API endpoints."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ExchangeResponse(BaseModel):
    """Response DTO for a single exchange rate."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = Field(..., description="Primary key")
    from_currency: str = Field(..., alias="from", description="Source currency code")
    to_currency: str = Field(..., alias="to", description="Target currency code")
    conversion_multiple: Decimal = Field(..., alias="conversionMultiple")
    version: int | None = Field(None, description="Current optimistic locking version")
    environment: str | None = Field(None, description="Port of the instance that served the request")


class MessageResponse(BaseModel):
    """Response DTO carrying a human-readable message."""

    message: str


class ErrorResponse(BaseModel):
    """Response DTO for errors translated at the API boundary."""

    error: str = Field(..., description="Error code, e.g. 'CONFLICT'")
    message: str = Field(..., description="Human-readable explanation")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    database_healthy: bool = Field(..., description="Whether the database is reachable")
    cache_circuit: str = Field(..., description="Cache circuit state: 'closed', 'open' or 'disabled'")
