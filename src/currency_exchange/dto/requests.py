"""Request DTOs for API endpoints."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ExchangeRequest(BaseModel):
    """Request DTO for creating or replacing an exchange rate.

    Field names on the wire are ``from``, ``to`` and ``conversionMultiple``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = Field(None, description="Primary key; assigned by the database when omitted")
    from_currency: str = Field(..., alias="from", description="Source currency code", min_length=1, max_length=10)
    to_currency: str = Field(..., alias="to", description="Target currency code", min_length=1, max_length=10)
    conversion_multiple: Decimal = Field(
        ...,
        alias="conversionMultiple",
        description="Units of target currency per unit of source currency",
        gt=0,
    )
    version: int | None = Field(
        None,
        description="Version read by the client; a stale version is rejected with 409",
    )


class PatchExchangeRequest(BaseModel):
    """Request DTO for a partial update. Omitted fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    from_currency: str | None = Field(None, alias="from", min_length=1, max_length=10)
    to_currency: str | None = Field(None, alias="to", min_length=1, max_length=10)
    conversion_multiple: Decimal | None = Field(None, alias="conversionMultiple", gt=0)
