"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import ExchangeRequest, PatchExchangeRequest
from .responses import ErrorResponse, ExchangeResponse, HealthCheckResponse, MessageResponse

__all__ = [
    "ExchangeRequest",
    "PatchExchangeRequest",
    "ExchangeResponse",
    "MessageResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
