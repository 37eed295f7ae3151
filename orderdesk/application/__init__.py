"""
Application layer - use cases and DTOs.

Use cases are the only entry point for API handlers that change state.
"""

from orderdesk.application.dto import (
    ErrorResponse,
    ExchangeRequest,
    ExchangeResponse,
    OrderResponse,
    ReturnRequest,
    ReturnResponse,
)
from orderdesk.application.use_cases import (
    ProcessExchangeUseCase,
    ProcessReturnUseCase,
)

__all__ = [
    "ExchangeRequest",
    "ReturnRequest",
    "ExchangeResponse",
    "ReturnResponse",
    "OrderResponse",
    "ErrorResponse",
    "ProcessExchangeUseCase",
    "ProcessReturnUseCase",
]
