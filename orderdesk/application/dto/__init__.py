"""Request and response DTOs."""

from orderdesk.application.dto.requests import (
    ExchangeRequest,
    RemovedProductRequest,
    ReplacementProductRequest,
    ReturnRequest,
)
from orderdesk.application.dto.responses import (
    ErrorResponse,
    ExchangeResponse,
    HealthResponse,
    InventoryUnitListResponse,
    InventoryUnitResponse,
    LedgerTransactionListResponse,
    LedgerTransactionResponse,
    OrderListResponse,
    OrderResponse,
    ProductStockResponse,
    ReturnResponse,
)

__all__ = [
    # Requests
    "ExchangeRequest",
    "ReturnRequest",
    "RemovedProductRequest",
    "ReplacementProductRequest",
    # Responses
    "OrderResponse",
    "OrderListResponse",
    "ExchangeResponse",
    "ReturnResponse",
    "InventoryUnitResponse",
    "InventoryUnitListResponse",
    "ProductStockResponse",
    "LedgerTransactionResponse",
    "LedgerTransactionListResponse",
    "HealthResponse",
    "ErrorResponse",
]
