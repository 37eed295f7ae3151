"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

CENT = Decimal("0.01")


def money_to_str(value: Decimal) -> str:
    """Fixed-point text with at least two decimals; never rounds."""
    if value.as_tuple().exponent > -2:
        value = value.quantize(CENT)
    return f"{value:f}"


# Exact in memory and on the wire: JSON strings such as "283.00"
Money = Annotated[Decimal, PlainSerializer(money_to_str, return_type=str, when_used="json")]


class OrderLineResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    size: str | None = None
    qty: int
    unit_price: Money
    line_discount: Money
    amount: Money
    units: list[str] = Field(default_factory=list, description="Bound unit codes")


class OrderAmountsResponse(BaseModel):
    subtotal: Money
    total_discount: Money
    vat_rate: Decimal
    vat: Money
    transport_cost: Money
    total: Money


class OrderPaymentsResponse(BaseModel):
    total_paid: Money
    due: Money


class ProductEntryResponse(BaseModel):
    """A removed or returned entry as recorded in history."""

    product_id: str
    quantity: int
    product_name: str | None = None


class ReplacementEntryResponse(BaseModel):
    id: str
    name: str
    price: Money
    size: str | None = None
    quantity: int


class ExchangeRecordResponse(BaseModel):
    timestamp: datetime
    removed_products: list[ProductEntryResponse]
    replacement_products: list[ReplacementEntryResponse]
    original_total: Money
    new_total: Money
    difference: Money
    settlement: str
    note: str


class ReturnRecordResponse(BaseModel):
    timestamp: datetime
    returned_products: list[ProductEntryResponse]
    original_total: Money
    new_total: Money
    refund_amount: Money
    refund_to_customer: Money
    settlement: str
    note: str


class OrderResponse(BaseModel):
    """Order response DTO."""

    id: str = Field(..., description="Order ID")
    domain: str = Field(..., description="Order domain (sale | social_order)")
    line_items: list[OrderLineResponse] = Field(default_factory=list)
    amounts: OrderAmountsResponse
    payments: OrderPaymentsResponse
    exchange_history: list[ExchangeRecordResponse] = Field(default_factory=list)
    return_history: list[ReturnRecordResponse] = Field(default_factory=list)
    version: int
    created_at: datetime
    updated_at: datetime


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    limit: int
    offset: int


class ExchangeResponse(BaseModel):
    """Result of a processed exchange."""

    success: bool = True
    message: str
    order: OrderResponse
    difference: Money = Field(..., description="New total minus original total")
    due: Money = Field(..., description="New total minus total paid")


class ReturnResponse(BaseModel):
    """Result of a processed return."""

    success: bool = True
    message: str
    order: OrderResponse
    refund_amount: Money = Field(..., description="Original total minus new total")
    refund_to_customer: Money = Field(..., description="Overpayment to hand back")
    new_total: Money
    new_due: Money


class InventoryUnitResponse(BaseModel):
    code: str
    product_id: str
    status: str
    owning_domain: str | None = None
    owning_order_id: str | None = None
    sold_at: datetime | None = None
    created_at: datetime


class InventoryUnitListResponse(BaseModel):
    units: list[InventoryUnitResponse]
    total: int
    limit: int
    offset: int


class ProductStockResponse(BaseModel):
    product_id: str
    available: int
    sold: int
    total: int


class LedgerTransactionResponse(BaseModel):
    id: int
    name: str
    description: str
    entry_type: str
    amount: Money
    category: str
    source: str
    reference_id: str
    comment: str
    occurred_at: datetime


class LedgerTransactionListResponse(BaseModel):
    transactions: list[LedgerTransactionResponse]
    total: int
    accounting_stale: bool = False


class ComponentHealthResponse(BaseModel):
    status: str
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ORDER_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
