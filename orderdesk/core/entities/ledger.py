"""Ledger entities: financial deltas and the transactions derived from them."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from orderdesk.core.entities.order import (
    OrderDomain,
    RemovedProduct,
    ReplacementProduct,
    utcnow,
)


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class LedgerSource(str, Enum):
    EXCHANGE = "exchange"
    RETURN = "return"


class ExchangeDelta(BaseModel):
    """Financial outcome of one committed exchange."""

    domain: OrderDomain
    order_id: str
    difference: Decimal
    removed_products: list[RemovedProduct] = Field(default_factory=list)
    replacement_products: list[ReplacementProduct] = Field(default_factory=list)
    occurred_at: datetime = Field(default_factory=utcnow)


class ReturnDelta(BaseModel):
    """Financial outcome of one committed return."""

    domain: OrderDomain
    order_id: str
    refund_amount: Decimal
    refund_to_customer: Decimal
    returned_products: list[RemovedProduct] = Field(default_factory=list)
    occurred_at: datetime = Field(default_factory=utcnow)


class LedgerTransaction(BaseModel):
    """A single income/expense row in the accounting ledger."""

    id: int | None = None
    name: str
    description: str = ""
    entry_type: EntryType
    amount: Decimal
    category: str
    source: LedgerSource
    reference_id: str  # e.g. "sale-123"
    comment: str = ""
    occurred_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
