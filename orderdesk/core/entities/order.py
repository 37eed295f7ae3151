"""Order domain entities (counter sales and social-commerce orders)."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


def utcnow() -> datetime:
    return datetime.now(UTC)


class OrderDomain(str, Enum):
    """The two order domains that share one inventory pool."""

    SALE = "sale"
    SOCIAL_ORDER = "social_order"


class SettlementKind(str, Enum):
    """How a reconciliation left the customer's balance."""

    AMOUNT_OWED = "amount_owed"
    REFUND_DUE = "refund_due"
    NO_CHANGE = "no_change"


class OrderLine(BaseModel):
    """One product line within an order."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    product_id: str
    product_name: str = ""
    size: str | None = None
    qty: int = 0
    unit_price: Decimal = Decimal(0)
    line_discount: Decimal = Decimal(0)
    amount: Decimal = Decimal(0)  # unit_price * qty - line_discount
    units: list[str] = Field(default_factory=list)  # bound inventory unit codes

    @model_validator(mode="after")
    def compute_amount(self) -> "OrderLine":
        self.recompute_amount()
        return self

    def recompute_amount(self) -> None:
        self.amount = self.unit_price * self.qty - self.line_discount

    @property
    def is_tracked(self) -> bool:
        """True when every unit of quantity is bound to a unit code."""
        return len(self.units) == self.qty


class OrderAmounts(BaseModel):
    """Computed totals. vat_rate and transport_cost are fixed at creation."""

    subtotal: Decimal = Decimal(0)
    total_discount: Decimal = Decimal(0)
    vat_rate: Decimal = Decimal(0)  # percent
    vat: Decimal = Decimal(0)
    transport_cost: Decimal = Decimal(0)
    total: Decimal = Decimal(0)


class OrderPayments(BaseModel):
    total_paid: Decimal = Decimal(0)
    due: Decimal = Decimal(0)


class RemovedProduct(BaseModel):
    """A removal/return entry as submitted: a line key and a quantity."""

    product_id: str  # line id, falling back to product id
    quantity: int
    product_name: str | None = None  # filled from the matched line


class ReplacementProduct(BaseModel):
    """A replacement entry as submitted on an exchange."""

    id: str  # product id
    name: str = ""
    price: Decimal
    size: str | None = None
    quantity: int


class ExchangeRecord(BaseModel):
    """Audit entry appended to an order for every committed exchange."""

    timestamp: datetime = Field(default_factory=utcnow)
    removed_products: list[RemovedProduct] = Field(default_factory=list)
    replacement_products: list[ReplacementProduct] = Field(default_factory=list)
    original_total: Decimal
    new_total: Decimal
    difference: Decimal
    settlement: SettlementKind
    note: str


class ReturnRecord(BaseModel):
    """Audit entry appended to an order for every committed return."""

    timestamp: datetime = Field(default_factory=utcnow)
    returned_products: list[RemovedProduct] = Field(default_factory=list)
    original_total: Decimal
    new_total: Decimal
    refund_amount: Decimal  # original_total - new_total
    refund_to_customer: Decimal
    settlement: SettlementKind
    note: str


class Order(BaseModel):
    """A completed sale or social-commerce order."""

    domain: OrderDomain
    id: str
    line_items: list[OrderLine] = Field(default_factory=list)
    amounts: OrderAmounts = Field(default_factory=OrderAmounts)
    payments: OrderPayments = Field(default_factory=OrderPayments)
    exchange_history: list[ExchangeRecord] = Field(default_factory=list)
    return_history: list[ReturnRecord] = Field(default_factory=list)
    version: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def find_line(self, key: str) -> OrderLine | None:
        """Resolve a removal key: line id first, then first line with that product."""
        for line in self.line_items:
            if line.id == key:
                return line
        return self.line_for_product(key)

    def line_for_product(self, product_id: str) -> OrderLine | None:
        for line in self.line_items:
            if line.product_id == product_id:
                return line
        return None

    def remove_line(self, line: OrderLine) -> None:
        self.line_items = [li for li in self.line_items if li is not line]

    @property
    def bound_units(self) -> list[str]:
        return [code for line in self.line_items for code in line.units]
