"""Inventory unit entities."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from orderdesk.core.entities.order import OrderDomain, utcnow


class UnitStatus(str, Enum):
    """Stock unit states."""

    AVAILABLE = "available"
    SOLD = "sold"


class InventoryUnit(BaseModel):
    """One individually addressable stock unit (barcode)."""

    code: str
    product_id: str
    status: UnitStatus = UnitStatus.AVAILABLE
    owning_domain: OrderDomain | None = None
    owning_order_id: str | None = None
    sold_at: datetime | None = None
    seq: int | None = None  # admission sequence, assigned by the store
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_ownership(self) -> "InventoryUnit":
        """A unit is sold if and only if an order holds it."""
        held = self.owning_order_id is not None
        if held != (self.status == UnitStatus.SOLD):
            raise ValueError(
                f"unit {self.code}: status {self.status.value} "
                f"inconsistent with owner {self.owning_order_id!r}"
            )
        if held != (self.owning_domain is not None):
            raise ValueError(f"unit {self.code}: owner id and domain must be set together")
        return self

    @property
    def owner(self) -> tuple[OrderDomain, str] | None:
        if self.owning_order_id is None:
            return None
        return (self.owning_domain, self.owning_order_id)

    def is_held_by(self, domain: OrderDomain, order_id: str) -> bool:
        return self.status == UnitStatus.SOLD and self.owner == (domain, order_id)

    def mark_sold(self, domain: OrderDomain, order_id: str, at: datetime) -> None:
        self.status = UnitStatus.SOLD
        self.owning_domain = domain
        self.owning_order_id = order_id
        self.sold_at = at
        self.updated_at = at

    def mark_available(self, at: datetime) -> None:
        self.status = UnitStatus.AVAILABLE
        self.owning_domain = None
        self.owning_order_id = None
        self.sold_at = None
        self.updated_at = at


@dataclass(frozen=True)
class UnitTransition:
    """A unit's new state plus the state it must still be in when written."""

    unit: InventoryUnit
    expected_status: UnitStatus
    expected_domain: OrderDomain | None
    expected_order_id: str | None

    @property
    def code(self) -> str:
        return self.unit.code
