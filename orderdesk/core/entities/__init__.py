"""Core domain entities."""

from orderdesk.core.entities.inventory import (
    InventoryUnit,
    UnitStatus,
    UnitTransition,
)
from orderdesk.core.entities.ledger import (
    EntryType,
    ExchangeDelta,
    LedgerSource,
    LedgerTransaction,
    ReturnDelta,
)
from orderdesk.core.entities.order import (
    ExchangeRecord,
    Order,
    OrderAmounts,
    OrderDomain,
    OrderLine,
    OrderPayments,
    RemovedProduct,
    ReplacementProduct,
    ReturnRecord,
    SettlementKind,
    utcnow,
)

__all__ = [
    # Order entities
    "Order",
    "OrderDomain",
    "OrderLine",
    "OrderAmounts",
    "OrderPayments",
    "RemovedProduct",
    "ReplacementProduct",
    "ExchangeRecord",
    "ReturnRecord",
    "SettlementKind",
    "utcnow",
    # Inventory entities
    "InventoryUnit",
    "UnitStatus",
    "UnitTransition",
    # Ledger entities
    "EntryType",
    "LedgerSource",
    "LedgerTransaction",
    "ExchangeDelta",
    "ReturnDelta",
]
