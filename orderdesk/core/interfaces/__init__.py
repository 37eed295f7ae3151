"""Core interfaces (ports) for dependency injection."""

from orderdesk.core.interfaces.inventory_store import IInventoryStore
from orderdesk.core.interfaces.ledger import ILedgerNotifier
from orderdesk.core.interfaces.order_store import IOrderStore
from orderdesk.core.interfaces.reconciliation_store import IReconciliationStore

__all__ = [
    # Storage interfaces
    "IOrderStore",
    "IInventoryStore",
    "IReconciliationStore",
    # Ledger interfaces
    "ILedgerNotifier",
]
