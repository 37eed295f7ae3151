"""SQLite storage implementations."""

from orderdesk.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from orderdesk.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from orderdesk.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from orderdesk.infrastructure.storage.sqlite.order_store import SQLiteOrderStore
from orderdesk.infrastructure.storage.sqlite.reconciliation_store import (
    SQLiteReconciliationStore,
)

# Singleton instances
_order_store: SQLiteOrderStore | None = None
_inventory_store: SQLiteInventoryStore | None = None
_reconciliation_store: SQLiteReconciliationStore | None = None
_ledger_store: SQLiteLedgerStore | None = None


async def get_order_store() -> SQLiteOrderStore:
    """Get singleton order store instance."""
    global _order_store
    if _order_store is None:
        _order_store = SQLiteOrderStore()
    return _order_store


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_reconciliation_store() -> SQLiteReconciliationStore:
    """Get singleton reconciliation store instance."""
    global _reconciliation_store
    if _reconciliation_store is None:
        _reconciliation_store = SQLiteReconciliationStore()
    return _reconciliation_store


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteOrderStore",
    "SQLiteInventoryStore",
    "SQLiteReconciliationStore",
    "SQLiteLedgerStore",
    # Factory functions
    "get_order_store",
    "get_inventory_store",
    "get_reconciliation_store",
    "get_ledger_store",
]
