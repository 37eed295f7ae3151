"""Storage infrastructure implementations."""

from orderdesk.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteLedgerStore,
    SQLiteOrderStore,
    SQLiteReconciliationStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteOrderStore",
    "SQLiteInventoryStore",
    "SQLiteReconciliationStore",
    "SQLiteLedgerStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
