"""
Dependency injection container for FastAPI.

Provides use case and store instances to route handlers.
"""

from orderdesk.application.use_cases import ProcessExchangeUseCase, ProcessReturnUseCase
from orderdesk.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteLedgerStore,
    SQLiteOrderStore,
    get_inventory_store,
    get_ledger_store,
    get_order_store,
)


# Use case dependencies
def get_process_exchange_use_case() -> ProcessExchangeUseCase:
    return ProcessExchangeUseCase()


def get_process_return_use_case() -> ProcessReturnUseCase:
    return ProcessReturnUseCase()


# Store dependencies
async def get_orders() -> SQLiteOrderStore:
    return await get_order_store()


async def get_inventory() -> SQLiteInventoryStore:
    return await get_inventory_store()


async def get_ledger() -> SQLiteLedgerStore:
    return await get_ledger_store()
