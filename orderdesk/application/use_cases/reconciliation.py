"""
Shared machinery for exchange and return processing.

Every operation runs against state loaded fresh from the stores, mutates it
in memory, and persists it through one guarded commit. A lost race discards
the in-memory work and replays the whole operation from a fresh load.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from orderdesk.application.dto.responses import OrderResponse
from orderdesk.application.locks import KeyedLock, get_order_locks
from orderdesk.config import get_logger
from orderdesk.config.settings import ReconciliationSettings
from orderdesk.core.entities.inventory import InventoryUnit
from orderdesk.core.entities.order import Order, OrderDomain
from orderdesk.core.exceptions import ConcurrentModificationError, OrderNotFoundError
from orderdesk.core.interfaces.inventory_store import IInventoryStore
from orderdesk.core.interfaces.ledger import ILedgerNotifier
from orderdesk.core.interfaces.order_store import IOrderStore
from orderdesk.core.interfaces.reconciliation_store import IReconciliationStore
from orderdesk.core.services.allocation import InventoryPool
from orderdesk.core.services.recalculation import RecalculationEngine

logger = get_logger(__name__)

T = TypeVar("T")


def order_to_response(order: Order) -> OrderResponse:
    """Convert an Order entity to its response DTO."""
    return OrderResponse.model_validate(order.model_dump(mode="json"))


class ReconciliationUseCase:
    """Base for use cases that rewrite a committed order and its units."""

    operation = "reconciliation"

    def __init__(
        self,
        order_store: IOrderStore | None = None,
        inventory_store: IInventoryStore | None = None,
        reconciliation_store: IReconciliationStore | None = None,
        ledger: ILedgerNotifier | None = None,
        locks: KeyedLock | None = None,
        settings: ReconciliationSettings | None = None,
    ):
        self._order_store = order_store
        self._inventory_store = inventory_store
        self._reconciliation_store = reconciliation_store
        self._ledger = ledger
        self._locks = locks or get_order_locks()
        self._settings = settings
        self._recalculation = RecalculationEngine()

    async def _get_order_store(self) -> IOrderStore:
        if self._order_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_order_store

            self._order_store = await get_order_store()
        return self._order_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_reconciliation_store(self) -> IReconciliationStore:
        if self._reconciliation_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_reconciliation_store

            self._reconciliation_store = await get_reconciliation_store()
        return self._reconciliation_store

    async def _get_ledger(self) -> ILedgerNotifier:
        if self._ledger is None:
            from orderdesk.infrastructure.storage.sqlite import get_ledger_store

            self._ledger = await get_ledger_store()
        return self._ledger

    def _get_settings(self) -> ReconciliationSettings:
        if self._settings is None:
            from orderdesk.config import get_settings

            self._settings = get_settings().reconciliation
        return self._settings

    async def _run_serialized(
        self,
        domain: OrderDomain,
        order_id: str,
        attempt: Callable[[], Awaitable[T]],
    ) -> T:
        """Run ``attempt`` under the order's lock, replaying it on lost races."""
        settings = self._get_settings()
        max_attempts = max(1, settings.max_commit_attempts)

        n = 0
        async with self._locks.hold((domain, order_id)):
            while True:
                n += 1
                try:
                    return await attempt()
                except ConcurrentModificationError as e:
                    if n >= max_attempts:
                        logger.warning(
                            f"{self.operation}_retries_exhausted",
                            domain=domain.value,
                            order_id=order_id,
                            attempts=n,
                        )
                        raise
                    logger.info(
                        f"{self.operation}_retrying",
                        domain=domain.value,
                        order_id=order_id,
                        attempt=n,
                        conflict=e.details,
                    )
                    await asyncio.sleep(settings.retry_delay * n)

    async def _load_order(self, domain: OrderDomain, order_id: str) -> Order:
        store = await self._get_order_store()
        order = await store.get_order(domain, order_id)
        if order is None:
            raise OrderNotFoundError(domain.value, order_id)
        return order

    async def _load_pool(
        self, order: Order, wanted: dict[str, int] | None = None
    ) -> InventoryPool:
        """Load the order's bound units plus enough available units per product."""
        settings = self._get_settings()
        inventory = await self._get_inventory_store()

        units: list[InventoryUnit] = list(await inventory.get_units(order.bound_units))
        for product_id, count in (wanted or {}).items():
            units.extend(
                await inventory.list_available(
                    product_id, limit=count, order=settings.allocation_order
                )
            )
        return InventoryPool(units, allocation_order=settings.allocation_order)

    async def _notify(self, event: str, call: Callable[[ILedgerNotifier], Awaitable[None]]) -> None:
        """Call the ledger; failures are logged and never propagate."""
        try:
            ledger = await self._get_ledger()
            await call(ledger)
        except Exception as e:
            logger.error("ledger_notify_failed", ledger_event=event, error=str(e))
