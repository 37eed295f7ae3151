"""Process Exchange Use Case: swap units on a completed order."""

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal

from orderdesk.application.dto.requests import ExchangeRequest
from orderdesk.application.dto.responses import ExchangeResponse
from orderdesk.application.use_cases.reconciliation import (
    ReconciliationUseCase,
    order_to_response,
)
from orderdesk.config import get_logger
from orderdesk.core.entities.ledger import ExchangeDelta
from orderdesk.core.entities.order import (
    ExchangeRecord,
    Order,
    OrderDomain,
    RemovedProduct,
    ReplacementProduct,
    SettlementKind,
    utcnow,
)
from orderdesk.core.exceptions import ValidationError
from orderdesk.core.services.allocation import AllocationEngine
from orderdesk.core.services.recalculation import classify

logger = get_logger(__name__)

EXCHANGE_NOTES = {
    SettlementKind.AMOUNT_OWED: "Customer owes additional payment",
    SettlementKind.REFUND_DUE: "Refund to customer",
    SettlementKind.NO_CHANGE: "No payment difference",
}


@dataclass
class ProcessExchangeResult:
    """Result of a committed exchange."""

    order: Order
    difference: Decimal
    due: Decimal
    record: ExchangeRecord


class ProcessExchangeUseCase(ReconciliationUseCase):
    """Release removed units, allocate replacements, recompute and commit."""

    operation = "exchange"

    async def execute(
        self, domain: OrderDomain | str, order_id: str, request: ExchangeRequest
    ) -> ProcessExchangeResult:
        domain = OrderDomain(domain)
        if not request.removed_products and not request.replacement_products:
            raise ValidationError(
                "removed_products", "exchange needs at least one removed or replacement product"
            )

        logger.info(
            "exchange_started",
            domain=domain.value,
            order_id=order_id,
            removed=len(request.removed_products),
            replacements=len(request.replacement_products),
        )

        result = await self._run_serialized(
            domain, order_id, lambda: self._attempt(domain, order_id, request)
        )

        delta = ExchangeDelta(
            domain=domain,
            order_id=order_id,
            difference=result.difference,
            removed_products=result.record.removed_products,
            replacement_products=result.record.replacement_products,
            occurred_at=result.record.timestamp,
        )
        await self._notify("record_exchange", lambda ledger: ledger.record_exchange(delta))
        await self._notify(
            "notify_accounting_stale",
            lambda ledger: ledger.notify_accounting_stale(f"exchange {domain.value}/{order_id}"),
        )

        logger.info(
            "exchange_complete",
            domain=domain.value,
            order_id=order_id,
            difference=str(result.difference),
            due=str(result.due),
            version=result.order.version,
        )
        return result

    async def _attempt(
        self, domain: OrderDomain, order_id: str, request: ExchangeRequest
    ) -> ProcessExchangeResult:
        order = await self._load_order(domain, order_id)
        original_total = order.amounts.total

        wanted: Counter[str] = Counter()
        for rep in request.replacement_products:
            wanted[rep.id] += rep.quantity
        pool = await self._load_pool(order, dict(wanted))

        now = utcnow()
        engine = AllocationEngine(pool, now=now)

        removed: list[RemovedProduct] = []
        for entry in request.removed_products:
            line = order.find_line(entry.product_id)
            removed.append(
                RemovedProduct(
                    product_id=entry.product_id,
                    quantity=entry.quantity,
                    product_name=line.product_name if line else None,
                )
            )
            if line is None:
                logger.info("exchange_line_not_found", order_id=order_id, key=entry.product_id)
                continue
            engine.release(order, line, entry.quantity)

        replacements = [
            ReplacementProduct(
                id=rep.id,
                name=rep.name,
                price=rep.price,
                size=rep.size,
                quantity=rep.quantity,
            )
            for rep in request.replacement_products
        ]
        for product in replacements:
            engine.bind_replacement(order, product)

        recalculation = self._recalculation.recompute(order)
        order.amounts = recalculation.amounts
        order.payments.due = recalculation.due

        difference = recalculation.amounts.total - original_total
        settlement = classify(difference)
        record = ExchangeRecord(
            timestamp=now,
            removed_products=removed,
            replacement_products=replacements,
            original_total=original_total,
            new_total=recalculation.amounts.total,
            difference=difference,
            settlement=settlement,
            note=EXCHANGE_NOTES[settlement],
        )
        order.exchange_history.append(record)

        store = await self._get_reconciliation_store()
        order = await store.commit(order, order.version, pool.transitions())

        return ProcessExchangeResult(
            order=order,
            difference=difference,
            due=recalculation.due,
            record=record,
        )

    def to_response(self, result: ProcessExchangeResult) -> ExchangeResponse:
        """Convert result to API response."""
        return ExchangeResponse(
            message="Exchange processed successfully",
            order=order_to_response(result.order),
            difference=result.difference,
            due=result.due,
        )
