"""Process Return Use Case: take units back from a completed order."""

from dataclasses import dataclass
from decimal import Decimal

from orderdesk.application.dto.requests import ReturnRequest
from orderdesk.application.dto.responses import ReturnResponse
from orderdesk.application.use_cases.reconciliation import (
    ReconciliationUseCase,
    order_to_response,
)
from orderdesk.config import get_logger
from orderdesk.core.entities.ledger import ReturnDelta
from orderdesk.core.entities.order import (
    Order,
    OrderDomain,
    RemovedProduct,
    ReturnRecord,
    utcnow,
)
from orderdesk.core.exceptions import ValidationError
from orderdesk.core.services.allocation import AllocationEngine
from orderdesk.core.services.recalculation import classify

logger = get_logger(__name__)


@dataclass
class ProcessReturnResult:
    """Result of a committed return."""

    order: Order
    refund_amount: Decimal
    refund_to_customer: Decimal
    new_total: Decimal
    new_due: Decimal
    record: ReturnRecord


class ProcessReturnUseCase(ReconciliationUseCase):
    """Release returned units, recompute, settle the balance and commit."""

    operation = "return"

    async def execute(
        self, domain: OrderDomain | str, order_id: str, request: ReturnRequest
    ) -> ProcessReturnResult:
        domain = OrderDomain(domain)
        if not request.returned_products:
            raise ValidationError("returned_products", "return needs at least one product")

        logger.info(
            "return_started",
            domain=domain.value,
            order_id=order_id,
            returned=len(request.returned_products),
        )

        result = await self._run_serialized(
            domain, order_id, lambda: self._attempt(domain, order_id, request)
        )

        delta = ReturnDelta(
            domain=domain,
            order_id=order_id,
            refund_amount=result.refund_amount,
            refund_to_customer=result.refund_to_customer,
            returned_products=result.record.returned_products,
            occurred_at=result.record.timestamp,
        )
        await self._notify("record_return", lambda ledger: ledger.record_return(delta))
        await self._notify(
            "notify_accounting_stale",
            lambda ledger: ledger.notify_accounting_stale(f"return {domain.value}/{order_id}"),
        )

        logger.info(
            "return_complete",
            domain=domain.value,
            order_id=order_id,
            refund_amount=str(result.refund_amount),
            refund_to_customer=str(result.refund_to_customer),
            new_due=str(result.new_due),
            version=result.order.version,
        )
        return result

    async def _attempt(
        self, domain: OrderDomain, order_id: str, request: ReturnRequest
    ) -> ProcessReturnResult:
        order = await self._load_order(domain, order_id)
        original_total = order.amounts.total
        pool = await self._load_pool(order)

        now = utcnow()
        engine = AllocationEngine(pool, now=now)

        returned: list[RemovedProduct] = []
        for entry in request.returned_products:
            line = order.find_line(entry.product_id)
            returned.append(
                RemovedProduct(
                    product_id=entry.product_id,
                    quantity=entry.quantity,
                    product_name=line.product_name if line else None,
                )
            )
            if line is None:
                logger.info("return_line_not_found", order_id=order_id, key=entry.product_id)
                continue
            engine.release(order, line, entry.quantity)

        recalculation = self._recalculation.recompute(order)
        new_total = recalculation.amounts.total
        settlement = self._recalculation.settle_return(order.payments.total_paid, new_total)

        order.amounts = recalculation.amounts
        order.payments.due = settlement.due

        refund_amount = original_total - new_total
        record = ReturnRecord(
            timestamp=now,
            returned_products=returned,
            original_total=original_total,
            new_total=new_total,
            refund_amount=refund_amount,
            refund_to_customer=settlement.refund_to_customer,
            settlement=classify(settlement.due - settlement.refund_to_customer),
            note=self._note(settlement.refund_to_customer, refund_amount),
        )
        order.return_history.append(record)

        store = await self._get_reconciliation_store()
        order = await store.commit(order, order.version, pool.transitions())

        return ProcessReturnResult(
            order=order,
            refund_amount=refund_amount,
            refund_to_customer=settlement.refund_to_customer,
            new_total=new_total,
            new_due=settlement.due,
            record=record,
        )

    def _note(self, refund_to_customer: Decimal, refund_amount: Decimal) -> str:
        symbol = self._get_settings().currency_symbol
        if refund_to_customer > 0:
            return f"Refund {symbol}{refund_to_customer} to customer"
        return f"Order total reduced by {symbol}{refund_amount}"

    def to_response(self, result: ProcessReturnResult) -> ReturnResponse:
        """Convert result to API response."""
        return ReturnResponse(
            message="Return processed successfully",
            order=order_to_response(result.order),
            refund_amount=result.refund_amount,
            refund_to_customer=result.refund_to_customer,
            new_total=result.new_total,
            new_due=result.new_due,
        )
