"""
Recalculation Engine.

Derives order totals from the current line items. Totals are never adjusted
incrementally; every pass starts from the lines and the order's fixed VAT
rate and transport cost.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from orderdesk.core.entities.order import Order, OrderAmounts, SettlementKind

ZERO = Decimal(0)


def round_half_away_from_zero(value: Decimal) -> Decimal:
    """Round to a whole unit; ties go away from zero for either sign."""
    return value.quantize(Decimal(1), rounding=ROUND_HALF_UP)


def classify(difference: Decimal) -> SettlementKind:
    if difference > 0:
        return SettlementKind.AMOUNT_OWED
    if difference < 0:
        return SettlementKind.REFUND_DUE
    return SettlementKind.NO_CHANGE


@dataclass(frozen=True)
class Recalculation:
    """Result of one recompute pass."""

    amounts: OrderAmounts
    due: Decimal


@dataclass(frozen=True)
class ReturnSettlement:
    due: Decimal
    refund_to_customer: Decimal


class RecalculationEngine:
    """Pure total derivation over an order's lines."""

    def recompute(self, order: Order) -> Recalculation:
        subtotal = sum((line.amount for line in order.line_items), ZERO)
        total_discount = sum((line.line_discount for line in order.line_items), ZERO)
        vat_rate = order.amounts.vat_rate
        transport_cost = order.amounts.transport_cost

        vat = round_half_away_from_zero(subtotal * vat_rate / 100)
        total = subtotal + vat + transport_cost

        amounts = OrderAmounts(
            subtotal=subtotal,
            total_discount=total_discount,
            vat_rate=vat_rate,
            vat=vat,
            transport_cost=transport_cost,
            total=total,
        )
        return Recalculation(amounts=amounts, due=total - order.payments.total_paid)

    def settle_return(self, total_paid: Decimal, new_total: Decimal) -> ReturnSettlement:
        """Split an overpayment into a refund, otherwise leave a balance due."""
        if total_paid > new_total:
            return ReturnSettlement(due=ZERO, refund_to_customer=total_paid - new_total)
        return ReturnSettlement(due=new_total - total_paid, refund_to_customer=ZERO)
