"""Turns reconciliation deltas into ledger transactions."""

from decimal import Decimal

from orderdesk.core.entities.ledger import (
    EntryType,
    ExchangeDelta,
    LedgerSource,
    LedgerTransaction,
    ReturnDelta,
)
from orderdesk.core.entities.order import RemovedProduct, ReplacementProduct
from orderdesk.core.services.domains import get_profile


def _describe_removed(products: list[RemovedProduct]) -> str:
    return ", ".join(f"{p.product_name or 'Item'} x{p.quantity}" for p in products)


def _describe_added(products: list[ReplacementProduct]) -> str:
    return ", ".join(f"{p.name or 'Item'} x{p.quantity}" for p in products)


def exchange_posting(delta: ExchangeDelta) -> LedgerTransaction | None:
    """Income for an additional payment, expense for a refund, nothing when even."""
    if delta.difference == 0:
        return None

    profile = get_profile(delta.domain)
    if delta.difference > 0:
        name = f"{profile.display_name} Exchange - Additional Payment"
        entry_type = EntryType.INCOME
    else:
        name = f"{profile.display_name} Exchange - Refund"
        entry_type = EntryType.EXPENSE

    return LedgerTransaction(
        name=name,
        description=f"Exchange on {profile.display_name.lower()} #{delta.order_id}",
        entry_type=entry_type,
        amount=abs(delta.difference),
        category=profile.income_category,
        source=LedgerSource.EXCHANGE,
        reference_id=profile.reference(delta.order_id),
        comment=(
            f"Removed: {_describe_removed(delta.removed_products)}. "
            f"Added: {_describe_added(delta.replacement_products)}"
        ),
        occurred_at=delta.occurred_at,
    )


def return_posting(delta: ReturnDelta) -> LedgerTransaction | None:
    """An expense for money handed back; nothing when only the balance shrank."""
    if delta.refund_to_customer <= Decimal(0):
        return None

    profile = get_profile(delta.domain)
    return LedgerTransaction(
        name=f"{profile.display_name} Return - Refund",
        description=f"Return on {profile.display_name.lower()} #{delta.order_id}",
        entry_type=EntryType.EXPENSE,
        amount=delta.refund_to_customer,
        category=profile.return_category,
        source=LedgerSource.RETURN,
        reference_id=profile.reference(delta.order_id),
        comment=f"Returned: {_describe_removed(delta.returned_products)}",
        occurred_at=delta.occurred_at,
    )
