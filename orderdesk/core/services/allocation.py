"""
Allocation Engine.

Moves inventory units between ``available`` and ``sold`` on behalf of an
order. All mutation happens on an in-memory working set (``InventoryPool``);
the pool reports the resulting unit transitions, each tagged with the state
the unit must still be in when the caller persists it.
"""

from collections.abc import Iterable
from datetime import datetime

from orderdesk.config import get_logger
from orderdesk.core.entities.inventory import (
    InventoryUnit,
    UnitStatus,
    UnitTransition,
)
from orderdesk.core.entities.order import (
    Order,
    OrderLine,
    ReplacementProduct,
    utcnow,
)
from orderdesk.core.exceptions import InsufficientStockError, ValidationError

logger = get_logger(__name__)


def _insertion_key(unit: InventoryUnit) -> tuple:
    return (unit.seq is None, unit.seq or 0, unit.code)


def _oldest_first_key(unit: InventoryUnit) -> tuple:
    return (unit.created_at, *_insertion_key(unit))


ALLOCATION_ORDERS = {
    "insertion": _insertion_key,
    "oldest_first": _oldest_first_key,
}


class InventoryPool:
    """Working copy of the inventory units one operation may touch."""

    def __init__(self, units: Iterable[InventoryUnit], allocation_order: str = "insertion"):
        if allocation_order not in ALLOCATION_ORDERS:
            raise ValidationError("allocation_order", "unknown allocation order", allocation_order)
        self._sort_key = ALLOCATION_ORDERS[allocation_order]
        self._units: dict[str, InventoryUnit] = {}
        self._snapshot: dict[str, InventoryUnit] = {}
        for unit in units:
            if unit.code in self._units:
                continue
            self._snapshot[unit.code] = unit.model_copy()
            self._units[unit.code] = unit.model_copy()

    def __contains__(self, code: str) -> bool:
        return code in self._units

    def __len__(self) -> int:
        return len(self._units)

    def get(self, code: str) -> InventoryUnit | None:
        return self._units.get(code)

    def available_for(self, product_id: str) -> list[InventoryUnit]:
        """Available units of a product, in allocation order."""
        candidates = [
            u
            for u in self._units.values()
            if u.product_id == product_id and u.status == UnitStatus.AVAILABLE
        ]
        return sorted(candidates, key=self._sort_key)

    def transitions(self) -> list[UnitTransition]:
        """Units whose state changed since the pool was loaded."""
        changes = []
        for code, unit in self._units.items():
            before = self._snapshot[code]
            if (unit.status, unit.owner, unit.sold_at) == (
                before.status,
                before.owner,
                before.sold_at,
            ):
                continue
            changes.append(
                UnitTransition(
                    unit=unit.model_copy(),
                    expected_status=before.status,
                    expected_domain=before.owning_domain,
                    expected_order_id=before.owning_order_id,
                )
            )
        return changes


class AllocationEngine:
    """Releases and allocates units for one order against an InventoryPool."""

    def __init__(self, pool: InventoryPool, now: datetime | None = None):
        self._pool = pool
        self._now = now or utcnow()

    def release(self, order: Order, line: OrderLine, count: int) -> list[str]:
        """
        Release the first ``count`` units bound to ``line``.

        Decrements the line quantity, recomputes its amount and removes the
        line from the order once its quantity reaches zero. Releasing more than
        the line holds releases every bound unit.

        Returns:
            Codes dropped from the line
        """
        if count <= 0:
            raise ValidationError("quantity", "must be positive", count)

        released = line.units[:count]
        del line.units[:count]

        for code in released:
            unit = self._pool.get(code)
            if unit is None:
                logger.warning(
                    "release_unit_missing",
                    unit_code=code,
                    order_id=order.id,
                    domain=order.domain.value,
                )
                continue
            if not unit.is_held_by(order.domain, order.id):
                logger.warning(
                    "release_unit_not_held",
                    unit_code=code,
                    order_id=order.id,
                    status=unit.status.value,
                    owning_order_id=unit.owning_order_id,
                )
                continue
            unit.mark_available(self._now)

        line.qty -= count
        line.recompute_amount()
        if line.qty <= 0:
            order.remove_line(line)
            logger.debug("line_removed", order_id=order.id, line_id=line.id)

        logger.debug(
            "units_released",
            order_id=order.id,
            product_id=line.product_id,
            requested=count,
            released=len(released),
        )
        return released

    def allocate(self, order: Order, product_id: str, count: int) -> list[str]:
        """
        Select ``count`` available units of a product and bind them to ``order``.

        Raises:
            InsufficientStockError: Fewer than ``count`` units are available.
                No unit is touched in that case.
        """
        if count <= 0:
            raise ValidationError("quantity", "must be positive", count)

        candidates = self._pool.available_for(product_id)
        if len(candidates) < count:
            raise InsufficientStockError(product_id, len(candidates), count)

        selected = candidates[:count]
        for unit in selected:
            unit.mark_sold(order.domain, order.id, self._now)

        codes = [u.code for u in selected]
        logger.debug("units_allocated", order_id=order.id, product_id=product_id, units=codes)
        return codes

    def bind_replacement(self, order: Order, product: ReplacementProduct) -> OrderLine:
        """Allocate units for a replacement and attach them to the product's line."""
        codes = self.allocate(order, product.id, product.quantity)

        line = order.line_for_product(product.id)
        if line is None:
            line = OrderLine(
                product_id=product.id,
                product_name=product.name,
                size=product.size,
                qty=0,
                unit_price=product.price,
                line_discount=0,
            )
            order.line_items.append(line)

        line.units.extend(codes)
        line.qty += len(codes)
        line.recompute_amount()
        return line
