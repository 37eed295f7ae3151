"""
SQLite reconciliation commit.

Writes an order header, its lines and every inventory unit transition in one
``BEGIN IMMEDIATE`` transaction. Each write is guarded by the state it was
computed from, so a concurrent writer makes the whole commit roll back.
"""

import aiosqlite

from orderdesk.config import get_logger
from orderdesk.core.entities.inventory import UnitTransition
from orderdesk.core.entities.order import Order, utcnow
from orderdesk.core.exceptions import ConcurrentModificationError, DatabaseError
from orderdesk.core.interfaces.reconciliation_store import IReconciliationStore
from orderdesk.infrastructure.storage.sqlite.connection import get_transaction
from orderdesk.infrastructure.storage.sqlite.order_store import (
    INSERT_LINE_SQL,
    history_json,
    line_params,
)

logger = get_logger(__name__)


class SQLiteReconciliationStore(IReconciliationStore):
    """Single transaction boundary for order and inventory writes."""

    async def commit(
        self,
        order: Order,
        expected_version: int,
        transitions: list[UnitTransition],
    ) -> Order:
        now = utcnow()
        key = f"{order.domain.value}/{order.id}"

        try:
            async with get_transaction(immediate=True) as conn:
                await self._update_header(conn, order, expected_version, now)

                await conn.execute(
                    "DELETE FROM order_lines WHERE domain = ? AND order_id = ?",
                    (order.domain.value, order.id),
                )
                await conn.executemany(INSERT_LINE_SQL, line_params(order))

                for transition in transitions:
                    await self._apply_transition(conn, transition, now)
        except ConcurrentModificationError:
            logger.info("reconciliation_conflict", order=key)
            raise
        except aiosqlite.Error as e:
            logger.error("reconciliation_commit_failed", order=key, error=str(e))
            raise DatabaseError("reconciliation_commit", str(e)) from e

        order.version = expected_version + 1
        order.updated_at = now
        logger.info(
            "reconciliation_committed",
            order=key,
            version=order.version,
            unit_transitions=len(transitions),
        )
        return order

    @staticmethod
    async def _update_header(
        conn: aiosqlite.Connection, order: Order, expected_version: int, now
    ) -> None:
        cursor = await conn.execute(
            """
            UPDATE orders SET
                subtotal = ?,
                total_discount = ?,
                vat = ?,
                total = ?,
                total_paid = ?,
                due = ?,
                exchange_history_json = ?,
                return_history_json = ?,
                version = version + 1,
                updated_at = ?
            WHERE domain = ? AND id = ? AND version = ?
            """,
            (
                str(order.amounts.subtotal),
                str(order.amounts.total_discount),
                str(order.amounts.vat),
                str(order.amounts.total),
                str(order.payments.total_paid),
                str(order.payments.due),
                history_json(order.exchange_history),
                history_json(order.return_history),
                now.isoformat(),
                order.domain.value,
                order.id,
                expected_version,
            ),
        )
        if cursor.rowcount != 1:
            raise ConcurrentModificationError("order", f"{order.domain.value}/{order.id}")

    @staticmethod
    async def _apply_transition(
        conn: aiosqlite.Connection, transition: UnitTransition, now
    ) -> None:
        unit = transition.unit
        cursor = await conn.execute(
            """
            UPDATE inventory_units SET
                status = ?,
                owning_domain = ?,
                owning_order_id = ?,
                sold_at = ?,
                updated_at = ?
            WHERE code = ?
              AND status = ?
              AND owning_domain IS ?
              AND owning_order_id IS ?
            """,
            (
                unit.status.value,
                unit.owning_domain.value if unit.owning_domain else None,
                unit.owning_order_id,
                unit.sold_at.isoformat() if unit.sold_at else None,
                now.isoformat(),
                unit.code,
                transition.expected_status.value,
                transition.expected_domain.value if transition.expected_domain else None,
                transition.expected_order_id,
            ),
        )
        if cursor.rowcount != 1:
            raise ConcurrentModificationError("inventory_unit", unit.code)
