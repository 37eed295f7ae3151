"""SQLite implementation of order storage."""

import json
from datetime import datetime
from decimal import Decimal

import aiosqlite

from orderdesk.config import get_logger
from orderdesk.core.entities.order import (
    ExchangeRecord,
    Order,
    OrderAmounts,
    OrderDomain,
    OrderLine,
    OrderPayments,
    ReturnRecord,
    utcnow,
)
from orderdesk.core.exceptions import DatabaseError, DuplicateOrderError
from orderdesk.core.interfaces.order_store import IOrderStore
from orderdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

INSERT_LINE_SQL = """
    INSERT INTO order_lines (
        domain, order_id, id, position, product_id, product_name, size,
        qty, unit_price, line_discount, amount, units_json
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def history_json(records: list[ExchangeRecord] | list[ReturnRecord]) -> str:
    return json.dumps([r.model_dump(mode="json") for r in records])


def line_params(order: Order) -> list[tuple]:
    """Insert parameters for every line of an order, in display order."""
    return [
        (
            order.domain.value,
            order.id,
            line.id,
            position,
            line.product_id,
            line.product_name,
            line.size,
            line.qty,
            str(line.unit_price),
            str(line.line_discount),
            str(line.amount),
            json.dumps(line.units),
        )
        for position, line in enumerate(order.line_items)
    ]


class SQLiteOrderStore(IOrderStore):
    """SQLite implementation of order storage for both order domains."""

    async def create_order(self, order: Order) -> Order:
        now = utcnow()
        order.created_at = now
        order.updated_at = now
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO orders (
                        domain, id, subtotal, total_discount, vat_rate, vat,
                        transport_cost, total, total_paid, due,
                        exchange_history_json, return_history_json,
                        version, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.domain.value,
                        order.id,
                        str(order.amounts.subtotal),
                        str(order.amounts.total_discount),
                        str(order.amounts.vat_rate),
                        str(order.amounts.vat),
                        str(order.amounts.transport_cost),
                        str(order.amounts.total),
                        str(order.payments.total_paid),
                        str(order.payments.due),
                        history_json(order.exchange_history),
                        history_json(order.return_history),
                        order.version,
                        order.created_at.isoformat(),
                        order.updated_at.isoformat(),
                    ),
                )
                await conn.executemany(INSERT_LINE_SQL, line_params(order))
        except aiosqlite.IntegrityError as e:
            if "constraint failed: orders." in str(e):
                raise DuplicateOrderError(order.domain.value, order.id) from e
            raise DatabaseError("create_order", str(e)) from e

        logger.info(
            "order_created",
            domain=order.domain.value,
            order_id=order.id,
            lines=len(order.line_items),
            total=str(order.amounts.total),
        )
        return order

    async def get_order(self, domain: OrderDomain, order_id: str) -> Order | None:
        domain = OrderDomain(domain)
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM orders WHERE domain = ? AND id = ?",
                (domain.value, order_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            lines = await self._load_lines(conn, domain, order_id)
            return self._row_to_order(row, lines)

    async def list_orders(
        self, domain: OrderDomain, limit: int = 100, offset: int = 0
    ) -> list[Order]:
        domain = OrderDomain(domain)
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM orders
                WHERE domain = ?
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (domain.value, limit, offset),
            )
            rows = await cursor.fetchall()

            orders = []
            for row in rows:
                lines = await self._load_lines(conn, domain, row["id"])
                orders.append(self._row_to_order(row, lines))
            return orders

    @classmethod
    async def _load_lines(
        cls, conn: aiosqlite.Connection, domain: OrderDomain, order_id: str
    ) -> list[OrderLine]:
        cursor = await conn.execute(
            """
            SELECT * FROM order_lines
            WHERE domain = ? AND order_id = ?
            ORDER BY position
            """,
            (domain.value, order_id),
        )
        return [cls._row_to_line(r) for r in await cursor.fetchall()]

    @staticmethod
    def _row_to_order(row: aiosqlite.Row, lines: list[OrderLine]) -> Order:
        return Order(
            domain=OrderDomain(row["domain"]),
            id=row["id"],
            line_items=lines,
            amounts=OrderAmounts(
                subtotal=Decimal(row["subtotal"]),
                total_discount=Decimal(row["total_discount"]),
                vat_rate=Decimal(row["vat_rate"]),
                vat=Decimal(row["vat"]),
                transport_cost=Decimal(row["transport_cost"]),
                total=Decimal(row["total"]),
            ),
            payments=OrderPayments(
                total_paid=Decimal(row["total_paid"]),
                due=Decimal(row["due"]),
            ),
            exchange_history=[
                ExchangeRecord.model_validate(r)
                for r in json.loads(row["exchange_history_json"] or "[]")
            ],
            return_history=[
                ReturnRecord.model_validate(r)
                for r in json.loads(row["return_history_json"] or "[]")
            ],
            version=row["version"],
            created_at=parse_timestamp(row["created_at"]) or utcnow(),
            updated_at=parse_timestamp(row["updated_at"]) or utcnow(),
        )

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> OrderLine:
        return OrderLine(
            id=row["id"],
            product_id=row["product_id"],
            product_name=row["product_name"] or "",
            size=row["size"],
            qty=row["qty"],
            unit_price=Decimal(row["unit_price"]),
            line_discount=Decimal(row["line_discount"]),
            units=json.loads(row["units_json"] or "[]"),
        )
