"""SQLite implementation of the inventory unit pool."""

import aiosqlite

from orderdesk.config import get_logger
from orderdesk.core.entities.inventory import InventoryUnit, UnitStatus
from orderdesk.core.entities.order import OrderDomain, utcnow
from orderdesk.core.exceptions import DatabaseError, DuplicateUnitError, ValidationError
from orderdesk.core.interfaces.inventory_store import IInventoryStore
from orderdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from orderdesk.infrastructure.storage.sqlite.order_store import parse_timestamp

logger = get_logger(__name__)

_ORDER_BY = {
    "insertion": "seq",
    "oldest_first": "created_at, seq",
}


class SQLiteInventoryStore(IInventoryStore):
    """Inventory units shared by every order domain."""

    async def add_units(self, units: list[InventoryUnit]) -> list[InventoryUnit]:
        """Admit units in the given order; their sequence follows that order."""
        now = utcnow()
        async with get_transaction() as conn:
            for unit in units:
                unit.updated_at = now
                try:
                    cursor = await conn.execute(
                        """
                        INSERT INTO inventory_units (
                            code, product_id, status, owning_domain,
                            owning_order_id, sold_at, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            unit.code,
                            unit.product_id,
                            unit.status.value,
                            unit.owning_domain.value if unit.owning_domain else None,
                            unit.owning_order_id,
                            unit.sold_at.isoformat() if unit.sold_at else None,
                            unit.created_at.isoformat(),
                            unit.updated_at.isoformat(),
                        ),
                    )
                except aiosqlite.IntegrityError as e:
                    if "inventory_units.code" in str(e):
                        raise DuplicateUnitError(unit.code) from e
                    raise DatabaseError("add_units", str(e)) from e
                unit.seq = cursor.lastrowid

        logger.info("inventory_units_added", count=len(units))
        return units

    async def get_units(self, codes: list[str]) -> list[InventoryUnit]:
        if not codes:
            return []
        placeholders = ", ".join("?" for _ in codes)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_units WHERE code IN ({placeholders}) ORDER BY seq",
                tuple(codes),
            )
            return [self._row_to_unit(r) for r in await cursor.fetchall()]

    async def list_available(
        self,
        product_id: str,
        limit: int | None = None,
        order: str = "insertion",
    ) -> list[InventoryUnit]:
        if order not in _ORDER_BY:
            raise ValidationError("order", "unknown allocation order", order)

        sql = (
            "SELECT * FROM inventory_units WHERE product_id = ? AND status = ? "
            f"ORDER BY {_ORDER_BY[order]}"
        )
        params: tuple = (product_id, UnitStatus.AVAILABLE.value)
        if limit is not None:
            sql += " LIMIT ?"
            params += (limit,)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            return [self._row_to_unit(r) for r in await cursor.fetchall()]

    async def list_units(
        self,
        product_id: str | None = None,
        status: UnitStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryUnit]:
        conditions = []
        params: list = []
        if product_id is not None:
            conditions.append("product_id = ?")
            params.append(product_id)
        if status is not None:
            conditions.append("status = ?")
            params.append(UnitStatus(status).value)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_units {where} ORDER BY seq LIMIT ? OFFSET ?",
                (*params, limit, offset),
            )
            return [self._row_to_unit(r) for r in await cursor.fetchall()]

    async def count_by_status(self, product_id: str) -> dict[UnitStatus, int]:
        counts = {status: 0 for status in UnitStatus}
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT status, COUNT(*) AS n FROM inventory_units
                WHERE product_id = ?
                GROUP BY status
                """,
                (product_id,),
            )
            for row in await cursor.fetchall():
                counts[UnitStatus(row["status"])] = row["n"]
        return counts

    @staticmethod
    def _row_to_unit(row: aiosqlite.Row) -> InventoryUnit:
        return InventoryUnit(
            code=row["code"],
            product_id=row["product_id"],
            status=UnitStatus(row["status"]),
            owning_domain=OrderDomain(row["owning_domain"]) if row["owning_domain"] else None,
            owning_order_id=row["owning_order_id"],
            sold_at=parse_timestamp(row["sold_at"]),
            seq=row["seq"],
            created_at=parse_timestamp(row["created_at"]) or utcnow(),
            updated_at=parse_timestamp(row["updated_at"]) or utcnow(),
        )
