"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from orderdesk.core.entities import (
    InventoryUnit,
    Order,
    OrderAmounts,
    OrderDomain,
    OrderLine,
    OrderPayments,
)
from orderdesk.core.services.recalculation import RecalculationEngine
from orderdesk.infrastructure.storage.sqlite import connection as conn_module
from orderdesk.infrastructure.storage.sqlite.connection import close_pool
from orderdesk.infrastructure.storage.sqlite.migrations import run_migrations

BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def make_line() -> Callable[..., OrderLine]:
    """Build an order line whose units are ``<product>-001``, ``<product>-002``..."""

    def _make(
        product_id: str = "P1",
        qty: int = 2,
        unit_price: str | int = 100,
        line_discount: str | int = 0,
        line_id: str | None = None,
        first_unit: int = 1,
        name: str | None = None,
    ) -> OrderLine:
        return OrderLine(
            id=line_id or f"line-{product_id}",
            product_id=product_id,
            product_name=name or f"Product {product_id}",
            qty=qty,
            unit_price=Decimal(unit_price),
            line_discount=Decimal(line_discount),
            units=[f"{product_id}-{i:03d}" for i in range(first_unit, first_unit + qty)],
        )

    return _make


@pytest.fixture
def make_order() -> Callable[..., Order]:
    """Build an order with totals derived from its lines. Paid in full by default."""

    def _make(
        lines: list[OrderLine],
        domain: OrderDomain = OrderDomain.SALE,
        order_id: str = "1001",
        vat_rate: str | int = 0,
        transport_cost: str | int = 0,
        total_paid: str | int | None = None,
    ) -> Order:
        order = Order(
            domain=domain,
            id=order_id,
            line_items=lines,
            amounts=OrderAmounts(
                vat_rate=Decimal(vat_rate),
                transport_cost=Decimal(transport_cost),
            ),
        )
        recalculation = RecalculationEngine().recompute(order)
        paid = recalculation.amounts.total if total_paid is None else Decimal(total_paid)
        order.amounts = recalculation.amounts
        order.payments = OrderPayments(
            total_paid=paid,
            due=recalculation.amounts.total - paid,
        )
        return order

    return _make


@pytest.fixture
def make_units() -> Callable[..., list[InventoryUnit]]:
    """Build units ``<product>-NNN``; pass ``owner`` to mark them sold to an order."""

    def _make(
        product_id: str,
        count: int,
        start: int = 1,
        owner: tuple[OrderDomain, str] | None = None,
    ) -> list[InventoryUnit]:
        units = []
        for i in range(start, start + count):
            unit = InventoryUnit(
                code=f"{product_id}-{i:03d}",
                product_id=product_id,
                seq=i,
                created_at=BASE_TIME + timedelta(minutes=i),
            )
            if owner is not None:
                unit.mark_sold(owner[0], owner[1], BASE_TIME)
            units.append(unit)
        return units

    return _make


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def migrated_db(temp_db_path: Path, mock_settings) -> AsyncGenerator[Path, None]:
    """Migrated temporary database behind the global connection pool."""
    results = await run_migrations(temp_db_path)
    assert results and all(r.success for r in results)

    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await close_pool()
