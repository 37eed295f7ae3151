"""Inventory unit endpoints (read-only)."""

from fastapi import APIRouter, Depends, Query

from orderdesk.api.dependencies import get_inventory
from orderdesk.application.dto.responses import (
    InventoryUnitListResponse,
    InventoryUnitResponse,
    ProductStockResponse,
)
from orderdesk.core.entities.inventory import UnitStatus
from orderdesk.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/units", response_model=InventoryUnitListResponse)
async def list_units(
    product_id: str | None = None,
    status: UnitStatus | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteInventoryStore = Depends(get_inventory),
) -> InventoryUnitListResponse:
    """List inventory units, optionally filtered by product and status."""
    units = await store.list_units(
        product_id=product_id, status=status, limit=limit, offset=offset
    )
    return InventoryUnitListResponse(
        units=[InventoryUnitResponse.model_validate(u.model_dump(mode="json")) for u in units],
        total=len(units),
        limit=limit,
        offset=offset,
    )


@router.get("/products/{product_id}/stock", response_model=ProductStockResponse)
async def product_stock(
    product_id: str,
    store: SQLiteInventoryStore = Depends(get_inventory),
) -> ProductStockResponse:
    """Available and sold unit counts for a product."""
    counts = await store.count_by_status(product_id)
    available = counts.get(UnitStatus.AVAILABLE, 0)
    sold = counts.get(UnitStatus.SOLD, 0)
    return ProductStockResponse(
        product_id=product_id,
        available=available,
        sold=sold,
        total=available + sold,
    )
