"""Ledger endpoints."""

from fastapi import APIRouter, Depends, Query

from orderdesk.api.dependencies import get_ledger
from orderdesk.application.dto.responses import (
    LedgerTransactionListResponse,
    LedgerTransactionResponse,
)
from orderdesk.infrastructure.storage.sqlite import SQLiteLedgerStore

router = APIRouter(prefix="/api/ledger", tags=["ledger"])


@router.get("/transactions", response_model=LedgerTransactionListResponse)
async def list_transactions(
    reference_id: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> LedgerTransactionListResponse:
    """List ledger transactions recorded by exchanges and returns, newest first."""
    transactions = await store.list_transactions(
        reference_id=reference_id, limit=limit, offset=offset
    )
    state = await store.get_accounting_state()
    return LedgerTransactionListResponse(
        transactions=[
            LedgerTransactionResponse.model_validate(t.model_dump(mode="json"))
            for t in transactions
        ],
        total=len(transactions),
        accounting_stale=state["stale"],
    )
