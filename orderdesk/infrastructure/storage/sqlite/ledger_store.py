"""SQLite ledger: income/expense transactions and the accounting stale flag."""

from decimal import Decimal

import aiosqlite

from orderdesk.config import get_logger
from orderdesk.core.entities.ledger import (
    EntryType,
    ExchangeDelta,
    LedgerSource,
    LedgerTransaction,
    ReturnDelta,
)
from orderdesk.core.entities.order import utcnow
from orderdesk.core.exceptions import LedgerError
from orderdesk.core.interfaces.ledger import ILedgerNotifier
from orderdesk.core.services.postings import exchange_posting, return_posting
from orderdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from orderdesk.infrastructure.storage.sqlite.order_store import parse_timestamp

logger = get_logger(__name__)


class SQLiteLedgerStore(ILedgerNotifier):
    """Records reconciliation deltas as ledger transactions."""

    async def record_exchange(self, delta: ExchangeDelta) -> None:
        posting = exchange_posting(delta)
        if posting is None:
            logger.debug("ledger_exchange_skipped", order_id=delta.order_id)
            return
        await self.add_transaction(posting)

    async def record_return(self, delta: ReturnDelta) -> None:
        posting = return_posting(delta)
        if posting is None:
            logger.debug("ledger_return_skipped", order_id=delta.order_id)
            return
        await self.add_transaction(posting)

    async def notify_accounting_stale(self, reason: str = "") -> None:
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    UPDATE accounting_state
                    SET stale = 1, reason = ?, marked_at = ?
                    WHERE id = 1
                    """,
                    (reason, utcnow().isoformat()),
                )
        except aiosqlite.Error as e:
            raise LedgerError(f"Failed to mark accounting stale: {e}") from e
        logger.info("accounting_marked_stale", reason=reason)

    async def add_transaction(self, txn: LedgerTransaction) -> LedgerTransaction:
        txn.created_at = utcnow()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO ledger_transactions (
                        name, description, entry_type, amount, category,
                        source, reference_id, comment, occurred_at, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        txn.name,
                        txn.description,
                        txn.entry_type.value,
                        str(txn.amount),
                        txn.category,
                        txn.source.value,
                        txn.reference_id,
                        txn.comment,
                        txn.occurred_at.isoformat(),
                        txn.created_at.isoformat(),
                    ),
                )
                txn.id = cursor.lastrowid
        except aiosqlite.Error as e:
            raise LedgerError(f"Failed to record ledger transaction: {e}") from e

        logger.info(
            "ledger_transaction_recorded",
            transaction_id=txn.id,
            entry_type=txn.entry_type.value,
            amount=str(txn.amount),
            reference_id=txn.reference_id,
        )
        return txn

    async def list_transactions(
        self,
        reference_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[LedgerTransaction]:
        async with get_connection() as conn:
            if reference_id is None:
                cursor = await conn.execute(
                    "SELECT * FROM ledger_transactions ORDER BY id DESC LIMIT ? OFFSET ?",
                    (limit, offset),
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM ledger_transactions
                    WHERE reference_id = ?
                    ORDER BY id DESC LIMIT ? OFFSET ?
                    """,
                    (reference_id, limit, offset),
                )
            return [self._row_to_transaction(r) for r in await cursor.fetchall()]

    async def get_accounting_state(self) -> dict:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM accounting_state WHERE id = 1")
            row = await cursor.fetchone()
        if row is None:
            return {"stale": False, "reason": None, "marked_at": None}
        return {
            "stale": bool(row["stale"]),
            "reason": row["reason"],
            "marked_at": parse_timestamp(row["marked_at"]),
        }

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> LedgerTransaction:
        return LedgerTransaction(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            entry_type=EntryType(row["entry_type"]),
            amount=Decimal(row["amount"]),
            category=row["category"],
            source=LedgerSource(row["source"]),
            reference_id=row["reference_id"],
            comment=row["comment"],
            occurred_at=parse_timestamp(row["occurred_at"]) or utcnow(),
            created_at=parse_timestamp(row["created_at"]) or utcnow(),
        )
