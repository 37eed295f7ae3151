"""Tests for ProcessExchangeUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from orderdesk.application.dto.requests import (
    ExchangeRequest,
    RemovedProductRequest,
    ReplacementProductRequest,
)
from orderdesk.application.locks import KeyedLock
from orderdesk.application.use_cases.process_exchange import ProcessExchangeUseCase
from orderdesk.config.settings import ReconciliationSettings
from orderdesk.core.entities import OrderDomain, SettlementKind, UnitStatus
from orderdesk.core.exceptions import (
    ConcurrentModificationError,
    InsufficientStockError,
    LedgerError,
    OrderNotFoundError,
    ValidationError,
)

OWNER = (OrderDomain.SALE, "1001")


@pytest.fixture
def order(make_order, make_line):
    # 2 x 100 + 1 x 50, paid in full
    return make_order([make_line("P1", qty=2), make_line("P2", qty=1, unit_price=50)])


@pytest.fixture
def units(make_units):
    return (
        make_units("P1", 2, owner=OWNER)
        + make_units("P2", 1, owner=OWNER)
        + make_units("P3", 3, start=10)
    )


@pytest.fixture
def mock_order_store(order):
    store = AsyncMock()
    store.get_order.side_effect = lambda domain, order_id: order.model_copy(deep=True)
    return store


@pytest.fixture
def mock_inventory_store(units):
    store = AsyncMock()

    def get_units(codes):
        return [u.model_copy() for u in units if u.code in codes]

    def list_available(product_id, limit=None, order="insertion"):
        found = [
            u.model_copy()
            for u in units
            if u.product_id == product_id and u.status == UnitStatus.AVAILABLE
        ]
        return found[:limit] if limit is not None else found

    store.get_units.side_effect = get_units
    store.list_available.side_effect = list_available
    return store


@pytest.fixture
def mock_reconciliation_store():
    store = AsyncMock()

    def commit(order, expected_version, transitions):
        order.version = expected_version + 1
        return order

    store.commit.side_effect = commit
    return store


@pytest.fixture
def mock_ledger():
    return AsyncMock()


@pytest.fixture
def use_case(mock_order_store, mock_inventory_store, mock_reconciliation_store, mock_ledger):
    return ProcessExchangeUseCase(
        order_store=mock_order_store,
        inventory_store=mock_inventory_store,
        reconciliation_store=mock_reconciliation_store,
        ledger=mock_ledger,
        locks=KeyedLock(),
        settings=ReconciliationSettings(max_commit_attempts=3, retry_delay=0),
    )


def _request(removed=(), replacements=()) -> ExchangeRequest:
    return ExchangeRequest(
        removed_products=[
            RemovedProductRequest(product_id=key, quantity=qty) for key, qty in removed
        ],
        replacement_products=[
            ReplacementProductRequest(id=pid, name=f"Product {pid}", price=Decimal(price), quantity=qty)
            for pid, price, qty in replacements
        ],
    )


class TestProcessExchangeUseCase:
    async def test_exchange_customer_owes(self, use_case, mock_reconciliation_store):
        request = _request(removed=[("line-P1", 1)], replacements=[("P3", "80", 2)])

        result = await use_case.execute(OrderDomain.SALE, "1001", request)

        assert result.difference == Decimal("60")
        assert result.due == Decimal("60")
        assert result.order.amounts.total == Decimal("310")
        assert result.order.version == 2
        assert result.record.settlement == SettlementKind.AMOUNT_OWED
        assert result.record.note == "Customer owes additional payment"
        assert result.record.original_total == Decimal("250")
        assert result.record.new_total == Decimal("310")

        line = result.order.find_line("P3")
        assert line.units == ["P3-010", "P3-011"]
        assert result.order.find_line("P1").units == ["P1-002"]

        committed, expected_version, transitions = mock_reconciliation_store.commit.await_args.args
        assert expected_version == 1
        assert {t.code: t.unit.status for t in transitions} == {
            "P1-001": UnitStatus.AVAILABLE,
            "P3-010": UnitStatus.SOLD,
            "P3-011": UnitStatus.SOLD,
        }
        assert committed.exchange_history[-1] is result.record

    async def test_exchange_refund_due(self, use_case):
        request = _request(removed=[("P1", 2)], replacements=[("P3", "80", 1)])

        result = await use_case.execute(OrderDomain.SALE, "1001", request)

        assert result.difference == Decimal("-120")
        assert result.due == Decimal("-120")
        assert result.record.settlement == SettlementKind.REFUND_DUE
        assert result.record.note == "Refund to customer"
        assert result.order.find_line("line-P1") is None

    async def test_even_exchange(self, use_case):
        request = _request(removed=[("P2", 1)], replacements=[("P3", "50", 1)])

        result = await use_case.execute("sale", "1001", request)

        assert result.difference == Decimal("0")
        assert result.record.settlement == SettlementKind.NO_CHANGE
        assert result.record.note == "No payment difference"

    async def test_records_matched_line_names(self, use_case):
        request = _request(removed=[("line-P2", 1), ("missing", 1)], replacements=[("P3", "50", 1)])

        result = await use_case.execute(OrderDomain.SALE, "1001", request)

        removed = result.record.removed_products
        assert [(r.product_id, r.product_name) for r in removed] == [
            ("line-P2", "Product P2"),
            ("missing", None),
        ]

    async def test_unmatched_removal_is_skipped(self, use_case):
        request = _request(removed=[("nope", 1)])

        result = await use_case.execute(OrderDomain.SALE, "1001", request)

        assert result.difference == Decimal("0")
        assert len(result.order.line_items) == 2
        assert len(result.order.exchange_history) == 1

    async def test_insufficient_stock_commits_nothing(
        self, use_case, mock_reconciliation_store, mock_ledger
    ):
        request = _request(removed=[("P1", 1)], replacements=[("P3", "80", 4)])

        with pytest.raises(InsufficientStockError):
            await use_case.execute(OrderDomain.SALE, "1001", request)

        mock_reconciliation_store.commit.assert_not_awaited()
        mock_ledger.record_exchange.assert_not_awaited()

    async def test_empty_request_rejected(self, use_case, mock_order_store):
        with pytest.raises(ValidationError):
            await use_case.execute(OrderDomain.SALE, "1001", ExchangeRequest())

        mock_order_store.get_order.assert_not_awaited()

    async def test_order_not_found(self, use_case, mock_order_store):
        mock_order_store.get_order.side_effect = None
        mock_order_store.get_order.return_value = None

        with pytest.raises(OrderNotFoundError):
            await use_case.execute(OrderDomain.SALE, "404", _request(removed=[("P1", 1)]))

    async def test_notifies_ledger(self, use_case, mock_ledger):
        request = _request(removed=[("P1", 1)], replacements=[("P3", "80", 2)])

        await use_case.execute(OrderDomain.SALE, "1001", request)

        delta = mock_ledger.record_exchange.await_args.args[0]
        assert delta.domain == OrderDomain.SALE
        assert delta.order_id == "1001"
        assert delta.difference == Decimal("60")
        mock_ledger.notify_accounting_stale.assert_awaited_once_with("exchange sale/1001")

    async def test_ledger_failure_does_not_fail_exchange(self, use_case, mock_ledger):
        mock_ledger.record_exchange.side_effect = LedgerError("ledger offline")
        request = _request(removed=[("P1", 1)], replacements=[("P3", "80", 2)])

        result = await use_case.execute(OrderDomain.SALE, "1001", request)

        assert result.order.version == 2
        mock_ledger.notify_accounting_stale.assert_awaited_once()

    async def test_retries_after_conflict(
        self, use_case, mock_order_store, mock_reconciliation_store
    ):
        def commit(order, expected_version, transitions):
            order.version = expected_version + 1
            return order

        mock_reconciliation_store.commit.side_effect = _first_conflict_then(commit)

        result = await use_case.execute(
            OrderDomain.SALE, "1001", _request(replacements=[("P3", "80", 1)])
        )

        assert result.order.version == 2
        assert mock_order_store.get_order.await_count == 2
        assert mock_reconciliation_store.commit.await_count == 2
        # The replayed attempt starts from a fresh load
        assert len(result.order.exchange_history) == 1

    async def test_gives_up_after_max_attempts(
        self, use_case, mock_reconciliation_store, mock_ledger
    ):
        mock_reconciliation_store.commit.side_effect = ConcurrentModificationError(
            "inventory_unit", "P3-010"
        )

        with pytest.raises(ConcurrentModificationError):
            await use_case.execute(
                OrderDomain.SALE, "1001", _request(replacements=[("P3", "80", 1)])
            )

        assert mock_reconciliation_store.commit.await_count == 3
        mock_ledger.record_exchange.assert_not_awaited()

    async def test_to_response(self, use_case):
        request = _request(removed=[("line-P1", 1)], replacements=[("P3", "80", 2)])
        result = await use_case.execute(OrderDomain.SALE, "1001", request)

        response = use_case.to_response(result)
        data = response.model_dump(mode="json")

        assert response.success is True
        assert response.message == "Exchange processed successfully"
        assert data["difference"] == "60.00"
        assert data["due"] == "60.00"
        assert data["order"]["amounts"]["total"] == "310.00"
        assert data["order"]["exchange_history"][0]["note"] == "Customer owes additional payment"


def _first_conflict_then(commit):
    calls = {"n": 0}

    def side_effect(order, expected_version, transitions):
        calls["n"] += 1
        if calls["n"] == 1:
            raise ConcurrentModificationError("order", f"{order.domain.value}/{order.id}")
        return commit(order, expected_version, transitions)

    return side_effect
