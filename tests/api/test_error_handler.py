"""Tests for exception to HTTP status mapping."""

import pytest

from orderdesk.api.middleware.error_handler import _get_hint, _status_for
from orderdesk.core.exceptions import (
    ConcurrentModificationError,
    DatabaseError,
    InsufficientStockError,
    LedgerError,
    OrderNotFoundError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (OrderNotFoundError("sale", "1"), 404),
        (InsufficientStockError("P1", 0, 1), 409),
        (ConcurrentModificationError("order", "sale/1"), 409),
        (ValidationError("quantity", "must be positive"), 400),
        (DatabaseError("commit", "locked"), 500),
        (LedgerError("down"), 500),
        (ValueError("bad"), 500),
        (KeyError("units"), 500),
        (RuntimeError("boom"), 500),
    ],
)
def test_status_for(exc, status):
    assert _status_for(exc) == status


def test_hint_prefers_error_code():
    assert "smaller replacement quantity" in _get_hint("INSUFFICIENT_STOCK", 409)


def test_hint_falls_back_to_status():
    assert _get_hint("SOMETHING_ELSE", 404).startswith("The requested resource")
