"""Tests for how money leaves the API."""

import json
from decimal import Decimal

import pytest

from orderdesk.application.dto.responses import OrderPaymentsResponse, money_to_str


@pytest.mark.parametrize(
    ("value", "text"),
    [
        (Decimal("63"), "63.00"),
        (Decimal("-5"), "-5.00"),
        (Decimal("0"), "0.00"),
        (Decimal("1E+2"), "100.00"),
        (Decimal("19.5"), "19.50"),
        (Decimal("0.125"), "0.125"),
        (Decimal("12345678901234567.89"), "12345678901234567.89"),
    ],
)
def test_money_to_str(value, text):
    assert money_to_str(value) == text


def test_large_totals_keep_every_digit():
    payments = OrderPaymentsResponse(
        total_paid=Decimal("12345678901234567.89"), due=Decimal("0")
    )

    data = json.loads(payments.model_dump_json())

    assert data == {"total_paid": "12345678901234567.89", "due": "0.00"}
    assert Decimal(data["total_paid"]) == payments.total_paid
