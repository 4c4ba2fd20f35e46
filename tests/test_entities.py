"""Tests for domain entities and formatting helpers."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date

from kakeibo.cli.formatting import format_amount
from kakeibo.domain.entities import (
    OverdueSettlement,
    RecurringTransaction,
    SettlementItem,
    TransactionLineInput,
)
from conftest import make_transaction


def test_transaction_is_frozen():
    txn = make_transaction(lines=[("expense", 100)])
    with pytest.raises(FrozenInstanceError):
        txn.total_amount = 5


def test_transaction_defaults():
    txn = make_transaction(lines=[("expense", 100)])
    assert not txn.is_cash_settled
    assert txn.settled_amount == 0
    assert txn.settlement_account_id is None


def test_line_input_defaults():
    line = TransactionLineInput(amount=100, line_type="expense")
    assert line.category_id is None
    assert line.note is None


def test_registered_description_falls_back_to_name():
    item = RecurringTransaction(
        id=1, name="Rent", account_id=1, total_amount=1, day_of_month=27, payment_delay_days=0
    )
    assert item.registered_description == "Rent"
    assert RecurringTransaction(
        id=2,
        name="Rent",
        account_id=1,
        total_amount=1,
        day_of_month=27,
        payment_delay_days=0,
        description="Apartment rent",
    ).registered_description == "Apartment rent"


def test_remaining_amounts():
    item = SettlementItem(
        transaction_id=1,
        date=date(2024, 1, 1),
        payment_date=None,
        description=None,
        total_amount=5000,
        settled_amount=1500,
        kind="payable",
    )
    assert item.remaining_amount == 3500

    overdue = OverdueSettlement(
        transaction_id=1,
        date=date(2024, 1, 1),
        payment_date=date(2024, 1, 31),
        description=None,
        account_name="Card",
        total_amount=5000,
        settled_amount=0,
        days_overdue=3,
    )
    assert overdue.remaining_amount == 5000


@pytest.mark.parametrize(
    "amount,expected",
    [(1200, "¥1,200"), (-300, "-¥300"), (0, "¥0"), (None, "-")],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected
