"""Tests for settlement classification."""

import pytest
from datetime import date

from kakeibo.domain.errors import ValidationError
from kakeibo.domain.settlement import (
    SettledCrossAccount,
    SettledSameAccount,
    Unsettled,
    classify_transaction,
    classify_transactions,
    effective_date,
    is_settled,
    line_totals,
    normalize_line_type,
    settlement_state,
)
from conftest import make_transaction


class TestLineTotals:
    """Tests for inflow/outflow aggregation."""

    def test_income_and_liability_are_inflow(self):
        txn = make_transaction(lines=[("income", 1000), ("liability", 500)])
        assert line_totals(txn.lines) == (1500, 0)

    def test_expense_and_asset_are_outflow(self):
        txn = make_transaction(lines=[("expense", 1200), ("asset", 300)])
        assert line_totals(txn.lines) == (0, 1500)

    def test_unknown_line_type_is_ignored(self):
        txn = make_transaction(lines=[("expense", 1200), ("transfer", 999)])
        assert line_totals(txn.lines) == (0, 1200)


class TestNormalizeLineType:
    """Tests for line type validation."""

    def test_aliases(self):
        assert normalize_line_type("advance") == "asset"
        assert normalize_line_type("loan") == "liability"

    def test_case_and_whitespace(self):
        assert normalize_line_type("  Expense ") == "expense"

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError, match="Invalid line type"):
            normalize_line_type("transfer")


class TestSettlementState:
    """Tests for the settlement variant derived from transaction fields."""

    def test_not_settled_by_default(self):
        txn = make_transaction(lines=[("expense", 1000)])
        assert not is_settled(txn)
        assert isinstance(settlement_state(txn), Unsettled)

    def test_cash_settled_same_account(self):
        txn = make_transaction(account_id=3, lines=[("expense", 1000)], is_cash_settled=True)
        state = settlement_state(txn)
        assert state == SettledSameAccount(account_id=3, effective_date=date(2024, 1, 10))

    def test_partial_cross_account_is_settled(self):
        txn = make_transaction(
            lines=[("expense", 1000)], settlement_account_id=2, settled_amount=400
        )
        assert is_settled(txn)
        state = settlement_state(txn)
        assert isinstance(state, SettledCrossAccount)
        assert state.account_id == 2
        assert state.amount == 400

    def test_settlement_account_without_amount_is_unsettled(self):
        txn = make_transaction(lines=[("expense", 1000)], settlement_account_id=2, settled_amount=0)
        assert not is_settled(txn)

    def test_settled_amount_without_settlement_account_is_unsettled(self):
        txn = make_transaction(lines=[("expense", 1000)], settled_amount=500)
        assert not is_settled(txn)

    def test_cash_settled_cross_account_uses_total_amount(self):
        txn = make_transaction(
            lines=[("expense", 1000)],
            total_amount=1000,
            is_cash_settled=True,
            settled_amount=300,
            settlement_account_id=2,
        )
        assert settlement_state(txn).amount == 1000


class TestEffectiveDate:
    """Tests for effective date precedence."""

    def test_settlement_date_wins(self):
        txn = make_transaction(
            payment_date=date(2024, 2, 27), settlement_date=date(2024, 2, 26)
        )
        assert effective_date(txn) == date(2024, 2, 26)

    def test_payment_date_before_accrual_date(self):
        txn = make_transaction(payment_date=date(2024, 2, 27))
        assert effective_date(txn) == date(2024, 2, 27)

    def test_falls_back_to_accrual_date(self):
        txn = make_transaction()
        assert effective_date(txn) == date(2024, 1, 10)


class TestClassifyTransaction:
    """Tests for settlement effects."""

    def test_unsettled_has_no_effect(self):
        txn = make_transaction(lines=[("expense", 5000)], payment_date=date(2024, 2, 27))
        assert classify_transaction(txn) == []

    def test_same_account_expense(self):
        txn = make_transaction(lines=[("expense", 1200)], is_cash_settled=True)
        [effect] = classify_transaction(txn)
        assert effect.account_id == 1
        assert effect.signed_amount == -1200
        assert effect.effective_date == date(2024, 1, 10)

    def test_same_account_net_of_mixed_lines(self):
        txn = make_transaction(
            lines=[("income", 3000), ("expense", 1000), ("asset", 500)], is_cash_settled=True
        )
        [effect] = classify_transaction(txn)
        assert effect.signed_amount == 1500

    def test_same_account_zero_net_has_no_effect(self):
        txn = make_transaction(lines=[("income", 1000), ("expense", 1000)], is_cash_settled=True)
        assert classify_transaction(txn) == []

    def test_no_lines_has_no_effect(self):
        txn = make_transaction(lines=[], total_amount=5000, is_cash_settled=True)
        assert classify_transaction(txn) == []

    def test_card_purchase_paid_from_bank(self):
        txn = make_transaction(
            account_id=2,
            lines=[("expense", 5000)],
            is_cash_settled=True,
            settlement_account_id=1,
            settlement_date=date(2024, 2, 27),
        )
        [effect] = classify_transaction(txn)
        assert effect.account_id == 1
        assert effect.signed_amount == -5000
        assert effect.effective_date == date(2024, 2, 27)

    def test_partial_receivable_collected(self):
        txn = make_transaction(
            account_id=2,
            lines=[("income", 10000)],
            settled_amount=4000,
            settlement_account_id=1,
            settlement_date=date(2024, 3, 1),
        )
        [effect] = classify_transaction(txn)
        assert effect.account_id == 1
        assert effect.signed_amount == 4000

    def test_cross_account_balanced_lines_have_no_effect(self):
        txn = make_transaction(
            lines=[("income", 1000), ("expense", 1000)],
            is_cash_settled=True,
            settlement_account_id=2,
        )
        assert classify_transaction(txn) == []

    def test_cross_account_zero_amount_has_no_effect(self):
        txn = make_transaction(
            lines=[("expense", 1000)],
            total_amount=0,
            is_cash_settled=True,
            settlement_account_id=2,
        )
        assert classify_transaction(txn) == []

    def test_effect_before_opening_date_is_dropped(self):
        txn = make_transaction(lines=[("expense", 1000)], is_cash_settled=True)
        assert classify_transaction(txn, opening_dates={1: date(2024, 2, 1)}) == []
        assert len(classify_transaction(txn, opening_dates={1: date(2024, 1, 10)})) == 1

    def test_classify_transactions_flattens(self):
        transactions = [
            make_transaction(1, lines=[("expense", 100)], is_cash_settled=True),
            make_transaction(2, lines=[("expense", 200)]),
            make_transaction(3, lines=[("income", 300)], is_cash_settled=True),
        ]
        effects = classify_transactions(transactions)
        assert [effect.transaction_id for effect in effects] == [1, 3]
        assert sum(effect.signed_amount for effect in effects) == 200
