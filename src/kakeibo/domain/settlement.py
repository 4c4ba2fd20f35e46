"""Settlement classification.

Decides, for one transaction, which account its cash movement hits, on which
date, and for what signed amount. Pure functions over domain entities.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Union

from kakeibo.domain.entities import (
    LINE_TYPES,
    SettlementEffect,
    Transaction,
    TransactionLine,
    TransactionLineInput,
)
from kakeibo.domain.errors import ValidationError, invalid_choice

INFLOW_LINE_TYPES = frozenset({"income", "liability"})
OUTFLOW_LINE_TYPES = frozenset({"expense", "asset"})

# Input aliases accepted by the validation layer
LINE_TYPE_ALIASES = {"advance": "asset", "loan": "liability"}


@dataclass(frozen=True)
class Unsettled:
    """Accrual only; moves no account balance."""


@dataclass(frozen=True)
class SettledSameAccount:
    """Settled against the transaction's own account for its net line amount."""

    account_id: int
    effective_date: date


@dataclass(frozen=True)
class SettledCrossAccount:
    """Settled against a separate settlement account for a fixed amount."""

    account_id: int
    amount: int
    effective_date: date


SettlementState = Union[Unsettled, SettledSameAccount, SettledCrossAccount]

UNSETTLED = Unsettled()


def normalize_line_type(line_type: str) -> str:
    """Map a user-supplied line type to its stored form.

    Raises:
        ValidationError: If the line type is not recognised
    """
    value = line_type.strip().lower()
    value = LINE_TYPE_ALIASES.get(value, value)
    if value not in LINE_TYPES:
        choices = LINE_TYPES + tuple(LINE_TYPE_ALIASES)
        raise ValidationError(invalid_choice("line type", line_type, choices))
    return value


def line_totals(
    lines: Iterable[Union[TransactionLine, TransactionLineInput]],
) -> tuple[int, int]:
    """Sum line amounts into (total_inflow, total_outflow).

    Lines with an unknown line type count towards neither total.
    """
    total_inflow = 0
    total_outflow = 0
    for line in lines:
        if line.line_type in INFLOW_LINE_TYPES:
            total_inflow += line.amount or 0
        elif line.line_type in OUTFLOW_LINE_TYPES:
            total_outflow += line.amount or 0
    return total_inflow, total_outflow


def is_settled(transaction: Transaction) -> bool:
    """Return True if the transaction's cash movement has happened."""
    if transaction.is_cash_settled:
        return True
    return transaction.settlement_account_id is not None and (transaction.settled_amount or 0) > 0


def effective_date(transaction: Transaction) -> date:
    """Date the cash movement counts from."""
    return transaction.settlement_date or transaction.payment_date or transaction.date


def settlement_state(transaction: Transaction) -> SettlementState:
    """Derive the settlement variant from the transaction's relational fields."""
    if not is_settled(transaction):
        return UNSETTLED

    when = effective_date(transaction)
    if transaction.settlement_account_id is not None:
        if transaction.is_cash_settled:
            amount = transaction.total_amount or 0
        else:
            amount = transaction.settled_amount or 0
        return SettledCrossAccount(
            account_id=transaction.settlement_account_id, amount=amount, effective_date=when
        )
    return SettledSameAccount(account_id=transaction.account_id, effective_date=when)


def classify_transaction(
    transaction: Transaction, opening_dates: Optional[Mapping[int, date]] = None
) -> list[SettlementEffect]:
    """Compute the settlement effects of a transaction.

    Args:
        transaction: Transaction with its lines
        opening_dates: Optional map of account ID to opening date; effects
            dated before the target account's opening date are dropped

    Returns:
        Zero or one SettlementEffect
    """
    total_inflow, total_outflow = line_totals(transaction.lines)
    if total_inflow == 0 and total_outflow == 0:
        return []

    state = settlement_state(transaction)
    if isinstance(state, Unsettled):
        return []

    if isinstance(state, SettledCrossAccount):
        if total_inflow == total_outflow:
            return []
        signed_amount = state.amount if total_inflow > total_outflow else -state.amount
    else:
        signed_amount = total_inflow - total_outflow

    if signed_amount == 0:
        return []

    if opening_dates is not None:
        opening_date = opening_dates.get(state.account_id)
        if opening_date is not None and state.effective_date < opening_date:
            return []

    return [
        SettlementEffect(
            transaction_id=transaction.id,
            account_id=state.account_id,
            effective_date=state.effective_date,
            signed_amount=signed_amount,
        )
    ]


def classify_transactions(
    transactions: Iterable[Transaction], opening_dates: Optional[Mapping[int, date]] = None
) -> list[SettlementEffect]:
    """Classify many transactions, flattening their effects."""
    effects: list[SettlementEffect] = []
    for transaction in transactions:
        effects.extend(classify_transaction(transaction, opening_dates))
    return effects
