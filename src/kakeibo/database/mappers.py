"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from kakeibo.domain import entities as domain
from kakeibo.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    QuickEntry as ORMQuickEntry,
    RecurringTransaction as ORMRecurringTransaction,
    RecurringTransactionLine as ORMRecurringTransactionLine,
    Transaction as ORMTransaction,
    TransactionLine as ORMTransactionLine,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        opening_balance=orm_account.opening_balance,
        opening_date=orm_account.opening_date,
        current_balance=orm_account.current_balance,
        is_active=bool(orm_account.is_active) if orm_account.is_active is not None else True,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        category_type=orm_category.category_type,
        parent_id=orm_category.parent_id,
        is_active=bool(orm_category.is_active) if orm_category.is_active is not None else True,
        created_at=orm_category.created_at,
    )


def transaction_line_to_domain(orm_line: ORMTransactionLine) -> domain.TransactionLine:
    """Convert SQLAlchemy TransactionLine model to domain TransactionLine entity."""
    return domain.TransactionLine(
        id=orm_line.id,
        transaction_id=orm_line.transaction_id,
        amount=orm_line.amount,
        line_type=orm_line.line_type,
        category_id=orm_line.category_id,
        counterparty=orm_line.counterparty,
        note=orm_line.note,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with lines) to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        account_id=orm_transaction.account_id,
        total_amount=orm_transaction.total_amount or 0,
        is_cash_settled=bool(orm_transaction.is_cash_settled),
        settled_amount=orm_transaction.settled_amount or 0,
        payment_date=orm_transaction.payment_date,
        settlement_date=orm_transaction.settlement_date,
        settlement_account_id=orm_transaction.settlement_account_id,
        description=orm_transaction.description,
        lines=tuple(transaction_line_to_domain(line) for line in orm_transaction.lines),
        created_at=orm_transaction.created_at,
    )


def recurring_line_to_domain(
    orm_line: ORMRecurringTransactionLine,
) -> domain.RecurringTransactionLine:
    """Convert SQLAlchemy RecurringTransactionLine model to its domain entity."""
    return domain.RecurringTransactionLine(
        id=orm_line.id,
        amount=orm_line.amount,
        line_type=orm_line.line_type,
        category_id=orm_line.category_id,
        counterparty=orm_line.counterparty,
    )


def recurring_to_domain(orm_recurring: ORMRecurringTransaction) -> domain.RecurringTransaction:
    """Convert SQLAlchemy RecurringTransaction model to its domain entity."""
    return domain.RecurringTransaction(
        id=orm_recurring.id,
        name=orm_recurring.name,
        account_id=orm_recurring.account_id,
        total_amount=orm_recurring.total_amount or 0,
        day_of_month=orm_recurring.day_of_month,
        payment_delay_days=orm_recurring.payment_delay_days or 0,
        description=orm_recurring.description,
        is_active=bool(orm_recurring.is_active),
        lines=tuple(recurring_line_to_domain(line) for line in orm_recurring.lines),
        created_at=orm_recurring.created_at,
    )


def quick_entry_to_domain(orm_entry: ORMQuickEntry) -> domain.QuickEntry:
    """Convert SQLAlchemy QuickEntry model to domain QuickEntry entity."""
    return domain.QuickEntry(
        id=orm_entry.id,
        name=orm_entry.name,
        account_id=orm_entry.account_id,
        line_type=orm_entry.line_type,
        category_id=orm_entry.category_id,
        counterparty=orm_entry.counterparty,
        description=orm_entry.description,
        use_count=orm_entry.use_count or 0,
        is_active=bool(orm_entry.is_active),
        created_at=orm_entry.created_at,
    )
