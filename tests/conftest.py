"""Shared pytest fixtures for kakeibo tests."""

import tempfile
import os
from datetime import date, datetime
import pytest

from kakeibo.database.factories import create_sqlite_database
from kakeibo.domain.account import AccountService
from kakeibo.domain.category import CategoryService
from kakeibo.domain.entities import Account, Transaction, TransactionLine
from kakeibo.domain.reconciliation import ReconciliationService
from kakeibo.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def reconciler(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def bank(account_service):
    """Bank account opened on 2024-01-01 with ¥100,000."""
    account_id = account_service.create_account(
        name="Bank", account_type="bank", opening_balance=100000, opening_date=date(2024, 1, 1)
    )
    return account_service.get_account(account_id)


@pytest.fixture
def card(account_service):
    """Credit card account with no opening state."""
    account_id = account_service.create_account(name="Card", account_type="card")
    return account_service.get_account(account_id)


@pytest.fixture
def wallet(account_service):
    """Cash wallet opened on 2024-01-01 with ¥20,000."""
    account_id = account_service.create_account(
        name="Wallet", account_type="cash", opening_balance=20000, opening_date=date(2024, 1, 1)
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


def make_account(
    account_id=1, name="Bank", opening_balance=0, opening_date=None, current_balance=None
):
    """Build an Account entity without touching the database."""
    return Account(
        id=account_id,
        name=name,
        account_type="bank",
        opening_balance=opening_balance,
        opening_date=opening_date,
        current_balance=current_balance,
        is_active=True,
        created_at=datetime(2024, 1, 1),
    )


def make_transaction(
    transaction_id=1,
    account_id=1,
    lines=(),
    txn_date=date(2024, 1, 10),
    **fields,
):
    """Build a Transaction entity from (line_type, amount) pairs."""
    built_lines = tuple(
        TransactionLine(
            id=index,
            transaction_id=transaction_id,
            amount=amount,
            line_type=line_type,
            category_id=None,
            counterparty=None,
            note=None,
        )
        for index, (line_type, amount) in enumerate(lines, start=1)
    )
    fields.setdefault("total_amount", sum(amount for _, amount in lines))
    return Transaction(
        id=transaction_id,
        date=txn_date,
        account_id=account_id,
        lines=built_lines,
        **fields,
    )
