"""Tests for the SQLAlchemy database implementation."""

import pytest
from datetime import date

from kakeibo.database import Database, create_database
from kakeibo.database.factories import create_sqlite_database
from kakeibo.domain.entities import TransactionLineInput
from kakeibo.domain.errors import NotFoundError


def test_database_implements_interface(temp_db):
    assert isinstance(temp_db, Database)


def test_create_database_prefers_explicit_path(tmp_path, monkeypatch):
    monkeypatch.setenv("KAKEIBO_DATABASE_URL", "sqlite:///" + str(tmp_path / "from_env.db"))
    db = create_database(database_path=str(tmp_path / "explicit.db"))
    assert db.database_url.endswith("explicit.db")


def test_create_database_uses_url_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("KAKEIBO_DATABASE_URL", "sqlite:///" + str(tmp_path / "from_env.db"))
    db = create_database()
    assert db.database_url.endswith("from_env.db")


def test_create_sqlite_database_uses_env_path(tmp_path, monkeypatch):
    monkeypatch.setenv("KAKEIBO_DB_PATH", str(tmp_path / "env.db"))
    db = create_sqlite_database()
    assert db.database_url == f"sqlite:///{tmp_path / 'env.db'}"


def test_account_round_trip(temp_db):
    account_id = temp_db.create_account("Bank", "bank", 1000, date(2024, 1, 1))
    account = temp_db.get_account(account_id)

    assert account.current_balance == 1000
    assert temp_db.get_account(999) is None


def test_update_balance_of_missing_account(temp_db):
    with pytest.raises(NotFoundError):
        temp_db.update_account_balance(999, 1)


def test_transaction_lines_are_deleted_with_transaction(temp_db):
    account_id = temp_db.create_account("Bank", "bank")
    txn_id = temp_db.create_transaction(
        date=date(2024, 1, 1),
        account_id=account_id,
        total_amount=300,
        lines=[
            TransactionLineInput(amount=100, line_type="expense"),
            TransactionLineInput(amount=200, line_type="expense"),
        ],
    )
    assert len(temp_db.get_transaction(txn_id).lines) == 2

    temp_db.delete_transaction(txn_id)
    assert temp_db.get_transaction(txn_id) is None


def test_list_transactions_ordered_by_date_then_id(temp_db):
    account_id = temp_db.create_account("Bank", "bank")
    later = temp_db.create_transaction(
        date=date(2024, 1, 2), account_id=account_id, total_amount=0, lines=[]
    )
    first = temp_db.create_transaction(
        date=date(2024, 1, 1), account_id=account_id, total_amount=0, lines=[]
    )
    second = temp_db.create_transaction(
        date=date(2024, 1, 1), account_id=account_id, total_amount=0, lines=[]
    )

    ids = [txn.id for txn in temp_db.list_transactions()]
    assert ids == [first, second, later]
    assert [txn.id for txn in temp_db.list_transactions(start_date=date(2024, 1, 2))] == [later]


def test_update_transaction_clears_payment_date(temp_db):
    account_id = temp_db.create_account("Bank", "bank")
    txn_id = temp_db.create_transaction(
        date=date(2024, 1, 1),
        account_id=account_id,
        total_amount=0,
        lines=[],
        payment_date=date(2024, 2, 1),
    )
    temp_db.update_transaction(txn_id, clear_payment_date=True)
    assert temp_db.get_transaction(txn_id).payment_date is None


def test_increment_missing_quick_entry(temp_db):
    with pytest.raises(NotFoundError):
        temp_db.increment_quick_entry_use(999)
