"""Tests for transaction, settlement and reconciliation commands."""

import pytest
from datetime import date

from kakeibo.cli.main import cli
from kakeibo.domain.entities import TransactionLineInput
from kakeibo.domain.errors import StorageError
from kakeibo.domain.reconciliation import ReconciliationService


def run(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def stored_balance(temp_db, account_id):
    # Drop the fixture's session so reads see what the command committed
    temp_db.disconnect()
    return temp_db.get_account(account_id).current_balance


def test_add_cash_expense(cli_runner, temp_db, wallet):
    result = run(
        cli_runner,
        temp_db,
        "add",
        "--account",
        "Wallet",
        "--date",
        "2024-02-01",
        "--line",
        "expense",
        "1,200",
        "--description",
        "Lunch",
    )

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert "Status: settled" in result.output
    assert stored_balance(temp_db, wallet.id) == 18800


def test_add_deferred_card_purchase(cli_runner, temp_db, card):
    result = run(
        cli_runner,
        temp_db,
        "add",
        "--account",
        "Card",
        "--deferred",
        "--date",
        "2024-02-01",
        "--payment-date",
        "2024-03-27",
        "--line",
        "expense",
        "5000",
    )

    assert result.exit_code == 0
    assert "Status: deferred" in result.output
    assert stored_balance(temp_db, card.id) == 0


def test_add_with_unknown_account(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "add", "--account", "Nope", "--line", "expense", "100")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_add_with_invalid_line_type(cli_runner, temp_db, wallet):
    result = run(cli_runner, temp_db, "add", "--account", "Wallet", "--line", "gift", "100")

    assert result.exit_code == 1
    assert "Invalid line type" in result.output


def test_add_with_invalid_amount(cli_runner, temp_db, wallet):
    result = run(cli_runner, temp_db, "add", "--account", "Wallet", "--line", "expense", "12.5")

    assert result.exit_code == 1
    assert "Invalid line amount" in result.output


def test_transaction_list_show_delete(cli_runner, temp_db, wallet, transaction_service):
    txn_id = transaction_service.create_transaction(
        account_id=wallet.id,
        date=date(2024, 2, 1),
        lines=[TransactionLineInput(amount=800, line_type="expense")],
        description="Books",
        is_cash_settled=True,
    )

    result = run(cli_runner, temp_db, "transaction", "list", "--account", "Wallet")
    assert result.exit_code == 0
    assert "Books" in result.output

    result = run(cli_runner, temp_db, "transaction", "show", str(txn_id))
    assert result.exit_code == 0
    assert "Cash settled: yes" in result.output
    assert "expense" in result.output

    result = run(cli_runner, temp_db, "transaction", "delete", str(txn_id), "--yes")
    assert result.exit_code == 0
    assert stored_balance(temp_db, wallet.id) == 20000


def test_transaction_list_month_filter(cli_runner, temp_db, wallet, transaction_service):
    transaction_service.create_transaction(
        account_id=wallet.id,
        date=date(2024, 2, 1),
        lines=[TransactionLineInput(amount=800, line_type="expense")],
        description="February",
    )

    result = run(cli_runner, temp_db, "transaction", "list", "--month", "2024-03")
    assert result.exit_code == 0
    assert "No transactions found" in result.output

    result = run(cli_runner, temp_db, "transaction", "list", "--month", "2024-02", "--unsettled")
    assert "February" in result.output


def test_transfer_command(cli_runner, temp_db, bank, wallet):
    result = run(
        cli_runner, temp_db, "transfer", "Bank", "Wallet", "10000", "--fee", "110", "--date", "2024-02-01"
    )

    assert result.exit_code == 0
    assert "Transferred ¥10,000" in result.output
    assert "Bank: ¥89,890" in result.output
    assert "Wallet: ¥30,000" in result.output


def test_transfer_same_account(cli_runner, temp_db, bank):
    result = run(cli_runner, temp_db, "transfer", "Bank", "Bank", "100")

    assert result.exit_code == 1
    assert "same account" in result.output


def test_settlement_pay_and_undo(cli_runner, temp_db, bank, card, transaction_service):
    txn_id = transaction_service.create_transaction(
        account_id=card.id,
        date=date(2024, 1, 20),
        payment_date=date(2024, 2, 27),
        lines=[TransactionLineInput(amount=5000, line_type="expense")],
        description="Shoes",
    )

    result = run(cli_runner, temp_db, "settlement", "list")
    assert result.exit_code == 0
    assert "Payable: Card" in result.output
    assert "Shoes" in result.output

    result = run(
        cli_runner, temp_db, "settlement", "pay", str(txn_id), "--account", "Bank", "--date", "2024-02-27"
    )
    assert result.exit_code == 0
    assert "Bank: ¥95,000" in result.output

    result = run(cli_runner, temp_db, "settlement", "undo", str(txn_id))
    assert result.exit_code == 0
    assert stored_balance(temp_db, bank.id) == 100000


def test_settlement_partial(cli_runner, temp_db, bank, card, transaction_service):
    txn_id = transaction_service.create_transaction(
        account_id=card.id,
        date=date(2024, 1, 20),
        lines=[TransactionLineInput(amount=5000, line_type="expense")],
    )

    result = run(
        cli_runner, temp_db, "settlement", "partial", str(txn_id), "2000", "--account", "Bank", "--date", "2024-02-27"
    )

    assert result.exit_code == 0
    assert "Remaining: ¥3,000" in result.output
    assert stored_balance(temp_db, bank.id) == 98000


def test_settlement_overdue_empty(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "settlement", "overdue")

    assert result.exit_code == 0
    assert "No overdue settlements" in result.output


def test_recurring_create_and_register(cli_runner, temp_db, bank):
    result = run(
        cli_runner,
        temp_db,
        "recurring",
        "create",
        "Rent",
        "--account",
        "Bank",
        "--day",
        "27",
        "--line",
        "expense",
        "85000",
    )
    assert result.exit_code == 0
    assert "Created recurring transaction 'Rent'" in result.output

    result = run(cli_runner, temp_db, "recurring", "register", "1", "--date", "2024-03-05")
    assert result.exit_code == 0
    assert "Date: 2024-03-27" in result.output
    assert "Status: settled" in result.output

    result = run(cli_runner, temp_db, "recurring", "register", "1", "--date", "2024-03-06")
    assert result.exit_code == 1
    assert "already registered" in result.output


def test_quick_entry_commands(cli_runner, temp_db, wallet):
    result = run(cli_runner, temp_db, "quick", "create", "Coffee", "--account", "Wallet")
    assert result.exit_code == 0

    result = run(cli_runner, temp_db, "quick", "use", "Coffee", "450", "--date", "2024-02-03")
    assert result.exit_code == 0
    assert "¥450" in result.output

    result = run(cli_runner, temp_db, "quick", "list")
    assert "used 1x" in result.output
    assert stored_balance(temp_db, wallet.id) == 19550


def test_quick_use_unknown_entry(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "quick", "use", "Tea", "300")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_reconcile_command_corrects_drift(cli_runner, temp_db, bank):
    temp_db.update_account_balance(bank.id, 1)

    result = run(cli_runner, temp_db, "reconcile", "Bank")

    assert result.exit_code == 0
    assert "(corrected)" in result.output
    assert stored_balance(temp_db, bank.id) == 100000


def test_reconcile_command_history(cli_runner, temp_db, bank, transaction_service):
    transaction_service.create_transaction(
        account_id=bank.id,
        date=date(2024, 1, 5),
        lines=[TransactionLineInput(amount=700, line_type="expense")],
        is_cash_settled=True,
    )

    result = run(cli_runner, temp_db, "reconcile", "Bank", "--history")

    assert result.exit_code == 0
    assert "Opening balance: ¥100,000" in result.output
    assert "-¥700" in result.output
    assert "(in sync)" in result.output


def test_reconcile_history_without_opening_balance(cli_runner, temp_db, card):
    result = run(cli_runner, temp_db, "reconcile", "Card", "--history")

    assert result.exit_code == 0
    assert "Opening balance: ¥0 on 1900-01-01" in result.output
    assert "Opening balance: -" not in result.output


def test_audit_in_sync(cli_runner, temp_db, bank, wallet):
    result = run(cli_runner, temp_db, "audit")

    assert result.exit_code == 0
    assert "All balances are in sync." in result.output


def test_audit_updates_drifted_account(cli_runner, temp_db, bank, wallet):
    temp_db.update_account_balance(wallet.id, 5)

    result = run(cli_runner, temp_db, "audit")

    assert result.exit_code == 0
    assert "Wallet" in result.output
    assert "Bank (ID" not in result.output
    assert "Calculated: ¥20,000" in result.output
    assert "Status: updated" in result.output
    assert stored_balance(temp_db, wallet.id) == 20000


def test_audit_dry_run(cli_runner, temp_db, wallet):
    temp_db.update_account_balance(wallet.id, 5)

    result = run(cli_runner, temp_db, "audit", "--dry-run")

    assert result.exit_code == 0
    assert "Status: dry run" in result.output
    assert stored_balance(temp_db, wallet.id) == 5


def test_audit_reports_write_failures(cli_runner, temp_db, wallet, monkeypatch):
    temp_db.update_account_balance(wallet.id, 5)

    def failing_update(self, account_id, balance):
        raise StorageError("database is locked")

    monkeypatch.setattr(
        "kakeibo.database.sqlalchemy_db.SQLAlchemyDatabase.update_account_balance", failing_update
    )

    result = run(cli_runner, temp_db, "audit")

    assert result.exit_code == 1
    assert "error: database is locked" in result.output


def test_audit_interrupted(cli_runner, temp_db, monkeypatch):
    def interrupted(self, include_inactive=False, dry_run=False):
        raise KeyboardInterrupt
        yield

    monkeypatch.setattr(ReconciliationService, "iter_reconcile_all", interrupted)

    result = run(cli_runner, temp_db, "audit")

    assert result.exit_code == 130
    assert "Interrupted" in result.output


def test_help_does_not_touch_database(cli_runner, tmp_path):
    db_path = tmp_path / "never.db"
    result = cli_runner.invoke(cli, ["--db-path", str(db_path), "--help"])

    assert result.exit_code == 0
    assert "reconcile" in result.output
    assert not db_path.exists()
