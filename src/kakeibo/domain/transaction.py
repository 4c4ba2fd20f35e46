"""Transaction domain service."""

from datetime import date
from typing import Optional, Sequence

from kakeibo.database.base import Database
from kakeibo.domain.entities import Transaction as TransactionEntity, TransactionLineInput
from kakeibo.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    transaction_not_found,
)
from kakeibo.domain.reconciliation import ReconciliationService
from kakeibo.domain.settlement import normalize_line_type


class TransactionService:
    """Service for recording and editing transactions.

    Every mutation reconciles the accounts whose settlement effects may have
    changed.
    """

    def __init__(self, db: Database, reconciler: Optional[ReconciliationService] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            reconciler: Reconciliation service (created from db if omitted)
        """
        self.db = db
        self.reconciler = reconciler or ReconciliationService(db)

    def _require_account(self, account_id: int) -> None:
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

    def validate_lines(self, lines: Sequence[TransactionLineInput]) -> list[TransactionLineInput]:
        """Validate line inputs and normalize their line types.

        Raises:
            ValidationError: If an amount is negative or a line type is unknown
            NotFoundError: If a referenced category doesn't exist
        """
        validated = []
        for line in lines:
            if line.amount is None or line.amount < 0:
                raise ValidationError(f"Line amount must be zero or greater (got {line.amount})")
            if line.category_id is not None and self.db.get_category(line.category_id) is None:
                raise NotFoundError(category_not_found(line.category_id))
            validated.append(
                TransactionLineInput(
                    amount=int(line.amount),
                    line_type=normalize_line_type(line.line_type),
                    category_id=line.category_id,
                    counterparty=line.counterparty,
                    note=line.note,
                )
            )
        return validated

    def create_transaction(
        self,
        account_id: int,
        date: date,
        lines: Sequence[TransactionLineInput],
        description: Optional[str] = None,
        payment_date: Optional[date] = None,
        is_cash_settled: bool = False,
        total_amount: Optional[int] = None,
        settled_amount: Optional[int] = None,
        settlement_account_id: Optional[int] = None,
        settlement_date: Optional[date] = None,
    ) -> int:
        """Create a transaction with its lines.

        Args:
            account_id: Account the transaction is recorded against
            date: Accrual date
            lines: Line inputs
            description: Optional description
            payment_date: Optional scheduled payment date
            is_cash_settled: True if cash moved immediately
            total_amount: Defaults to the sum of line amounts
            settled_amount: Defaults to total_amount when cash settled, else 0
            settlement_account_id: Optional account settlement happens against
            settlement_date: Optional date settlement happened

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If an account or category doesn't exist
            ValidationError: If amounts or line types are invalid
        """
        self._require_account(account_id)
        if settlement_account_id is not None:
            self._require_account(settlement_account_id)

        validated = self.validate_lines(lines)
        if total_amount is None:
            total_amount = sum(line.amount for line in validated)
        if total_amount < 0:
            raise ValidationError("Total amount must be zero or greater")
        if settled_amount is None:
            settled_amount = total_amount if is_cash_settled else 0
        if settled_amount < 0:
            raise ValidationError("Settled amount must be zero or greater")

        transaction_id = self.db.create_transaction(
            date=date,
            account_id=account_id,
            total_amount=total_amount,
            lines=validated,
            description=description,
            payment_date=payment_date,
            is_cash_settled=is_cash_settled,
            settled_amount=settled_amount,
            settlement_account_id=settlement_account_id,
            settlement_date=settlement_date,
        )
        self.reconciler.reconcile_accounts([account_id, settlement_account_id])
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        involving_account_id: Optional[int] = None,
        is_cash_settled: Optional[bool] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters."""
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            involving_account_id=involving_account_id,
            is_cash_settled=is_cash_settled,
        )

    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        account_id: Optional[int] = None,
        description: Optional[str] = None,
        payment_date: Optional[date] = None,
        clear_payment_date: bool = False,
    ) -> None:
        """Update transaction header fields.

        Raises:
            NotFoundError: If the transaction or new account doesn't exist
            ValidationError: If payment_date and clear_payment_date are both set
        """
        txn = self.require_transaction(transaction_id)
        if account_id is not None:
            self._require_account(account_id)
        if clear_payment_date and payment_date is not None:
            raise ValidationError("Cannot set both payment_date and clear_payment_date")

        self.db.update_transaction(
            transaction_id,
            date=date,
            account_id=account_id,
            description=description,
            payment_date=payment_date,
            clear_payment_date=clear_payment_date,
        )
        self.reconciler.reconcile_accounts([txn.account_id, txn.settlement_account_id, account_id])

    def replace_lines(
        self,
        transaction_id: int,
        lines: Sequence[TransactionLineInput],
        total_amount: Optional[int] = None,
    ) -> None:
        """Replace a transaction's lines; total_amount defaults to their sum."""
        txn = self.require_transaction(transaction_id)
        validated = self.validate_lines(lines)
        if total_amount is None:
            total_amount = sum(line.amount for line in validated)

        self.db.replace_transaction_lines(transaction_id, validated, total_amount)
        self.reconciler.reconcile_accounts([txn.account_id, txn.settlement_account_id])

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its lines."""
        txn = self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)
        self.reconciler.reconcile_accounts([txn.account_id, txn.settlement_account_id])
