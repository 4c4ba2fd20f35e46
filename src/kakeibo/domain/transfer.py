"""Transfers between accounts."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from kakeibo.database.base import Database
from kakeibo.domain.entities import TransactionLineInput
from kakeibo.domain.errors import (
    NotFoundError,
    StorageError,
    ValidationError,
    account_not_found,
)
from kakeibo.domain.reconciliation import ReconciliationService
from kakeibo.domain.transaction import TransactionService
from kakeibo.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransferResult:
    """Transactions created by a transfer and the resulting balances."""

    outgoing_transaction_id: int
    incoming_transaction_id: int
    from_balance: int
    to_balance: int


class TransferService:
    """Service for moving money between two accounts."""

    def __init__(self, db: Database, reconciler: Optional[ReconciliationService] = None):
        self.db = db
        self.reconciler = reconciler or ReconciliationService(db)
        self.transactions = TransactionService(db, self.reconciler)

    def create_transfer(
        self,
        from_account_id: int,
        to_account_id: int,
        amount: int,
        transfer_date: date,
        fee: int = 0,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        fee_category_id: Optional[int] = None,
    ) -> TransferResult:
        """Record a transfer as an outgoing and an incoming cash-settled transaction.

        The outgoing side carries the transfer amount plus any fee as expense
        lines; the incoming side carries the transfer amount as an income line.
        If the incoming side cannot be stored the outgoing side is deleted, so
        a failed transfer leaves no half behind.

        Raises:
            ValidationError: If accounts are equal or amounts are invalid
            NotFoundError: If either account doesn't exist
            StorageError: If either side cannot be stored
        """
        if from_account_id == to_account_id:
            raise ValidationError("Cannot transfer to the same account")
        if amount <= 0:
            raise ValidationError("Transfer amount must be greater than zero")
        if fee < 0:
            raise ValidationError("Transfer fee must be zero or greater")

        from_account = self.db.get_account(from_account_id)
        if from_account is None:
            raise NotFoundError(account_not_found(from_account_id))
        to_account = self.db.get_account(to_account_id)
        if to_account is None:
            raise NotFoundError(account_not_found(to_account_id))

        desc = description or f"{from_account.name} → {to_account.name}"

        out_lines = [TransactionLineInput(amount=amount, line_type="expense", category_id=category_id)]
        if fee > 0:
            out_lines.append(
                TransactionLineInput(
                    amount=fee, line_type="expense", category_id=fee_category_id, note="Transfer fee"
                )
            )

        out_lines = self.transactions.validate_lines(out_lines)
        in_lines = self.transactions.validate_lines(
            [TransactionLineInput(amount=amount, line_type="income", category_id=category_id)]
        )

        outgoing_id = self.db.create_transaction(
            date=transfer_date,
            account_id=from_account_id,
            total_amount=amount + fee,
            lines=out_lines,
            description=desc,
            payment_date=transfer_date,
            is_cash_settled=True,
            settled_amount=amount + fee,
        )
        try:
            incoming_id = self.db.create_transaction(
                date=transfer_date,
                account_id=to_account_id,
                total_amount=amount,
                lines=in_lines,
                description=desc,
                payment_date=transfer_date,
                is_cash_settled=True,
                settled_amount=amount,
            )
        except StorageError:
            logger.warning("Incoming side of transfer failed; removing transaction %s", outgoing_id)
            self.db.delete_transaction(outgoing_id)
            raise

        balances = self.reconciler.reconcile_accounts([from_account_id, to_account_id])
        logger.info(
            "Transferred %s from account %s to account %s", amount, from_account_id, to_account_id
        )

        return TransferResult(
            outgoing_transaction_id=outgoing_id,
            incoming_transaction_id=incoming_id,
            from_balance=balances[from_account_id],
            to_balance=balances[to_account_id],
        )
