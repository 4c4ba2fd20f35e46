"""Manual settlement of deferred transactions.

Covers paying off payables (card purchases, bills) and collecting
receivables (advances, sales) through a cash account, fully or partially.
"""

from datetime import date
from typing import Iterable, Optional

from kakeibo.database.base import Database
from kakeibo.domain.entities import (
    OverdueSettlement,
    SettlementGroup,
    SettlementItem,
    Transaction,
)
from kakeibo.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
)
from kakeibo.domain.reconciliation import ReconciliationService
from kakeibo.logging_config import get_logger

logger = get_logger(__name__)

RECEIVABLE_LINE_TYPES = frozenset({"income", "asset"})
PAYABLE_LINE_TYPES = frozenset({"expense", "liability"})


def settlement_kind(transaction: Transaction) -> str:
    """Classify a transaction as 'receivable' or 'payable'.

    Receivable when income and asset (money owed to us) lines outweigh
    expense and liability lines.
    """
    receivable = sum(line.amount for line in transaction.lines if line.line_type in RECEIVABLE_LINE_TYPES)
    payable = sum(line.amount for line in transaction.lines if line.line_type in PAYABLE_LINE_TYPES)
    return "receivable" if receivable > payable else "payable"


class CashSettlementService:
    """Service for settling, partially settling and unsettling transactions."""

    def __init__(self, db: Database, reconciler: Optional[ReconciliationService] = None):
        self.db = db
        self.reconciler = reconciler or ReconciliationService(db)

    def _require_transaction(self, transaction_id: int) -> Transaction:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _require_settlement_account(self, account_id: Optional[int]) -> None:
        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

    def settle(
        self,
        transaction_ids: Iterable[int],
        settlement_account_id: Optional[int],
        settlement_date: date,
    ) -> dict[int, int]:
        """Settle transactions in full.

        Args:
            transaction_ids: Transactions to settle
            settlement_account_id: Account the cash moved through (None settles
                against each transaction's own account)
            settlement_date: Date the cash moved

        Returns:
            Mapping of reconciled account ID to balance
        """
        self._require_settlement_account(settlement_account_id)
        transactions = [self._require_transaction(tid) for tid in transaction_ids]

        affected: list[Optional[int]] = [settlement_account_id]
        for txn in transactions:
            self.db.update_transaction_settlement(
                txn.id,
                is_cash_settled=True,
                settled_amount=txn.total_amount,
                settlement_account_id=settlement_account_id,
                settlement_date=settlement_date,
            )
            affected.extend([txn.account_id, txn.settlement_account_id])
            logger.info("Settled transaction %s in full on %s", txn.id, settlement_date)

        return self.reconciler.reconcile_accounts(affected)

    def settle_partial(
        self,
        transaction_id: int,
        amount: int,
        settlement_account_id: Optional[int],
        settlement_date: date,
    ) -> Transaction:
        """Settle part of a transaction.

        The transaction becomes cash settled once its settled amount reaches
        the total amount. A transaction holds a single settlement account, so
        every partial payment must go through the same account.

        Returns:
            The updated transaction

        Raises:
            ValidationError: If the amount is not positive or exceeds the
                remaining amount, the transaction is already fully settled, or
                the account differs from the one earlier payments used
        """
        if amount <= 0:
            raise ValidationError("Settlement amount must be greater than zero")
        self._require_settlement_account(settlement_account_id)
        txn = self._require_transaction(transaction_id)

        if txn.is_cash_settled:
            raise ValidationError(f"Transaction {txn.id} is already fully settled")
        remaining = txn.total_amount - txn.settled_amount
        if amount > remaining:
            raise ValidationError(
                f"Settlement amount {amount} exceeds the remaining amount {remaining}"
            )
        if txn.settled_amount > 0 and settlement_account_id != txn.settlement_account_id:
            raise ValidationError(
                f"Transaction {txn.id} is partly settled through account "
                f"{txn.settlement_account_id}; settle the rest through the same account"
            )

        new_settled_amount = txn.settled_amount + amount
        is_fully_settled = new_settled_amount >= txn.total_amount

        self.db.update_transaction_settlement(
            txn.id,
            is_cash_settled=is_fully_settled,
            settled_amount=new_settled_amount,
            settlement_account_id=settlement_account_id,
            settlement_date=settlement_date,
        )
        self.reconciler.reconcile_accounts(
            [settlement_account_id, txn.account_id, txn.settlement_account_id]
        )
        return self._require_transaction(transaction_id)

    def unsettle(self, transaction_ids: Iterable[int]) -> dict[int, int]:
        """Undo settlement of transactions.

        The settlement account and date are kept for reference; with a zero
        settled amount they no longer move any balance.
        """
        affected: list[Optional[int]] = []
        for transaction_id in transaction_ids:
            txn = self._require_transaction(transaction_id)
            self.db.update_transaction_settlement(
                txn.id,
                is_cash_settled=False,
                settled_amount=0,
                settlement_account_id=txn.settlement_account_id,
                settlement_date=txn.settlement_date,
            )
            affected.extend([txn.account_id, txn.settlement_account_id])
            logger.info("Unsettled transaction %s", txn.id)

        return self.reconciler.reconcile_accounts(affected)

    def list_groups(self, settled: bool = False) -> list[SettlementGroup]:
        """Group transactions into payables and receivables per account.

        Unsettled groups total the remaining amounts; settled groups total the
        full amounts. Payable groups come first.
        """
        accounts = {acc.id: acc for acc in self.db.list_accounts()}
        grouped: dict[tuple[str, int], list[SettlementItem]] = {}

        for txn in self.db.list_transactions(is_cash_settled=settled):
            account = accounts.get(txn.account_id)
            if account is None:
                continue
            kind = settlement_kind(txn)
            item = SettlementItem(
                transaction_id=txn.id,
                date=txn.date,
                payment_date=txn.payment_date,
                description=txn.description,
                total_amount=txn.total_amount,
                settled_amount=txn.settled_amount,
                kind=kind,
            )
            grouped.setdefault((kind, txn.account_id), []).append(item)

        groups = []
        for kind in ("payable", "receivable"):
            for (group_kind, account_id), items in grouped.items():
                if group_kind != kind:
                    continue
                if settled:
                    total = sum(item.total_amount for item in items)
                else:
                    total = sum(item.remaining_amount for item in items)
                groups.append(
                    SettlementGroup(
                        account_id=account_id,
                        account_name=accounts[account_id].name,
                        kind=kind,
                        total_amount=total,
                        items=tuple(items),
                    )
                )
        return groups

    def list_overdue(self, today: Optional[date] = None) -> list[OverdueSettlement]:
        """List unsettled transactions whose payment date is before today."""
        today = today or date.today()
        accounts = {acc.id: acc.name for acc in self.db.list_accounts()}

        overdue = [
            OverdueSettlement(
                transaction_id=txn.id,
                date=txn.date,
                payment_date=txn.payment_date,
                description=txn.description,
                account_name=accounts.get(txn.account_id, "Unknown"),
                total_amount=txn.total_amount,
                settled_amount=txn.settled_amount,
                days_overdue=(today - txn.payment_date).days,
            )
            for txn in self.db.list_transactions(is_cash_settled=False)
            if txn.payment_date is not None and txn.payment_date < today
        ]
        overdue.sort(key=lambda item: (item.payment_date, item.transaction_id))
        return overdue
