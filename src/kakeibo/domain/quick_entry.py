"""Quick-entry shortcuts."""

from datetime import date
from typing import Optional

from kakeibo.database.base import Database
from kakeibo.domain.entities import QuickEntry, TransactionLineInput
from kakeibo.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    quick_entry_not_found,
)
from kakeibo.domain.reconciliation import ReconciliationService
from kakeibo.domain.settlement import normalize_line_type
from kakeibo.domain.transaction import TransactionService


class QuickEntryService:
    """Service for named one-tap transaction templates."""

    def __init__(self, db: Database, reconciler: Optional[ReconciliationService] = None):
        self.db = db
        self.reconciler = reconciler or ReconciliationService(db)
        self.transactions = TransactionService(db, self.reconciler)

    def create_quick_entry(
        self,
        name: str,
        account_id: int,
        line_type: str = "expense",
        category_id: Optional[int] = None,
        counterparty: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a quick entry.

        Returns:
            Quick entry ID
        """
        if not name.strip():
            raise ValidationError("Quick entry name is required")
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        return self.db.create_quick_entry(
            name=name.strip(),
            account_id=account_id,
            line_type=normalize_line_type(line_type),
            category_id=category_id,
            counterparty=counterparty,
            description=description,
        )

    def require_quick_entry(self, entry_id: int) -> QuickEntry:
        entry = self.db.get_quick_entry(entry_id)
        if entry is None:
            raise NotFoundError(quick_entry_not_found(entry_id))
        return entry

    def find_by_name(self, name: str) -> Optional[QuickEntry]:
        for entry in self.db.list_quick_entries(active_only=False):
            if entry.name == name:
                return entry
        return None

    def list_quick_entries(self, limit: Optional[int] = 10) -> list[QuickEntry]:
        """Active quick entries, most used first."""
        return self.db.list_quick_entries(active_only=True, limit=limit)

    def use(self, entry_id: int, amount: int, today: Optional[date] = None) -> int:
        """Record a cash-settled transaction from a quick entry.

        Returns:
            Transaction ID
        """
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        entry = self.require_quick_entry(entry_id)
        if entry.account_id is None:
            raise ValidationError(f"Quick entry '{entry.name}' has no account")

        today = today or date.today()
        transaction_id = self.transactions.create_transaction(
            account_id=entry.account_id,
            date=today,
            payment_date=today,
            description=entry.description or entry.name,
            lines=[
                TransactionLineInput(
                    amount=amount,
                    line_type=entry.line_type,
                    category_id=entry.category_id,
                    counterparty=entry.counterparty,
                )
            ],
            is_cash_settled=True,
        )
        self.db.increment_quick_entry_use(entry.id)
        return transaction_id
