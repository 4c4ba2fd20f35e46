"""Recurring transaction templates and their monthly registration."""

from datetime import date, timedelta
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from kakeibo.database.base import Database
from kakeibo.domain.entities import RecurringTransaction, TransactionLineInput
from kakeibo.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    recurring_not_found,
)
from kakeibo.domain.reconciliation import ReconciliationService
from kakeibo.domain.transaction import TransactionService
from kakeibo.logging_config import get_logger

logger = get_logger(__name__)


def accrual_date_for(day_of_month: Optional[int], today: date) -> date:
    """Accrual date in today's month, clamped to the month's last day."""
    return today + relativedelta(day=day_of_month or 1)


def payment_date_for(accrual_date: date, payment_delay_days: int) -> Optional[date]:
    """Payment date for a delay in days; a negative delay means no payment date."""
    if payment_delay_days < 0:
        return None
    return accrual_date + timedelta(days=payment_delay_days)


class RecurringService:
    """Service for recurring transaction templates."""

    def __init__(self, db: Database, reconciler: Optional[ReconciliationService] = None):
        self.db = db
        self.reconciler = reconciler or ReconciliationService(db)
        self.transactions = TransactionService(db, self.reconciler)

    def create_recurring(
        self,
        name: str,
        account_id: Optional[int],
        lines: Sequence[TransactionLineInput],
        day_of_month: Optional[int] = None,
        payment_delay_days: int = 0,
        description: Optional[str] = None,
        total_amount: Optional[int] = None,
    ) -> int:
        """Create a recurring transaction template.

        Args:
            name: Template name
            account_id: Account transactions are recorded against
            lines: Template lines
            day_of_month: Accrual day (1-31, clamped to the month's end)
            payment_delay_days: Days from accrual to payment (e.g. 0, 27, 30, 57)
            description: Description given to registered transactions
            total_amount: Defaults to the sum of line amounts

        Returns:
            Recurring transaction ID
        """
        if not name.strip():
            raise ValidationError("Recurring transaction name is required")
        if day_of_month is not None and not 1 <= day_of_month <= 31:
            raise ValidationError("Day of month must be between 1 and 31")
        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        validated = self.transactions.validate_lines(lines)
        if total_amount is None:
            total_amount = sum(line.amount for line in validated)

        return self.db.create_recurring_transaction(
            name=name.strip(),
            account_id=account_id,
            total_amount=total_amount,
            lines=validated,
            day_of_month=day_of_month,
            payment_delay_days=payment_delay_days,
            description=description,
        )

    def require_recurring(self, recurring_id: int) -> RecurringTransaction:
        recurring = self.db.get_recurring_transaction(recurring_id)
        if recurring is None:
            raise NotFoundError(recurring_not_found(recurring_id))
        return recurring

    def list_recurring(self, active_only: bool = True) -> list[RecurringTransaction]:
        return self.db.list_recurring_transactions(active_only=active_only)

    def registered_this_month(self, today: Optional[date] = None) -> set[int]:
        """IDs of templates with a matching transaction in today's month.

        A template counts as registered when a transaction dated this month has
        the template's description (case-insensitive).
        """
        today = today or date.today()
        month_start = today.replace(day=1)
        month_end = today + relativedelta(day=31)
        descriptions = {
            txn.description.lower()
            for txn in self.db.list_transactions(start_date=month_start, end_date=month_end)
            if txn.description
        }
        return {
            item.id
            for item in self.list_recurring()
            if item.registered_description.lower() in descriptions
        }

    def register(
        self, recurring_id: int, today: Optional[date] = None, allow_duplicate: bool = False
    ) -> int:
        """Materialize a template as this month's transaction.

        The transaction is cash settled only when it is paid on its accrual
        date (zero delay).

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the template has no account
            ConflictError: If already registered this month and duplicates
                are not allowed
        """
        today = today or date.today()
        item = self.require_recurring(recurring_id)
        if item.account_id is None:
            raise ValidationError(f"Recurring transaction '{item.name}' has no account")
        if not allow_duplicate and item.id in self.registered_this_month(today):
            raise ConflictError(f"Recurring transaction '{item.name}' is already registered this month")

        accrual_date = accrual_date_for(item.day_of_month, today)
        payment_date = payment_date_for(accrual_date, item.payment_delay_days)
        is_cash_settled = payment_date is not None and payment_date <= accrual_date

        transaction_id = self.transactions.create_transaction(
            account_id=item.account_id,
            date=accrual_date,
            payment_date=payment_date,
            description=item.registered_description,
            lines=[
                TransactionLineInput(
                    amount=line.amount,
                    line_type=line.line_type,
                    category_id=line.category_id,
                    counterparty=line.counterparty,
                )
                for line in item.lines
            ],
            total_amount=item.total_amount,
            is_cash_settled=is_cash_settled,
        )
        logger.info(
            "Registered recurring transaction %s as transaction %s (accrual %s, payment %s)",
            item.id,
            transaction_id,
            accrual_date,
            payment_date,
        )
        return transaction_id
