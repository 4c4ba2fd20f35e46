"""Account domain service."""

from datetime import date
from typing import Optional

from kakeibo.database.base import Database
from kakeibo.domain.entities import ACCOUNT_TYPES, Account as AccountEntity
from kakeibo.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
    invalid_choice,
)
from kakeibo.domain.reconciliation import ReconciliationService


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database, reconciler: Optional[ReconciliationService] = None):
        """Initialize account service.

        Args:
            db: Database instance
            reconciler: Reconciliation service (created from db if omitted)
        """
        self.db = db
        self.reconciler = reconciler or ReconciliationService(db)

    def create_account(
        self,
        name: str,
        account_type: str = "bank",
        opening_balance: int = 0,
        opening_date: Optional[date] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            account_type: One of bank, card, cash, emoney
            opening_balance: Balance on the opening date
            opening_date: Date the account starts tracking from

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty or the type is unknown
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name is required")
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(invalid_choice("account type", account_type, ACCOUNT_TYPES))

        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        return self.db.create_account(
            name=name,
            account_type=account_type,
            opening_balance=opening_balance,
            opening_date=opening_date,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, include_inactive: bool = True) -> list[AccountEntity]:
        """List accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts(include_inactive=include_inactive)

    def update_opening(
        self, account_id: int, opening_balance: Optional[int], opening_date: Optional[date]
    ) -> int:
        """Change an account's opening state and recompute its balance.

        Returns:
            The recomputed balance
        """
        self.require_account(account_id)
        self.db.update_account_opening(account_id, opening_balance, opening_date)
        return self.reconciler.reconcile_account(account_id)

    def deactivate_account(self, account_id: int) -> None:
        """Deactivate an account. Its history and balance are kept."""
        self.require_account(account_id)
        self.db.set_account_active(account_id, False)
