"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Sequence
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from kakeibo.domain.entities import (
    Account,
    Category,
    QuickEntry,
    RecurringTransaction,
    Transaction,
    TransactionLineInput,
)


class Database(ABC):
    """Abstract database interface for kakeibo.

    Implementations raise StorageError when the backing store fails.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: str,
        opening_balance: int = 0,
        opening_date: Optional[date] = None,
    ) -> int:
        """Create a new account with current_balance = opening_balance. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, include_inactive: bool = True) -> list[Account]:
        """List accounts ordered by name."""
        pass

    @abstractmethod
    def update_account_balance(self, account_id: int, balance: int) -> None:
        """Overwrite an account's cached current_balance."""
        pass

    @abstractmethod
    def update_account_opening(
        self, account_id: int, opening_balance: Optional[int], opening_date: Optional[date]
    ) -> None:
        """Update an account's opening balance and opening date."""
        pass

    @abstractmethod
    def set_account_active(self, account_id: int, is_active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, name: str, category_type: str, parent_id: Optional[int] = None
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_path(self, path: str) -> Optional[Category]:
        """Get category by path (e.g., 'Food > Groceries')."""
        pass

    @abstractmethod
    def list_categories(self, parent_id: Optional[int] = None) -> list[Category]:
        """List categories, optionally filtered by parent."""
        pass

    @abstractmethod
    def get_category_tree(self) -> list[dict[str, Any]]:
        """Get full category tree with hierarchy.

        Returns a list of dictionaries with category data and nested 'children' lists.
        """
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        date: date,
        account_id: int,
        total_amount: int,
        lines: Sequence[TransactionLineInput],
        description: Optional[str] = None,
        payment_date: Optional[date] = None,
        is_cash_settled: bool = False,
        settled_amount: int = 0,
        settlement_account_id: Optional[int] = None,
        settlement_date: Optional[date] = None,
    ) -> int:
        """Create a transaction together with its lines. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction (with lines) by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        involving_account_id: Optional[int] = None,
        is_cash_settled: Optional[bool] = None,
    ) -> list[Transaction]:
        """List transactions (with lines) in date order.

        Args:
            start_date: Optional start accrual date filter
            end_date: Optional end accrual date filter
            account_id: Only transactions recorded against this account
            involving_account_id: Transactions whose account_id or
                settlement_account_id equals this account
            is_cash_settled: Optional filter on the cash-settled flag
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        account_id: Optional[int] = None,
        description: Optional[str] = None,
        payment_date: Optional[date] = None,
        clear_payment_date: bool = False,
    ) -> None:
        """Update transaction header fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def update_transaction_settlement(
        self,
        transaction_id: int,
        is_cash_settled: bool,
        settled_amount: int,
        settlement_account_id: Optional[int],
        settlement_date: Optional[date],
    ) -> None:
        """Overwrite all settlement fields of a transaction."""
        pass

    @abstractmethod
    def replace_transaction_lines(
        self, transaction_id: int, lines: Sequence[TransactionLineInput], total_amount: int
    ) -> None:
        """Replace a transaction's lines and total amount."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its lines."""
        pass

    # Recurring transaction operations
    @abstractmethod
    def create_recurring_transaction(
        self,
        name: str,
        account_id: Optional[int],
        total_amount: int,
        lines: Sequence[TransactionLineInput],
        day_of_month: Optional[int] = None,
        payment_delay_days: int = 0,
        description: Optional[str] = None,
    ) -> int:
        """Create a recurring transaction template. Returns its ID."""
        pass

    @abstractmethod
    def get_recurring_transaction(self, recurring_id: int) -> Optional[RecurringTransaction]:
        """Get recurring transaction template by ID."""
        pass

    @abstractmethod
    def list_recurring_transactions(self, active_only: bool = True) -> list[RecurringTransaction]:
        """List recurring templates ordered by day of month."""
        pass

    # Quick entry operations
    @abstractmethod
    def create_quick_entry(
        self,
        name: str,
        account_id: int,
        line_type: str,
        category_id: Optional[int] = None,
        counterparty: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a quick entry. Returns its ID."""
        pass

    @abstractmethod
    def get_quick_entry(self, entry_id: int) -> Optional[QuickEntry]:
        """Get quick entry by ID."""
        pass

    @abstractmethod
    def list_quick_entries(
        self, active_only: bool = True, limit: Optional[int] = None
    ) -> list[QuickEntry]:
        """List quick entries, most used first."""
        pass

    @abstractmethod
    def increment_quick_entry_use(self, entry_id: int) -> None:
        """Increment a quick entry's use count."""
        pass
