"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StorageError(RuntimeError):
    """The backing data store failed a read or a write."""


class ReconciliationError(DomainError):
    """Base class for balance reconciliation failures."""

    def __init__(self, message: str, account_id: Optional[int] = None):
        super().__init__(message)
        self.account_id = account_id


class BalanceComputeError(ReconciliationError):
    """The balance could not be computed because data could not be read."""


class BalancePersistError(ReconciliationError):
    """The balance was computed but could not be written back."""

    def __init__(self, message: str, account_id: int, balance: int):
        super().__init__(message, account_id=account_id)
        self.balance = balance


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_path_not_found(path: str) -> str:
    """Return message for missing category by path."""
    return f"Category '{path}' not found"


def recurring_not_found(recurring_id: int) -> str:
    """Return message for missing recurring transaction."""
    return f"Recurring transaction {recurring_id} not found"


def quick_entry_not_found(entry_id: int) -> str:
    """Return message for missing quick entry."""
    return f"Quick entry {entry_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def invalid_choice(kind: str, value: str, choices: tuple[str, ...]) -> str:
    """Return message for a value outside an allowed set."""
    return f"Invalid {kind} '{value}' (expected one of: {', '.join(choices)})"
