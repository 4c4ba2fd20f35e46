"""Domain model entities for kakeibo.

These are pure data classes representing ledger concepts, independent of
database schema. Amounts are integers in the ledger's currency unit.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional


ACCOUNT_TYPES = ("bank", "card", "cash", "emoney")
CATEGORY_TYPES = ("income", "expense")
LINE_TYPES = ("income", "expense", "asset", "liability")


@dataclass(frozen=True)
class Account:
    """Account domain entity.

    ``current_balance`` is a cached value owned by the reconciliation engine.
    """

    id: int
    name: str
    account_type: str
    opening_balance: Optional[int]
    opening_date: Optional[date]
    current_balance: Optional[int]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with hierarchical structure."""

    id: int
    name: str
    category_type: str
    parent_id: Optional[int]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class TransactionLineInput:
    """Unsaved transaction line, as accepted by services and the database."""

    amount: int
    line_type: str
    category_id: Optional[int] = None
    counterparty: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class TransactionLine:
    """Transaction line domain entity."""

    id: int
    transaction_id: int
    amount: int
    line_type: str
    category_id: Optional[int] = None
    counterparty: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``date`` is the accrual date. ``payment_date`` is when cash is expected
    to move and ``settlement_date`` when it actually did.
    """

    id: int
    date: date
    account_id: int
    total_amount: int
    is_cash_settled: bool = False
    settled_amount: int = 0
    payment_date: Optional[date] = None
    settlement_date: Optional[date] = None
    settlement_account_id: Optional[int] = None
    description: Optional[str] = None
    lines: tuple[TransactionLine, ...] = ()
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RecurringTransactionLine:
    """Line of a recurring transaction template."""

    id: int
    amount: int
    line_type: str
    category_id: Optional[int] = None
    counterparty: Optional[str] = None


@dataclass(frozen=True)
class RecurringTransaction:
    """Recurring transaction template."""

    id: int
    name: str
    account_id: Optional[int]
    total_amount: int
    day_of_month: Optional[int]
    payment_delay_days: int
    description: Optional[str] = None
    is_active: bool = True
    lines: tuple[RecurringTransactionLine, ...] = ()
    created_at: Optional[datetime] = None

    @property
    def registered_description(self) -> str:
        """Description used for transactions materialized from this template."""
        return self.description or self.name


@dataclass(frozen=True)
class QuickEntry:
    """Quick-entry shortcut."""

    id: int
    name: str
    account_id: Optional[int]
    line_type: str
    category_id: Optional[int] = None
    counterparty: Optional[str] = None
    description: Optional[str] = None
    use_count: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SettlementEffect:
    """Signed cash movement a transaction applies to one account."""

    transaction_id: int
    account_id: int
    effective_date: date
    signed_amount: int


@dataclass(frozen=True)
class BalanceStep:
    """One step of a chronological balance replay."""

    effect: SettlementEffect
    balance: int


@dataclass(frozen=True)
class BalanceDrift:
    """Audit line for an account whose cached balance differs from the ledger."""

    account_id: int
    account_name: str
    opening_balance: int
    opening_date: date
    stored_balance: Optional[int]
    calculated_balance: int
    difference: int
    persisted: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class SettlementItem:
    """Transaction as shown in a payable/receivable group."""

    transaction_id: int
    date: date
    payment_date: Optional[date]
    description: Optional[str]
    total_amount: int
    settled_amount: int
    kind: str

    @property
    def remaining_amount(self) -> int:
        return self.total_amount - self.settled_amount


@dataclass(frozen=True)
class SettlementGroup:
    """Payables or receivables of one account."""

    account_id: int
    account_name: str
    kind: str
    total_amount: int
    items: tuple[SettlementItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OverdueSettlement:
    """Unsettled transaction whose payment date has passed."""

    transaction_id: int
    date: date
    payment_date: date
    description: Optional[str]
    account_name: str
    total_amount: int
    settled_amount: int
    days_overdue: int

    @property
    def remaining_amount(self) -> int:
        return self.total_amount - self.settled_amount
