"""SQLAlchemy models for kakeibo database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Account model (bank, card, cash, e-money)."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    account_type = Column(String, nullable=False)
    opening_balance = Column(Integer, nullable=True, default=0)
    opening_date = Column(Date, nullable=True)
    current_balance = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Category(Base):
    """Category model with hierarchical structure."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    category_type = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")


class Transaction(Base):
    """Transaction model.

    ``account_id`` is where the event is recorded; ``settlement_account_id``
    is the account cash actually moved through, when different.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    payment_date = Column(Date, nullable=True)
    settlement_date = Column(Date, nullable=True)
    description = Column(String, nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    settlement_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    total_amount = Column(Integer, nullable=False, default=0)
    is_cash_settled = Column(Boolean, default=False, nullable=False)
    settled_amount = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "TransactionLine",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionLine.id",
    )


class TransactionLine(Base):
    """Transaction line model."""

    __tablename__ = "transaction_lines"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    amount = Column(Integer, nullable=False)
    line_type = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    counterparty = Column(String, nullable=True)
    note = Column(String, nullable=True)

    # Relationships
    transaction = relationship("Transaction", back_populates="lines")


class RecurringTransaction(Base):
    """Recurring transaction template model."""

    __tablename__ = "recurring_transactions"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    total_amount = Column(Integer, nullable=False, default=0)
    day_of_month = Column(Integer, nullable=True)
    payment_delay_days = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "RecurringTransactionLine",
        back_populates="recurring_transaction",
        cascade="all, delete-orphan",
        order_by="RecurringTransactionLine.id",
    )


class RecurringTransactionLine(Base):
    """Recurring transaction template line model."""

    __tablename__ = "recurring_transaction_lines"

    id = Column(Integer, primary_key=True)
    recurring_transaction_id = Column(
        Integer, ForeignKey("recurring_transactions.id"), nullable=False
    )
    amount = Column(Integer, nullable=False)
    line_type = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    counterparty = Column(String, nullable=True)

    # Relationships
    recurring_transaction = relationship("RecurringTransaction", back_populates="lines")


class QuickEntry(Base):
    """Quick-entry shortcut model."""

    __tablename__ = "quick_entries"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    line_type = Column(String, nullable=False)
    counterparty = Column(String, nullable=True)
    use_count = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
