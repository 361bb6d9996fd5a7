"""SQLAlchemy models for the ledgerkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from ledgerkit.config import MONEY_SCALE

Base = declarative_base()

AMOUNT = Numeric(14, MONEY_SCALE)


class Account(Base):
    """Chart-of-accounts entry."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "code", name="uq_account_company_code"),)


class FiscalPeriod(Base):
    """Fiscal period model."""

    __tablename__ = "fiscal_periods"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "name", name="uq_fiscal_period_company_name"),)


class MappingRule(Base):
    """Classification rule model."""

    __tablename__ = "mapping_rules"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    pattern_kind = Column(String, nullable=False)
    pattern = Column(String, nullable=False)
    account_code = Column(String, nullable=False)
    priority = Column(Integer, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    # Catalog insertion order; breaks ties between equal priorities
    position = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "name", name="uq_mapping_rule_company_name"),)


class Transaction(Base):
    """Bank transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    fiscal_period_id = Column(Integer, ForeignKey("fiscal_periods.id"), nullable=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    debit_amount = Column(AMOUNT, nullable=False, default=0)
    credit_amount = Column(AMOUNT, nullable=False, default=0)
    account_code = Column(String, nullable=True)
    account_name = Column(String, nullable=True)
    classified_at = Column(DateTime, nullable=True)
    classified_by = Column(String, nullable=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_transactions_company_account", "company_id", "account_code"),)


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False)
    fiscal_period_id = Column(Integer, ForeignKey("fiscal_periods.id"), nullable=False)
    reference = Column(String, nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    # Logical operation that produced the entry, e.g. TXN-12 or PAYROLL-2024-03
    source_key = Column(String, nullable=False)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # IDs are audit references; a deleted entry's ID is never handed out again
    __table_args__ = (
        Index("ix_journal_entries_source", "company_id", "source_key"),
        {"sqlite_autoincrement": True},
    )

    # Relationships
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.id",
    )


class JournalLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_code = Column(String, nullable=False)
    debit_amount = Column(AMOUNT, nullable=False, default=0)
    credit_amount = Column(AMOUNT, nullable=False, default=0)
    description = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    source_transaction_id = Column(Integer, nullable=True)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
