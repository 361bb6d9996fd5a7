"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic so the schema can evolve without the
services noticing.
"""

from decimal import Decimal

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Account as ORMAccount,
    FiscalPeriod as ORMFiscalPeriod,
    MappingRule as ORMMappingRule,
    Transaction as ORMTransaction,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
)


def _amount(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        company_id=orm_account.company_id,
        code=orm_account.code,
        name=orm_account.name,
        created_at=orm_account.created_at,
    )


def fiscal_period_to_domain(orm_period: ORMFiscalPeriod) -> domain.FiscalPeriod:
    """Convert SQLAlchemy FiscalPeriod model to domain FiscalPeriod entity."""
    return domain.FiscalPeriod(
        id=orm_period.id,
        company_id=orm_period.company_id,
        name=orm_period.name,
        start_date=orm_period.start_date,
        end_date=orm_period.end_date,
    )


def mapping_rule_to_domain(orm_rule: ORMMappingRule) -> domain.MappingRule:
    """Convert SQLAlchemy MappingRule model to domain MappingRule entity."""
    return domain.MappingRule(
        id=orm_rule.id,
        company_id=orm_rule.company_id,
        name=orm_rule.name,
        pattern_kind=domain.PatternKind(orm_rule.pattern_kind),
        pattern=orm_rule.pattern,
        account_code=orm_rule.account_code,
        priority=orm_rule.priority,
        active=orm_rule.active,
        position=orm_rule.position,
        created_at=orm_rule.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        company_id=orm_transaction.company_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        debit_amount=_amount(orm_transaction.debit_amount),
        credit_amount=_amount(orm_transaction.credit_amount),
        account_code=orm_transaction.account_code,
        account_name=orm_transaction.account_name,
        classified_at=orm_transaction.classified_at,
        classified_by=orm_transaction.classified_by,
        fiscal_period_id=orm_transaction.fiscal_period_id,
        journal_entry_id=orm_transaction.journal_entry_id,
        imported_at=orm_transaction.imported_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.id,
        entry_id=orm_line.entry_id,
        account_code=orm_line.account_code,
        debit=_amount(orm_line.debit_amount),
        credit=_amount(orm_line.credit_amount),
        description=orm_line.description,
        reference=orm_line.reference,
        source_transaction_id=orm_line.source_transaction_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        company_id=orm_entry.company_id,
        fiscal_period_id=orm_entry.fiscal_period_id,
        reference=orm_entry.reference,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        source_key=orm_entry.source_key,
        created_by=orm_entry.created_by,
        created_at=orm_entry.created_at,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
    )
