"""Abstract database interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Optional, Sequence
from datetime import date, datetime
from decimal import Decimal

# Entities are only needed for annotations; importing them at runtime would
# load domain/__init__.py, whose services import this module.
if TYPE_CHECKING:
    from ledgerkit.domain.entities import (
        Account,
        FiscalPeriod,
        MappingRule,
        Transaction,
        JournalEntry,
        JournalLine,
    )


class Database(ABC):
    """Abstract database interface for ledgerkit.

    Every write commits immediately unless it runs inside ``atomic()``, in
    which case all writes of the block commit together or not at all.
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

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes into one all-or-nothing unit of work.

        On normal exit the unit commits; on any exception it rolls back and the
        exception propagates (store failures surface as PersistenceError).
        Nested blocks join the outermost unit.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(self, company_id: int, code: str, name: str) -> int:
        """Create a chart-of-accounts entry. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, company_id: int, code: str) -> Optional[Account]:
        """Get account by company and code."""
        pass

    @abstractmethod
    def list_accounts(self, company_id: int) -> list[Account]:
        """List accounts for a company ordered by code."""
        pass

    # Fiscal period operations
    @abstractmethod
    def create_fiscal_period(self, company_id: int, name: str, start_date: date, end_date: date) -> int:
        """Create a fiscal period. Returns period ID."""
        pass

    @abstractmethod
    def get_fiscal_period(self, fiscal_period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        pass

    @abstractmethod
    def list_fiscal_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List fiscal periods for a company ordered by start date."""
        pass

    @abstractmethod
    def find_fiscal_period(self, company_id: int, on_date: date) -> Optional[FiscalPeriod]:
        """Find the company's fiscal period containing a date."""
        pass

    # Mapping rule operations
    @abstractmethod
    def create_mapping_rule(
        self,
        company_id: int,
        name: str,
        pattern_kind: str,
        pattern: str,
        account_code: str,
        priority: int,
        active: bool = True,
    ) -> int:
        """Append a mapping rule at the end of the company's catalog. Returns rule ID."""
        pass

    @abstractmethod
    def get_mapping_rule(self, company_id: int, name: str) -> Optional[MappingRule]:
        """Get mapping rule by company and name."""
        pass

    @abstractmethod
    def list_mapping_rules(self, company_id: int, active_only: bool = False) -> list[MappingRule]:
        """List a company's mapping rules in catalog insertion order."""
        pass

    @abstractmethod
    def replace_mapping_rule(
        self,
        rule_id: int,
        pattern_kind: str,
        pattern: str,
        account_code: str,
        priority: int,
        active: bool,
    ) -> None:
        """Replace a rule's definition, keeping its name and catalog position."""
        pass

    @abstractmethod
    def set_mapping_rule_active(self, rule_id: int, active: bool) -> None:
        """Activate or deactivate a mapping rule."""
        pass

    @abstractmethod
    def delete_mapping_rule(self, rule_id: int) -> None:
        """Delete a mapping rule."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        company_id: int,
        date: date,
        description: Optional[str],
        debit_amount: Decimal,
        credit_amount: Decimal,
        fiscal_period_id: Optional[int] = None,
    ) -> int:
        """Create a bank transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        company_id: int,
        unclassified: bool = False,
        classified_unposted: bool = False,
        fiscal_period_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List a company's transactions ordered by date then ID.

        Args:
            company_id: Company ID
            unclassified: If True, only transactions without an account code
            classified_unposted: If True, only transactions with an account code
                and no journal entry
            fiscal_period_id: Optional fiscal period filter
        """
        pass

    @abstractmethod
    def update_transaction_classification(
        self,
        transaction_id: int,
        account_code: Optional[str],
        account_name: Optional[str],
        classified_at: Optional[datetime],
        classified_by: Optional[str],
    ) -> None:
        """Set a transaction's assigned account fields."""
        pass

    @abstractmethod
    def set_transaction_journal_entry(self, transaction_id: int, journal_entry_id: Optional[int]) -> None:
        """Link a transaction to the journal entry that posts it (None to unlink)."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        company_id: int,
        fiscal_period_id: int,
        reference: str,
        entry_date: date,
        description: Optional[str],
        source_key: str,
        created_by: Optional[str],
        lines: Sequence[JournalLine],
    ) -> int:
        """Write a journal entry header and its lines. Returns entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get a journal entry with its lines."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        company_id: int,
        fiscal_period_id: Optional[int] = None,
        source_key: Optional[str] = None,
    ) -> list[JournalEntry]:
        """List journal entries with their lines, ordered by date then ID."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: int) -> None:
        """Delete a journal entry and its lines, unlinking any posted transactions."""
        pass

    @abstractmethod
    def journal_entry_totals(self, entry_id: int) -> tuple[Decimal, Decimal]:
        """Sum the stored debit and credit amounts of one journal entry."""
        pass

    @abstractmethod
    def list_period_lines(self, company_id: int, fiscal_period_id: int) -> list[JournalLine]:
        """Read every journal line posted to a company's fiscal period in one query."""
        pass
