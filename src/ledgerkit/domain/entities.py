"""Domain model entities for ledgerkit.

These are pure data classes representing business concepts, independent of
database schema. Services and the classifier work with these types only; the
database layer converts ORM rows into them through the mappers.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from ledgerkit.domain.categories import AccountCategory, NormalBalance, category_for_code

ZERO = Decimal("0")


class PatternKind(str, Enum):
    """How a mapping rule's pattern is matched against a description."""

    SUBSTRING = "substring"
    REGEX = "regex"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    EXACT = "exact"


class TransactionStatus(str, Enum):
    """Lifecycle of a bank transaction: Unclassified -> Classified -> Posted."""

    UNCLASSIFIED = "unclassified"
    CLASSIFIED = "classified"
    POSTED = "posted"


class EntrySide(str, Enum):
    """Side of a journal line."""

    DEBIT = "debit"
    CREDIT = "credit"


@dataclass(frozen=True)
class Account:
    """General-ledger account from the chart of accounts."""

    id: int
    company_id: int
    code: str
    name: str
    created_at: datetime

    @property
    def category(self) -> Optional[AccountCategory]:
        return category_for_code(self.code)


@dataclass(frozen=True)
class FiscalPeriod:
    """Bounded date range used to group postings for reporting."""

    id: int
    company_id: int
    name: str
    start_date: date
    end_date: date

    def contains(self, on_date: date) -> bool:
        return self.start_date <= on_date <= self.end_date


@dataclass(frozen=True)
class MappingRule:
    """Pattern-to-account association used to auto-classify descriptions.

    Rules are immutable; editing a rule means replacing it. ``position`` is
    the catalog insertion order and breaks ties between equal priorities.
    """

    name: str
    pattern_kind: PatternKind
    pattern: str
    account_code: str
    priority: int
    active: bool = True
    company_id: Optional[int] = None
    id: Optional[int] = None
    position: int = 0
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one description.

    An unmatched description is a normal result, not an error.
    """

    account_code: Optional[str] = None
    rule_name: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.account_code is not None


UNCLASSIFIED = ClassificationResult()


@dataclass(frozen=True)
class Transaction:
    """Bank transaction domain entity."""

    id: int
    company_id: int
    date: date
    description: Optional[str]
    debit_amount: Decimal
    credit_amount: Decimal
    account_code: Optional[str]
    account_name: Optional[str]
    classified_at: Optional[datetime]
    classified_by: Optional[str]
    fiscal_period_id: Optional[int]
    journal_entry_id: Optional[int]
    imported_at: datetime

    @property
    def status(self) -> TransactionStatus:
        if self.journal_entry_id is not None:
            return TransactionStatus.POSTED
        if self.account_code is not None:
            return TransactionStatus.CLASSIFIED
        return TransactionStatus.UNCLASSIFIED

    @property
    def is_money_in(self) -> bool:
        """True when the bank statement shows a credit (money received)."""
        return self.credit_amount != ZERO

    @property
    def amount(self) -> Decimal:
        return self.credit_amount if self.is_money_in else self.debit_amount


@dataclass(frozen=True)
class JournalLine:
    """One debit or credit line of a journal entry."""

    account_code: str
    debit: Decimal
    credit: Decimal
    description: Optional[str] = None
    reference: Optional[str] = None
    source_transaction_id: Optional[int] = None
    id: Optional[int] = None
    entry_id: Optional[int] = None

    @property
    def side(self) -> EntrySide:
        return EntrySide.DEBIT if self.debit != ZERO else EntrySide.CREDIT

    @property
    def amount(self) -> Decimal:
        return self.debit if self.debit != ZERO else self.credit


@dataclass(frozen=True)
class JournalEntry:
    """Balanced set of journal lines representing one accounting event."""

    id: Optional[int]
    company_id: int
    fiscal_period_id: int
    reference: str
    entry_date: date
    description: Optional[str]
    source_key: str
    created_by: Optional[str]
    created_at: Optional[datetime]
    lines: tuple[JournalLine, ...] = ()

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)


@dataclass(frozen=True)
class AccountBalance:
    """Closing position of one account for a fiscal period.

    ``closing_balance`` is signed by the account's normal side.
    """

    account_code: str
    account_name: str
    category: Optional[AccountCategory]
    normal_balance: NormalBalance
    period_debits: Decimal
    period_credits: Decimal
    closing_balance: Decimal

    @property
    def trial_balance_debit(self) -> Decimal:
        if self.normal_balance == NormalBalance.DEBIT:
            return self.closing_balance if self.closing_balance >= ZERO else ZERO
        return -self.closing_balance if self.closing_balance < ZERO else ZERO

    @property
    def trial_balance_credit(self) -> Decimal:
        if self.normal_balance == NormalBalance.DEBIT:
            return -self.closing_balance if self.closing_balance < ZERO else ZERO
        return self.closing_balance if self.closing_balance >= ZERO else ZERO


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance built from closing balances."""

    company_id: int
    fiscal_period_id: int
    rows: tuple[AccountBalance, ...]
    total_debits: Decimal
    total_credits: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


@dataclass(frozen=True)
class BalanceSheetTotals:
    """Balance-sheet totals for a fiscal period.

    Retained earnings are opening equity plus net profit, and total equity is
    the retained earnings figure.
    """

    total_assets: Decimal
    total_liabilities: Decimal
    opening_equity: Decimal
    total_revenue: Decimal
    total_expenses: Decimal
    tolerance: Decimal

    @property
    def net_profit(self) -> Decimal:
        return self.total_revenue - self.total_expenses

    @property
    def retained_earnings(self) -> Decimal:
        return self.opening_equity + self.net_profit

    @property
    def total_equity(self) -> Decimal:
        return self.retained_earnings

    @property
    def difference(self) -> Decimal:
        return self.total_assets - (self.total_liabilities + self.total_equity)

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) <= self.tolerance


@dataclass(frozen=True)
class ClassificationSummary:
    """Counts from a batch classification run.

    ``classified`` counts transactions whose assignment was written;
    ``unpostings`` counts postings removed because a posted transaction moved
    to a different account.
    """

    classified: int = 0
    unmatched: int = 0
    failed: int = 0
    unpostings: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def processed(self) -> int:
        return self.classified + self.unmatched + self.failed


@dataclass(frozen=True)
class PostingSummary:
    """Counts from a batch posting run."""

    posted: int = 0
    skipped: int = 0
    failed: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)
