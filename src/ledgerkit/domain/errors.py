"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidPatternError(ValidationError):
    """A mapping rule's regular expression does not compile."""

    def __init__(self, rule_name: str, pattern: str, reason: str):
        super().__init__(f"Rule '{rule_name}' has invalid pattern '{pattern}': {reason}")
        self.rule_name = rule_name
        self.pattern = pattern
        self.reason = reason


class ImbalancedEntryError(ValidationError):
    """A journal entry whose debits and credits differ."""

    def __init__(self, reference: str, total_debits: Decimal, total_credits: Decimal):
        super().__init__(
            f"Journal entry '{reference}' does not balance: "
            f"debits {total_debits} != credits {total_credits}"
        )
        self.reference = reference
        self.total_debits = total_debits
        self.total_credits = total_credits


class DuplicatePostingError(ConflictError):
    """A transaction is already linked to a journal entry."""


class PersistenceError(DomainError):
    """The underlying store rejected a write; the unit of work was rolled back."""


def account_not_found(company_id: int, code: str) -> str:
    """Return message for missing account."""
    return f"Account '{code}' not found for company {company_id}"


def duplicate_account(company_id: int, code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account '{code}' already exists for company {company_id}"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def fiscal_period_not_found(fiscal_period_id: int) -> str:
    """Return message for missing fiscal period by ID."""
    return f"Fiscal period {fiscal_period_id} not found"


def no_fiscal_period_for_date(company_id: int, on_date) -> str:
    """Return message when no fiscal period covers a date."""
    return f"No fiscal period covers {on_date.isoformat()} for company {company_id}"


def rule_not_found(company_id: int, name: str) -> str:
    """Return message for missing mapping rule."""
    return f"Mapping rule '{name}' not found for company {company_id}"


def duplicate_rule(company_id: int, name: str) -> str:
    """Return message for duplicate mapping rule name."""
    return f"Mapping rule '{name}' already exists for company {company_id}"


def already_posted(transaction_id: int, journal_entry_id: int) -> str:
    """Return message for a transaction that already has a journal entry."""
    return f"Transaction {transaction_id} is already posted to journal entry {journal_entry_id}"
