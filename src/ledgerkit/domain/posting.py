"""Ledger poster: turns classified transactions and aggregates into journal entries.

Every journal entry is checked for balance before anything is written, and
the header, its lines and the transaction link are written in one atomic
unit. Entries are keyed by a ``source_key`` naming the operation that
produced them (``TXN-<id>`` for a bank transaction); writing an entry for a
key that already has entries deletes those first, inside the same unit, so
reprocessing never doubles the ledger impact.

Bank transactions post against the bank/clearing account:

    money in  (credit amount)   Dr bank              Cr classified account
    money out (debit amount)    Dr classified account Cr bank
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional, Sequence

from ledgerkit.config import PostingSettings
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    EntrySide,
    JournalLine,
    PostingSummary,
    Transaction,
    TransactionStatus,
    ZERO,
)
from ledgerkit.domain.errors import (
    DomainError,
    DuplicatePostingError,
    ImbalancedEntryError,
    NotFoundError,
    ValidationError,
    already_posted,
    fiscal_period_not_found,
    no_fiscal_period_for_date,
    transaction_not_found,
)
from ledgerkit.domain.locking import company_lock

logger = logging.getLogger(__name__)

PAYROLL_SIDES: dict[str, EntrySide] = {
    "gross": EntrySide.DEBIT,
    "deductions": EntrySide.CREDIT,
    "net": EntrySide.CREDIT,
}


def transaction_source_key(transaction_id: int) -> str:
    return f"TXN-{transaction_id}"


def check_amount(label: str, amount, quantum: Decimal) -> Decimal:
    """Validate a posting amount and return it as a Decimal.

    Raises:
        ValidationError: If the amount is not a finite non-negative number
            expressible in the currency's minor unit
    """
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{label} amount {amount!r} is not a number")
    if not value.is_finite():
        raise ValidationError(f"{label} amount {amount!r} is not a number")
    if value < ZERO:
        raise ValidationError(f"{label} amount {value} must not be negative")
    if value != value.quantize(quantum):
        raise ValidationError(f"{label} amount {value} has more precision than {quantum}")
    return value


def check_balanced(reference: str, lines: Sequence[JournalLine]) -> None:
    """Reject an entry whose debits and credits differ.

    Raises:
        ImbalancedEntryError: If the totals differ
    """
    total_debits = sum((line.debit for line in lines), ZERO)
    total_credits = sum((line.credit for line in lines), ZERO)
    if total_debits != total_credits:
        raise ImbalancedEntryError(reference, total_debits, total_credits)


def transaction_lines(txn: Transaction, bank_account_code: str, reference: str) -> list[JournalLine]:
    """Build the two lines posting a classified bank transaction."""
    amount = txn.amount
    if txn.is_money_in:
        debit_code, credit_code = bank_account_code, txn.account_code
    else:
        debit_code, credit_code = txn.account_code, bank_account_code

    return [
        JournalLine(
            account_code=debit_code,
            debit=amount,
            credit=ZERO,
            description=txn.description,
            reference=reference,
            source_transaction_id=txn.id,
        ),
        JournalLine(
            account_code=credit_code,
            debit=ZERO,
            credit=amount,
            description=txn.description,
            reference=reference,
            source_transaction_id=txn.id,
        ),
    ]


class LedgerPostingService:
    """Service for posting journal entries into the ledger."""

    def __init__(self, db: Database, settings: Optional[PostingSettings] = None):
        """Initialize posting service.

        Args:
            db: Database instance
            settings: Posting settings (defaults to the environment)
        """
        self.db = db
        self.settings = settings if settings is not None else PostingSettings.from_env()

    def post_transaction(
        self,
        transaction_id: int,
        actor: str,
        bank_account_code: Optional[str] = None,
        strict: bool = False,
    ) -> Optional[int]:
        """Post one classified transaction.

        Args:
            transaction_id: Transaction ID
            actor: Name recorded as the creator of the entry
            bank_account_code: Offsetting account (defaults to the settings)
            strict: Raise instead of skipping when the transaction is already posted

        Returns:
            Journal entry ID, or None if the transaction was already posted

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If the transaction is unclassified, its amounts are
                invalid, or no fiscal period covers it
            DuplicatePostingError: If already posted and ``strict`` is set
            PersistenceError: If the store rejects the entry (nothing is written)
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        with company_lock(txn.company_id):
            # Re-read under the lock so a concurrent run cannot post it twice
            txn = self.db.get_transaction(transaction_id)
            if txn.journal_entry_id is not None:
                if strict:
                    raise DuplicatePostingError(already_posted(txn.id, txn.journal_entry_id))
                logger.warning(
                    "Skipping transaction %s: already posted to journal entry %s",
                    txn.id,
                    txn.journal_entry_id,
                )
                return None

            if txn.status != TransactionStatus.CLASSIFIED:
                raise ValidationError(f"Transaction {txn.id} has no account assigned and cannot be posted")

            quantum = self.settings.quantum
            debit = check_amount("Debit", txn.debit_amount, quantum)
            credit = check_amount("Credit", txn.credit_amount, quantum)
            if (debit == ZERO) == (credit == ZERO):
                raise ValidationError(
                    f"Transaction {txn.id} must have exactly one of debit and credit amount"
                )

            fiscal_period_id = self._fiscal_period_for(txn)
            reference = transaction_source_key(txn.id)
            lines = transaction_lines(txn, bank_account_code or self.settings.bank_account_code, reference)
            check_balanced(reference, lines)

            with self.db.atomic():
                entry_id = self._write_entry(
                    company_id=txn.company_id,
                    fiscal_period_id=fiscal_period_id,
                    reference=reference,
                    entry_date=txn.date,
                    description=txn.description,
                    source_key=reference,
                    actor=actor,
                    lines=lines,
                )
                self.db.set_transaction_journal_entry(txn.id, entry_id)

        logger.info("Posted transaction %s as journal entry %s (%s)", txn.id, entry_id, reference)
        return entry_id

    def post_classified_transactions(
        self,
        company_id: int,
        actor: str,
        bank_account_code: Optional[str] = None,
    ) -> PostingSummary:
        """Post every classified transaction that is not posted yet.

        Each transaction is its own unit; a failing entry is rolled back,
        logged and counted while the rest of the batch carries on.

        Returns:
            Summary of the run
        """
        posted = skipped = failed = 0
        errors: list[str] = []

        with company_lock(company_id):
            transactions = self.db.list_transactions(company_id, classified_unposted=True)
            logger.info("Posting %d classified transactions for company %s", len(transactions), company_id)

            for txn in transactions:
                try:
                    entry_id = self.post_transaction(txn.id, actor, bank_account_code=bank_account_code)
                except DomainError as e:
                    failed += 1
                    errors.append(f"Transaction {txn.id}: {e}")
                    logger.error("Failed to post transaction %s", txn.id, exc_info=True)
                    continue
                if entry_id is None:
                    skipped += 1
                else:
                    posted += 1

        logger.info(
            "Posting finished for company %s: %d posted, %d skipped, %d failed",
            company_id,
            posted,
            skipped,
            failed,
        )
        return PostingSummary(posted=posted, skipped=skipped, failed=failed, errors=tuple(errors))

    def post_aggregate(
        self,
        company_id: int,
        fiscal_period_id: int,
        totals: Mapping[str, Decimal],
        account_map: Mapping[str, str],
        actor: str,
        source_key: str,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
        sides: Mapping[str, EntrySide] = PAYROLL_SIDES,
    ) -> int:
        """Post a set of named totals as one multi-line journal entry.

        Each named total becomes one line on the account ``account_map`` gives
        for it, on the side ``sides`` gives for it (gross is debited,
        deductions and net are credited by default). Zero totals produce no
        line. Any previous entries with the same ``source_key`` are deleted in
        the same unit, so re-running a recomputed aggregate replaces it.

        Args:
            company_id: Company ID
            fiscal_period_id: Fiscal period the entry belongs to
            totals: Named amounts, e.g. {"gross": ..., "deductions": ..., "net": ...}
            account_map: Named total -> account code
            actor: Name recorded as the creator of the entry
            source_key: Identity of the logical operation, e.g. "PAYROLL-2024-03"
            entry_date: Entry date (defaults to the period's end date)
            description: Entry description
            sides: Named total -> debit or credit

        Returns:
            Journal entry ID

        Raises:
            NotFoundError: If the fiscal period does not exist
            ValidationError: If a total is unknown, unmapped, negative or too precise
            ImbalancedEntryError: If debits and credits differ (nothing is written)
            PersistenceError: If the store rejects the entry (nothing is written)
        """
        if not source_key:
            raise ValidationError("Aggregate postings need a source key")

        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(fiscal_period_not_found(fiscal_period_id))

        quantum = self.settings.quantum
        lines: list[JournalLine] = []
        for name, raw_amount in totals.items():
            side = sides.get(name)
            if side is None:
                raise ValidationError(f"Unknown total '{name}'; expected one of {', '.join(sides)}")
            amount = check_amount(name, raw_amount, quantum)
            if amount == ZERO:
                continue
            account_code = account_map.get(name)
            if not account_code:
                raise ValidationError(f"No account mapped for total '{name}'")

            lines.append(
                JournalLine(
                    account_code=account_code,
                    debit=amount if side == EntrySide.DEBIT else ZERO,
                    credit=amount if side == EntrySide.CREDIT else ZERO,
                    description=f"{description or source_key} - {name}",
                    reference=source_key,
                )
            )

        if not lines:
            raise ValidationError(f"Aggregate '{source_key}' has no non-zero totals to post")
        check_balanced(source_key, lines)

        with company_lock(company_id):
            with self.db.atomic():
                entry_id = self._write_entry(
                    company_id=company_id,
                    fiscal_period_id=period.id,
                    reference=source_key,
                    entry_date=entry_date or period.end_date,
                    description=description,
                    source_key=source_key,
                    actor=actor,
                    lines=lines,
                )

        logger.info("Posted aggregate %s as journal entry %s (%d lines)", source_key, entry_id, len(lines))
        return entry_id

    def unpost_transaction(self, transaction_id: int, actor: str) -> None:
        """Remove a transaction's journal entry, returning it to the classified state.

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If the transaction is not posted
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        with company_lock(txn.company_id):
            txn = self.db.get_transaction(transaction_id)
            if txn.journal_entry_id is None:
                raise ValidationError(f"Transaction {transaction_id} is not posted")
            with self.db.atomic():
                self.db.delete_journal_entry(txn.journal_entry_id)

        logger.info(
            "Unposted transaction %s (journal entry %s removed by %s)",
            transaction_id,
            txn.journal_entry_id,
            actor,
        )

    def _fiscal_period_for(self, txn: Transaction) -> int:
        if txn.fiscal_period_id is not None:
            return txn.fiscal_period_id
        period = self.db.find_fiscal_period(txn.company_id, txn.date)
        if period is None:
            raise ValidationError(no_fiscal_period_for_date(txn.company_id, txn.date))
        return period.id

    def _write_entry(
        self,
        company_id: int,
        fiscal_period_id: int,
        reference: str,
        entry_date: date,
        description: Optional[str],
        source_key: str,
        actor: str,
        lines: Sequence[JournalLine],
    ) -> int:
        """Replace any entries for the source key with a new one. Call inside ``atomic()``."""
        for previous in self.db.list_journal_entries(company_id, source_key=source_key):
            logger.info("Replacing journal entry %s for %s", previous.id, source_key)
            self.db.delete_journal_entry(previous.id)

        entry_id = self.db.create_journal_entry(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            reference=reference,
            entry_date=entry_date,
            description=description,
            source_key=source_key,
            created_by=actor,
            lines=lines,
        )

        # The stored amounts must still balance; raising here rolls the unit back
        total_debits, total_credits = self.db.journal_entry_totals(entry_id)
        if total_debits != total_credits:
            raise ImbalancedEntryError(reference, total_debits, total_credits)
        return entry_id
