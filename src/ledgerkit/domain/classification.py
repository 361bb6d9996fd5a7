"""Classification runner.

Applies the classifier to a company's transactions and persists the account
assignments. Every transaction is its own unit of work: a store failure on
one row is logged and counted, and the batch carries on with the next row.
Rows the rules do not match are left exactly as they were.
"""

import logging
from datetime import datetime, UTC
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    ClassificationResult,
    ClassificationSummary,
    Transaction,
    TransactionStatus,
)
from ledgerkit.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
)
from ledgerkit.domain.locking import company_lock
from ledgerkit.domain.rules import RuleCatalog

logger = logging.getLogger(__name__)

AUTO_CLASSIFIER = "auto-classifier"


class ClassificationService:
    """Service for classifying transactions against the rule catalog."""

    def __init__(self, db: Database, catalog: Optional[RuleCatalog] = None):
        """Initialize classification service.

        Args:
            db: Database instance
            catalog: Rule catalog (defaults to one over the same database)
        """
        self.db = db
        self.catalog = catalog if catalog is not None else RuleCatalog(db)

    def preview(self, company_id: int, description: Optional[str]) -> ClassificationResult:
        """Classify a description without touching any transaction."""
        return self.catalog.classifier(company_id).classify(description)

    def classify_unclassified(self, company_id: int, actor: str = AUTO_CLASSIFIER) -> ClassificationSummary:
        """Classify every transaction of the company that has no account yet.

        Args:
            company_id: Company ID
            actor: Name recorded as the classifier of each updated row

        Returns:
            Summary; ``classified`` is the number of rows newly classified
        """
        with company_lock(company_id):
            transactions = self.db.list_transactions(company_id, unclassified=True)
            logger.info("Classifying %d unclassified transactions for company %s", len(transactions), company_id)
            summary = self._run(company_id, transactions, actor)
        logger.info(
            "Classification finished for company %s: %d classified, %d unmatched, %d failed",
            company_id,
            summary.classified,
            summary.unmatched,
            summary.failed,
        )
        return summary

    def reclassify_all(self, company_id: int, actor: str) -> ClassificationSummary:
        """Re-run the rules over every transaction of the company.

        Matched rows are overwritten with the winning account, the actor and a
        fresh timestamp. A posted transaction whose account changes has its
        journal entry removed in the same unit as the reassignment, returning
        it to the classified state so it can be posted again.

        Args:
            company_id: Company ID
            actor: Name recorded as the classifier of each updated row

        Returns:
            Summary of the run
        """
        with company_lock(company_id):
            transactions = self.db.list_transactions(company_id)
            logger.info("Reclassifying %d transactions for company %s", len(transactions), company_id)
            summary = self._run(company_id, transactions, actor)
        logger.info(
            "Reclassification finished for company %s: %d classified, %d unmatched, %d failed, %d unposted",
            company_id,
            summary.classified,
            summary.unmatched,
            summary.failed,
            summary.unpostings,
        )
        return summary

    def classify_transaction(self, transaction_id: int, account_code: str, actor: str) -> None:
        """Assign an account to a transaction by hand.

        Raises:
            NotFoundError: If the transaction or the account does not exist
            ValidationError: If the transaction is already posted
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        account = self.db.get_account(txn.company_id, account_code)
        if account is None:
            raise NotFoundError(account_not_found(txn.company_id, account_code))

        with company_lock(txn.company_id):
            # Re-read under the lock so a concurrent post cannot slip in between
            txn = self.db.get_transaction(transaction_id)
            if txn.status == TransactionStatus.POSTED:
                raise ValidationError(
                    f"Transaction {transaction_id} is posted; unpost it before changing its account"
                )
            self.db.update_transaction_classification(
                transaction_id,
                account_code=account.code,
                account_name=account.name,
                classified_at=datetime.now(UTC),
                classified_by=actor,
            )

        logger.info("Transaction %s assigned to %s by %s", transaction_id, account.code, actor)

    def _run(self, company_id: int, transactions: list[Transaction], actor: str) -> ClassificationSummary:
        classifier = self.catalog.classifier(company_id)
        account_names = {acc.code: acc.name for acc in self.db.list_accounts(company_id)}

        classified = unmatched = failed = unpostings = 0
        errors: list[str] = []

        for txn in transactions:
            result = classifier.classify(txn.description)
            if not result.matched:
                unmatched += 1
                continue

            try:
                unposted = self._apply(txn, result, account_names, actor)
            except DomainError as e:
                failed += 1
                errors.append(f"Transaction {txn.id}: {e}")
                logger.error("Failed to classify transaction %s", txn.id, exc_info=True)
                continue

            classified += 1
            if unposted:
                unpostings += 1

        return ClassificationSummary(
            classified=classified,
            unmatched=unmatched,
            failed=failed,
            unpostings=unpostings,
            errors=tuple(errors),
        )

    def _apply(
        self,
        txn: Transaction,
        result: ClassificationResult,
        account_names: dict[str, str],
        actor: str,
    ) -> bool:
        """Persist one assignment. Returns True if a posting had to be removed."""
        account_name = account_names.get(result.account_code)
        if account_name is None:
            logger.warning(
                "Rule '%s' assigned account %s which is not in the chart of accounts for company %s",
                result.rule_name,
                result.account_code,
                txn.company_id,
            )

        moves_posted = (
            txn.status == TransactionStatus.POSTED and txn.account_code != result.account_code
        )
        with self.db.atomic():
            if moves_posted:
                self.db.delete_journal_entry(txn.journal_entry_id)
            self.db.update_transaction_classification(
                txn.id,
                account_code=result.account_code,
                account_name=account_name,
                classified_at=datetime.now(UTC),
                classified_by=actor,
            )

        if moves_posted:
            logger.info(
                "Transaction %s moved from %s to %s; journal entry %s removed",
                txn.id,
                txn.account_code,
                result.account_code,
                txn.journal_entry_id,
            )
        return moves_posted
