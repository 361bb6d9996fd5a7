"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal

from ledgerkit.config import MONEY_SCALE
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Transaction as TransactionEntity, ZERO
from ledgerkit.domain.errors import NotFoundError, ValidationError, transaction_not_found
from ledgerkit.domain.posting import check_amount

STORED_QUANTUM = Decimal(1).scaleb(-MONEY_SCALE)


class TransactionService:
    """Service for recording bank transactions handed over by ingestion."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        company_id: int,
        date: date,
        description: Optional[str],
        debit_amount: Decimal = ZERO,
        credit_amount: Decimal = ZERO,
        fiscal_period_id: Optional[int] = None,
    ) -> int:
        """Record a bank transaction.

        The debit amount is money leaving the bank account and the credit
        amount is money received, as printed on a bank statement. Exactly one
        of them must be non-zero.

        Args:
            company_id: Company ID
            date: Transaction date
            description: Free-text narrative from the statement
            debit_amount: Money out
            credit_amount: Money in
            fiscal_period_id: Optional explicit fiscal period

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amounts are negative, finer than the stored
                scale, or not exactly one of them is non-zero
            NotFoundError: If the fiscal period does not exist
        """
        debit_amount = check_amount("Debit", debit_amount, STORED_QUANTUM)
        credit_amount = check_amount("Credit", credit_amount, STORED_QUANTUM)
        if (debit_amount == ZERO) == (credit_amount == ZERO):
            raise ValidationError("Exactly one of debit amount and credit amount must be non-zero")

        if fiscal_period_id is not None:
            period = self.db.get_fiscal_period(fiscal_period_id)
            if period is None or period.company_id != company_id:
                raise NotFoundError(f"Fiscal period {fiscal_period_id} not found for company {company_id}")

        return self.db.create_transaction(
            company_id=company_id,
            date=date,
            description=description,
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            fiscal_period_id=fiscal_period_id,
        )

    def get_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        company_id: int,
        unclassified: bool = False,
        classified_unposted: bool = False,
        fiscal_period_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List a company's transactions ordered by date."""
        return self.db.list_transactions(
            company_id,
            unclassified=unclassified,
            classified_unposted=classified_unposted,
            fiscal_period_id=fiscal_period_id,
        )
