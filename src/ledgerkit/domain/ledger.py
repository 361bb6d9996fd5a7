"""Ledger aggregator and the reports built on it.

Closing balances are recomputed from the posted journal lines of a fiscal
period on every call. Nothing is cached, so a failed or interrupted read can
never leave a derived figure behind. The trial balance and balance-sheet
totals read closing balances only, never raw transactions.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.categories import (
    AccountCategory,
    category_for_code,
    normal_balance_for_code,
    signed_balance,
)
from ledgerkit.domain.entities import (
    AccountBalance,
    BalanceSheetTotals,
    TrialBalance,
    ZERO,
)
from ledgerkit.domain.errors import NotFoundError, fiscal_period_not_found

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")
UNKNOWN_ACCOUNT_NAME = "Unknown account"


class LedgerService:
    """Service for reading account balances out of the journal."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def closing_balances(self, company_id: int, fiscal_period_id: int) -> dict[str, AccountBalance]:
        """Compute every account's closing balance for a fiscal period.

        Only accounts with at least one non-zero posted line appear. Balances
        are signed by the account's normal side: assets and expenses report
        debits minus credits, liabilities, equity and revenue report credits
        minus debits. Codes without a category are treated as debit normal.

        Args:
            company_id: Company ID
            fiscal_period_id: Fiscal period ID

        Returns:
            Account code -> balance, ordered by account code

        Raises:
            NotFoundError: If the fiscal period does not exist for the company
        """
        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(fiscal_period_not_found(fiscal_period_id))

        debits: dict[str, Decimal] = defaultdict(lambda: ZERO)
        credits: dict[str, Decimal] = defaultdict(lambda: ZERO)
        touched: set[str] = set()
        for line in self.db.list_period_lines(company_id, fiscal_period_id):
            if line.debit == ZERO and line.credit == ZERO:
                continue
            touched.add(line.account_code)
            debits[line.account_code] += line.debit
            credits[line.account_code] += line.credit

        names = {acc.code: acc.name for acc in self.db.list_accounts(company_id)}
        balances: dict[str, AccountBalance] = {}
        for code in sorted(touched):
            normal = normal_balance_for_code(code)
            name = names.get(code)
            if name is None:
                logger.warning("Account %s has postings but is not in the chart of accounts", code)
                name = UNKNOWN_ACCOUNT_NAME
            balances[code] = AccountBalance(
                account_code=code,
                account_name=name,
                category=category_for_code(code),
                normal_balance=normal,
                period_debits=debits[code],
                period_credits=credits[code],
                closing_balance=signed_balance(normal, debits[code], credits[code]),
            )
        return balances

    def trial_balance(self, company_id: int, fiscal_period_id: int) -> TrialBalance:
        """Build a trial balance from the closing balances."""
        rows = tuple(self.closing_balances(company_id, fiscal_period_id).values())
        return TrialBalance(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            rows=rows,
            total_debits=sum((row.trial_balance_debit for row in rows), ZERO),
            total_credits=sum((row.trial_balance_credit for row in rows), ZERO),
        )

    def balance_sheet_totals(
        self,
        company_id: int,
        fiscal_period_id: int,
        tolerance: Optional[Decimal] = None,
    ) -> BalanceSheetTotals:
        """Sum closing balances by category into balance-sheet totals.

        Equity accounts form the opening equity; retained earnings add the
        period's net profit to it. Uncategorized accounts are left out and
        logged.
        """
        totals: dict[AccountCategory, Decimal] = {category: ZERO for category in AccountCategory}
        for balance in self.closing_balances(company_id, fiscal_period_id).values():
            if balance.category is None:
                logger.warning(
                    "Account %s has no category and is left out of the balance sheet",
                    balance.account_code,
                )
                continue
            totals[balance.category] += balance.closing_balance

        return BalanceSheetTotals(
            total_assets=totals[AccountCategory.ASSET],
            total_liabilities=totals[AccountCategory.LIABILITY],
            opening_equity=totals[AccountCategory.EQUITY],
            total_revenue=totals[AccountCategory.REVENUE],
            total_expenses=totals[AccountCategory.EXPENSE],
            tolerance=DEFAULT_TOLERANCE if tolerance is None else tolerance,
        )
