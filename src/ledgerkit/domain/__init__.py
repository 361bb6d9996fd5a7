"""Domain layer for ledgerkit application."""

from ledgerkit.domain.account import ChartOfAccountsService
from ledgerkit.domain.period import FiscalPeriodService
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.domain.rules import RuleCatalog
from ledgerkit.domain.classifier import Classifier
from ledgerkit.domain.classification import ClassificationService
from ledgerkit.domain.posting import LedgerPostingService
from ledgerkit.domain.ledger import LedgerService

__all__ = [
    "ChartOfAccountsService",
    "FiscalPeriodService",
    "TransactionService",
    "RuleCatalog",
    "Classifier",
    "ClassificationService",
    "LedgerPostingService",
    "LedgerService",
]
