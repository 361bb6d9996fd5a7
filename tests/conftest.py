"""Shared pytest fixtures for ledgerkit tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerkit.config import PostingSettings
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.account import ChartOfAccountsService
from ledgerkit.domain.classification import ClassificationService
from ledgerkit.domain.entities import MappingRule, PatternKind
from ledgerkit.domain.ledger import LedgerService
from ledgerkit.domain.period import FiscalPeriodService
from ledgerkit.domain.posting import LedgerPostingService
from ledgerkit.domain.rules import RuleCatalog
from ledgerkit.domain.transaction import TransactionService

COMPANY_ID = 1


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def chart_service(temp_db):
    """Create a ChartOfAccountsService with a temporary database."""
    return ChartOfAccountsService(temp_db)


@pytest.fixture
def period_service(temp_db):
    """Create a FiscalPeriodService with a temporary database."""
    return FiscalPeriodService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def rule_catalog(temp_db):
    """Create a RuleCatalog with a temporary database."""
    return RuleCatalog(temp_db)


@pytest.fixture
def classification_service(temp_db, rule_catalog):
    """Create a ClassificationService with a temporary database."""
    return ClassificationService(temp_db, catalog=rule_catalog)


@pytest.fixture
def posting_service(temp_db):
    """Create a LedgerPostingService with default settings."""
    return LedgerPostingService(temp_db, settings=PostingSettings(bank_account_code="1100", precision=2))


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def sample_chart(chart_service):
    """Seed the default chart of accounts for the test company."""
    chart_service.seed_default_chart(COMPANY_ID)
    return chart_service.account_names(COMPANY_ID)


@pytest.fixture
def sample_period(period_service):
    """Create a fiscal year for the test company."""
    period_id = period_service.create_period(COMPANY_ID, "FY2024", date(2024, 3, 1), date(2025, 2, 28))
    return period_service.get_period(period_id)


@pytest.fixture
def sample_rules(rule_catalog, sample_chart):
    """Add a small set of overlapping rules."""
    rules = [
        MappingRule("Bank Fees", PatternKind.SUBSTRING, "FEE", "9600", 20),
        MappingRule("Insurance Chauke Salaries", PatternKind.SUBSTRING, "INSURANCE CHAUKE", "8100", 10),
        MappingRule("Corobrik Service Revenue", PatternKind.SUBSTRING, "COROBRIK", "6100-001", 10),
        MappingRule("Professional Services", PatternKind.SUBSTRING, "SERVICE", "8700", 8),
        MappingRule("Insurance", PatternKind.SUBSTRING, "INSURANCE", "8800", 5),
    ]
    for rule in rules:
        rule_catalog.add_rule(COMPANY_ID, rule)
    return rules


@pytest.fixture
def make_transaction(transaction_service):
    """Return a helper that records a transaction for the test company."""

    def _make(description, debit="0", credit="0", on=date(2024, 3, 15)):
        return transaction_service.create_transaction(
            company_id=COMPANY_ID,
            date=on,
            description=description,
            debit_amount=Decimal(debit),
            credit_amount=Decimal(credit),
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
