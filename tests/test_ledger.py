"""Tests for closing balances and the reports built on them."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.categories import AccountCategory, NormalBalance
from ledgerkit.domain.entities import JournalLine
from ledgerkit.domain.errors import NotFoundError
from ledgerkit.domain.ledger import UNKNOWN_ACCOUNT_NAME

COMPANY_ID = 1

PAYROLL_ACCOUNTS = {"gross": "8100", "deductions": "3400", "net": "1100"}


@pytest.fixture
def posted_payroll(posting_service, sample_chart, sample_period):
    """Post March payroll: gross 10000, deductions 2500, net 7500."""
    return posting_service.post_aggregate(
        COMPANY_ID,
        sample_period.id,
        {"gross": Decimal("10000.00"), "deductions": Decimal("2500.00"), "net": Decimal("7500.00")},
        PAYROLL_ACCOUNTS,
        actor="payroll",
        source_key="PAYROLL-2024-03",
    )


def test_closing_balances_after_payroll(ledger_service, sample_period, posted_payroll):
    """Test balances are signed by each account's normal side."""
    balances = ledger_service.closing_balances(COMPANY_ID, sample_period.id)

    assert list(balances) == ["1100", "3400", "8100"]
    assert balances["8100"].closing_balance == Decimal("10000.00")
    assert balances["1100"].closing_balance == Decimal("-7500.00")
    assert balances["3400"].closing_balance == Decimal("2500.00")

    assert balances["8100"].normal_balance == NormalBalance.DEBIT
    assert balances["3400"].normal_balance == NormalBalance.CREDIT
    assert balances["8100"].category == AccountCategory.EXPENSE
    assert balances["8100"].account_name == "Employee Costs"
    assert balances["3400"].period_credits == Decimal("2500.00")
    assert balances["3400"].period_debits == Decimal("0")


def test_closing_balances_empty_period(ledger_service, sample_period):
    assert ledger_service.closing_balances(COMPANY_ID, sample_period.id) == {}


def test_closing_balances_only_count_the_period(temp_db, posting_service, ledger_service,
                                                period_service, sample_chart, sample_period):
    next_year = period_service.create_period(COMPANY_ID, "FY2025", date(2025, 3, 1), date(2026, 2, 28))
    posting_service.post_aggregate(
        COMPANY_ID, next_year, {"gross": Decimal("50.00"), "net": Decimal("50.00")},
        PAYROLL_ACCOUNTS, actor="payroll", source_key="PAYROLL-2025-03",
    )

    assert ledger_service.closing_balances(COMPANY_ID, sample_period.id) == {}
    assert ledger_service.closing_balances(COMPANY_ID, next_year)["8100"].closing_balance == Decimal("50.00")


def test_closing_balances_unknown_period(ledger_service):
    with pytest.raises(NotFoundError):
        ledger_service.closing_balances(COMPANY_ID, 99)


def test_closing_balances_other_company_period(ledger_service, sample_period):
    with pytest.raises(NotFoundError):
        ledger_service.closing_balances(2, sample_period.id)


def test_unknown_account_name_falls_back(temp_db, ledger_service, sample_period, caplog):
    """Test postings to an account missing from the chart still appear, with a placeholder name."""
    temp_db.create_journal_entry(
        company_id=COMPANY_ID,
        fiscal_period_id=sample_period.id,
        reference="MANUAL-1",
        entry_date=date(2024, 3, 31),
        description=None,
        source_key="MANUAL-1",
        created_by="alice",
        lines=[
            JournalLine("8100", Decimal("10.00"), Decimal("0")),
            JournalLine("1100", Decimal("0"), Decimal("10.00")),
        ],
    )

    with caplog.at_level(logging.WARNING, logger="ledgerkit.domain.ledger"):
        balances = ledger_service.closing_balances(COMPANY_ID, sample_period.id)

    assert balances["8100"].account_name == UNKNOWN_ACCOUNT_NAME
    assert "not in the chart of accounts" in caplog.text


def test_posted_transactions_feed_balances(posting_service, classification_service, ledger_service,
                                           make_transaction, sample_rules, sample_period):
    make_transaction("MONTHLY SERVICE FEE", debit="150.00")
    make_transaction("CREDIT TRANSFER COROBRIK", credit="1000.00")
    classification_service.classify_unclassified(COMPANY_ID)
    posting_service.post_classified_transactions(COMPANY_ID, actor="alice")

    balances = ledger_service.closing_balances(COMPANY_ID, sample_period.id)

    assert balances["9600"].closing_balance == Decimal("150.00")
    assert balances["6100-001"].closing_balance == Decimal("1000.00")
    assert balances["1100"].closing_balance == Decimal("850.00")


def test_trial_balance(ledger_service, sample_period, posted_payroll):
    trial = ledger_service.trial_balance(COMPANY_ID, sample_period.id)

    assert trial.is_balanced
    assert trial.total_debits == trial.total_credits == Decimal("10000.00")
    rows = {row.account_code: row for row in trial.rows}
    assert rows["8100"].trial_balance_debit == Decimal("10000.00")
    assert rows["1100"].trial_balance_credit == Decimal("7500.00")
    assert rows["1100"].trial_balance_debit == Decimal("0")
    assert rows["3400"].trial_balance_credit == Decimal("2500.00")


def test_balance_sheet_totals(posting_service, ledger_service, sample_period, posted_payroll):
    posting_service.post_aggregate(
        COMPANY_ID, sample_period.id,
        {"gross": Decimal("20000.00"), "net": Decimal("20000.00")},
        {"gross": "1100", "net": "6100"},
        actor="alice", source_key="SALES-2024-03",
    )

    totals = ledger_service.balance_sheet_totals(COMPANY_ID, sample_period.id)

    assert totals.total_assets == Decimal("12500.00")
    assert totals.total_liabilities == Decimal("2500.00")
    assert totals.total_revenue == Decimal("20000.00")
    assert totals.total_expenses == Decimal("10000.00")
    assert totals.net_profit == Decimal("10000.00")
    assert totals.retained_earnings == Decimal("10000.00")
    assert totals.difference == Decimal("0")
    assert totals.is_balanced


def test_balance_sheet_includes_opening_equity(posting_service, ledger_service, sample_period, sample_chart):
    posting_service.post_aggregate(
        COMPANY_ID, sample_period.id,
        {"gross": Decimal("5000.00"), "net": Decimal("5000.00")},
        {"gross": "1100", "net": "5000"},
        actor="alice", source_key="OPENING",
    )

    totals = ledger_service.balance_sheet_totals(COMPANY_ID, sample_period.id)

    assert totals.opening_equity == Decimal("5000.00")
    assert totals.total_equity == Decimal("5000.00")
    assert totals.is_balanced


def test_balance_sheet_leaves_out_uncategorized_accounts(temp_db, ledger_service, sample_period, caplog):
    temp_db.create_journal_entry(
        company_id=COMPANY_ID,
        fiscal_period_id=sample_period.id,
        reference="ODD-1",
        entry_date=date(2024, 3, 31),
        description=None,
        source_key="ODD-1",
        created_by="alice",
        lines=[
            JournalLine("1100", Decimal("10.00"), Decimal("0")),
            JournalLine("ZZZ", Decimal("0"), Decimal("10.00")),
        ],
    )

    with caplog.at_level(logging.WARNING, logger="ledgerkit.domain.ledger"):
        totals = ledger_service.balance_sheet_totals(COMPANY_ID, sample_period.id, tolerance=Decimal("0"))

    assert "has no category" in caplog.text
    assert totals.total_assets == Decimal("10.00")
    assert not totals.is_balanced
    assert totals.difference == Decimal("10.00")


def test_balance_sheet_tolerance(ledger_service, sample_period, posted_payroll):
    totals = ledger_service.balance_sheet_totals(COMPANY_ID, sample_period.id, tolerance=Decimal("5"))

    assert totals.tolerance == Decimal("5")
