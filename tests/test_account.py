"""Tests for the chart of accounts service."""

import pytest

from ledgerkit.domain.account import default_chart
from ledgerkit.domain.categories import category_for_code
from ledgerkit.domain.errors import ConflictError, ValidationError

COMPANY_ID = 1


def test_create_account(chart_service):
    """Test creating an account."""
    account_id = chart_service.create_account(COMPANY_ID, " 8500-001 ", "Cartrack Vehicle Tracking")

    account = chart_service.get_account(COMPANY_ID, "8500-001")
    assert account.id == account_id
    assert account.name == "Cartrack Vehicle Tracking"


def test_create_duplicate_account(chart_service):
    """Test that duplicate codes are rejected per company."""
    chart_service.create_account(COMPANY_ID, "1100", "Bank")

    with pytest.raises(ConflictError):
        chart_service.create_account(COMPANY_ID, "1100", "Bank again")

    chart_service.create_account(2, "1100", "Bank")


@pytest.mark.parametrize("code,name", [("", "Empty"), ("1100", " "), ("ABCD", "Letters"), ("0999", "Too low")])
def test_create_account_validation(chart_service, code, name):
    with pytest.raises(ValidationError):
        chart_service.create_account(COMPANY_ID, code, name)


def test_seed_default_chart(chart_service):
    created = chart_service.seed_default_chart(COMPANY_ID)

    assert created == len(default_chart())
    assert chart_service.seed_default_chart(COMPANY_ID) == 0
    names = chart_service.account_names(COMPANY_ID)
    assert names["1100"] == "Bank - Current Account"
    assert names["8100"] == "Employee Costs"


def test_seed_keeps_existing_accounts(chart_service):
    chart_service.create_account(COMPANY_ID, "1100", "Main Bank")

    chart_service.seed_default_chart(COMPANY_ID)

    assert chart_service.get_account(COMPANY_ID, "1100").name == "Main Bank"


def test_default_chart_is_categorized():
    codes = [code for code, _ in default_chart()]

    assert len(codes) == len(set(codes))
    assert all(category_for_code(code) is not None for code in codes)


def test_list_accounts_is_ordered(chart_service, sample_chart):
    codes = [acc.code for acc in chart_service.list_accounts(COMPANY_ID)]

    assert codes == sorted(codes)
