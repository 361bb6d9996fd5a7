"""Tests for recording bank transactions."""

import pytest
from datetime import date
from decimal import Decimal

from ledgerkit.domain.entities import TransactionStatus
from ledgerkit.domain.errors import NotFoundError, ValidationError

COMPANY_ID = 1


def test_create_transaction(transaction_service):
    """Test creating a transaction."""
    txn_id = transaction_service.create_transaction(
        company_id=COMPANY_ID,
        date=date(2024, 3, 15),
        description="MONTHLY SERVICE FEE",
        debit_amount=Decimal("150.00"),
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.description == "MONTHLY SERVICE FEE"
    assert txn.debit_amount == Decimal("150.00")
    assert txn.credit_amount == Decimal("0")
    assert txn.status == TransactionStatus.UNCLASSIFIED
    assert not txn.is_money_in
    assert txn.imported_at is not None


def test_create_money_in(transaction_service):
    txn_id = transaction_service.create_transaction(
        COMPANY_ID, date(2024, 3, 20), "CREDIT TRANSFER COROBRIK", credit_amount=Decimal("12500.00")
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.is_money_in
    assert txn.amount == Decimal("12500.00")


@pytest.mark.parametrize(
    "debit,credit,message",
    [
        ("0", "0", "Exactly one"),
        ("1.00", "1.00", "Exactly one"),
        ("-1.00", "0", "negative"),
        ("0", "-5", "negative"),
        ("150.005", "0", "more precision than 0.01"),
        ("0", "0.001", "more precision than 0.01"),
    ],
)
def test_create_transaction_amount_validation(transaction_service, debit, credit, message):
    with pytest.raises(ValidationError, match=message):
        transaction_service.create_transaction(
            COMPANY_ID, date(2024, 3, 15), "X", debit_amount=Decimal(debit), credit_amount=Decimal(credit)
        )


def test_create_transaction_with_period(transaction_service, sample_period):
    txn_id = transaction_service.create_transaction(
        COMPANY_ID, date(2024, 3, 15), "X", debit_amount=Decimal("1.00"), fiscal_period_id=sample_period.id
    )

    assert transaction_service.get_transaction(txn_id).fiscal_period_id == sample_period.id


def test_create_transaction_with_foreign_period(transaction_service, sample_period):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            2, date(2024, 3, 15), "X", debit_amount=Decimal("1.00"), fiscal_period_id=sample_period.id
        )


def test_description_may_be_missing(transaction_service):
    txn_id = transaction_service.create_transaction(COMPANY_ID, date(2024, 3, 15), None, debit_amount=Decimal("1"))

    assert transaction_service.get_transaction(txn_id).description is None


def test_get_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError, match="Transaction 99 not found"):
        transaction_service.get_transaction(99)


def test_list_transactions_by_status(transaction_service, classification_service, make_transaction, sample_rules):
    fee = make_transaction("MONTHLY SERVICE FEE", debit="150.00")
    other = make_transaction("MYSTERY", debit="1.00")
    classification_service.classify_unclassified(COMPANY_ID)

    assert [t.id for t in transaction_service.list_transactions(COMPANY_ID, unclassified=True)] == [other]
    assert [t.id for t in transaction_service.list_transactions(COMPANY_ID, classified_unposted=True)] == [fee]
    assert len(transaction_service.list_transactions(COMPANY_ID)) == 2
