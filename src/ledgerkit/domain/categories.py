"""Account categories derived from account-code ranges.

The category of an account is a function of the numeric prefix of its code
(the part before any dash, so ``8100-001`` belongs to ``8100``):

    Assets       1000-2999   debit normal
    Liabilities  3000-4999   credit normal
    Equity       5000-5999   credit normal
    Revenue      6000-7999   credit normal
    Expenses     8000-9999   debit normal

Codes that are non-numeric, shorter than four digits, or outside 1000-9999
have no category.

Closing balances are signed by the normal side: a debit-normal account reports
``debits - credits`` and a credit-normal account reports ``credits - debits``,
so a positive balance is always the "usual" position of the account. A bank
account (asset) that paid out more than it received therefore shows a negative
balance, and a liability that grew shows a positive one.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

ACCOUNT_CODE_MIN_LENGTH = 4
SUB_ACCOUNT_SEPARATOR = "-"


class NormalBalance(str, Enum):
    """Side on which an account's balance normally increases."""

    DEBIT = "D"
    CREDIT = "C"


class AccountCategory(str, Enum):
    """Balance-sheet and income-statement account categories."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def normal_balance(self) -> NormalBalance:
        if self in (AccountCategory.ASSET, AccountCategory.EXPENSE):
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT


CATEGORY_RANGES: tuple[tuple[int, int, AccountCategory], ...] = (
    (1000, 2999, AccountCategory.ASSET),
    (3000, 4999, AccountCategory.LIABILITY),
    (5000, 5999, AccountCategory.EQUITY),
    (6000, 7999, AccountCategory.REVENUE),
    (8000, 9999, AccountCategory.EXPENSE),
)


def account_code_prefix(code: str) -> str:
    """Return the main-account part of a code (``"8100-001"`` -> ``"8100"``)."""
    return code.split(SUB_ACCOUNT_SEPARATOR, 1)[0].strip()


def category_for_code(code: Optional[str]) -> Optional[AccountCategory]:
    """Derive the account category from an account code.

    Args:
        code: Account code, optionally with a sub-account suffix

    Returns:
        The category, or None if the code cannot be categorized
    """
    if not code:
        return None
    prefix = account_code_prefix(code)
    if len(prefix) < ACCOUNT_CODE_MIN_LENGTH or not prefix.isascii() or not prefix.isdigit():
        return None

    number = int(prefix)
    for low, high, category in CATEGORY_RANGES:
        if low <= number <= high:
            return category
    return None


def normal_balance_for_code(code: Optional[str]) -> NormalBalance:
    """Return the normal side for a code; uncategorized codes are treated as debit normal."""
    category = category_for_code(code)
    if category is None:
        return NormalBalance.DEBIT
    return category.normal_balance


def signed_balance(normal_balance: NormalBalance, debits: Decimal, credits: Decimal) -> Decimal:
    """Net debits and credits into a balance signed by the normal side."""
    if normal_balance == NormalBalance.DEBIT:
        return debits - credits
    return credits - debits
