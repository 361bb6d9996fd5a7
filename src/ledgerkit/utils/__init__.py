"""Utility functions for ledgerkit."""

from ledgerkit.utils.date_parser import parse_date, parse_month
from ledgerkit.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "parse_amount"]
