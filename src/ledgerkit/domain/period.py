"""Fiscal period domain service."""

from typing import Optional
from datetime import date

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import FiscalPeriod
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    fiscal_period_not_found,
    no_fiscal_period_for_date,
)


class FiscalPeriodService:
    """Service for managing fiscal periods."""

    def __init__(self, db: Database):
        """Initialize fiscal period service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_period(self, company_id: int, name: str, start_date: date, end_date: date) -> int:
        """Create a fiscal period.

        Args:
            company_id: Company ID
            name: Period name, e.g. "FY2024"
            start_date: First day of the period
            end_date: Last day of the period (inclusive)

        Returns:
            Fiscal period ID

        Raises:
            ValidationError: If the name is empty or the dates are reversed
            ConflictError: If the name is taken or the range overlaps another period
        """
        if not name or not name.strip():
            raise ValidationError("Fiscal period name cannot be empty")
        if end_date < start_date:
            raise ValidationError(
                f"Fiscal period end date {end_date.isoformat()} is before start date {start_date.isoformat()}"
            )

        for period in self.db.list_fiscal_periods(company_id):
            if period.name == name:
                raise ConflictError(f"Fiscal period '{name}' already exists for company {company_id}")
            if period.start_date <= end_date and start_date <= period.end_date:
                raise ConflictError(f"Fiscal period '{name}' overlaps existing period '{period.name}'")

        return self.db.create_fiscal_period(
            company_id=company_id, name=name, start_date=start_date, end_date=end_date
        )

    def get_period(self, fiscal_period_id: int) -> FiscalPeriod:
        """Get fiscal period by ID.

        Raises:
            NotFoundError: If the period does not exist
        """
        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None:
            raise NotFoundError(fiscal_period_not_found(fiscal_period_id))
        return period

    def list_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List fiscal periods ordered by start date."""
        return self.db.list_fiscal_periods(company_id)

    def find_period(self, company_id: int, on_date: date) -> Optional[FiscalPeriod]:
        """Find the period containing a date, or None."""
        return self.db.find_fiscal_period(company_id, on_date)

    def period_for_date(self, company_id: int, on_date: date) -> FiscalPeriod:
        """Find the period containing a date.

        Raises:
            ValidationError: If no period covers the date
        """
        period = self.db.find_fiscal_period(company_id, on_date)
        if period is None:
            raise ValidationError(no_fiscal_period_for_date(company_id, on_date))
        return period
