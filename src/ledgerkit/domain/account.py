"""Chart of accounts domain service."""

import json
import logging
from importlib import resources
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.categories import category_for_code
from ledgerkit.domain.entities import Account as AccountEntity
from ledgerkit.domain.errors import ConflictError, ValidationError, duplicate_account

logger = logging.getLogger(__name__)

DEFAULT_CHART_RESOURCE = "default_chart.json"


def default_chart() -> list[tuple[str, str]]:
    """Return the (code, name) pairs of the default chart of accounts."""
    content = resources.files("ledgerkit").joinpath("data", DEFAULT_CHART_RESOURCE).read_text(encoding="utf-8")
    data = json.loads(content)
    return [(row["code"], row["name"]) for row in data["accounts"]]


class ChartOfAccountsService:
    """Service for managing a company's chart of accounts."""

    def __init__(self, db: Database):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, company_id: int, code: str, name: str) -> int:
        """Create a new account.

        Args:
            company_id: Company ID
            code: Account code, e.g. "8100" or "8100-001"
            name: Display name

        Returns:
            Account ID

        Raises:
            ValidationError: If code or name is empty, or the code has no category
            ConflictError: If the code already exists for the company
        """
        code = code.strip() if code else code
        if not code:
            raise ValidationError("Account code cannot be empty")
        if not name or not name.strip():
            raise ValidationError("Account name cannot be empty")
        if category_for_code(code) is None:
            raise ValidationError(
                f"Account code '{code}' does not fall in any category range (1000-9999)"
            )

        if self.db.get_account(company_id, code) is not None:
            raise ConflictError(duplicate_account(company_id, code))

        return self.db.create_account(company_id=company_id, code=code, name=name.strip())

    def get_account(self, company_id: int, code: str) -> Optional[AccountEntity]:
        """Get account by code.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(company_id, code)

    def list_accounts(self, company_id: int) -> list[AccountEntity]:
        """List all accounts of a company ordered by code."""
        return self.db.list_accounts(company_id)

    def account_names(self, company_id: int) -> dict[str, str]:
        """Return a code -> name lookup for the company's chart."""
        return {acc.code: acc.name for acc in self.db.list_accounts(company_id)}

    def seed_default_chart(self, company_id: int) -> int:
        """Create the default accounts the company does not have yet.

        Returns:
            Number of accounts created
        """
        existing = set(self.account_names(company_id))
        created = 0
        with self.db.atomic():
            for code, name in default_chart():
                if code in existing:
                    continue
                self.db.create_account(company_id=company_id, code=code, name=name)
                created += 1

        logger.info("Seeded %d default accounts for company %s", created, company_id)
        return created
